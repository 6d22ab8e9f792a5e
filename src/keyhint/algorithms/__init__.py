"""All the algorithms independent of Qt."""

from .extract import extract_bindings, split_sections, unique_pairs
from .formatter import format_hint, hint_summary
from .report import format_binding_report, format_binding_row

__all__ = [
    "extract_bindings",
    "split_sections",
    "unique_pairs",
    "format_hint",
    "hint_summary",
    "format_binding_report",
    "format_binding_row",
]
