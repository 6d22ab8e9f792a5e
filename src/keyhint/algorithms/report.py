from __future__ import annotations

from typing import Iterable

from ..consts import BINDING_COLUMN, COLUMN_HEADER, COLUMN_UNDERLINE
from ..types import BindingPair

def format_binding_row(pair: BindingPair) -> str:
    key = pair.key
    if len(key) < BINDING_COLUMN:
        return key.ljust(BINDING_COLUMN) + pair.command.name
    return f"{key} {pair.command.name}"

def format_binding_report(
    sections: Iterable[tuple[str, Iterable[BindingPair]]],
) -> str:
    """Render labeled sections of bindings as a binding report."""
    lines: list[str] = []
    for label, pairs in sections:
        if lines:
            lines.append("")
        if label:
            lines.append(label)
        lines.append(COLUMN_HEADER)
        lines.append(COLUMN_UNDERLINE)
        lines.extend(format_binding_row(pair) for pair in pairs)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
