from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator

from ..consts import (
    BINDING_COLUMN,
    GLOBAL_BINDINGS_LABEL,
    PLACEHOLDER_MARKER,
    SELF_INSERT_COMMAND,
)
from ..types import BindingPair, Command

logger = logging.getLogger(__name__)

Resolver = Callable[[str], "Command | None"]

_COLUMN_HEADER = re.compile(r"^key\s+binding\s*$")
_COLUMN_UNDERLINE = re.compile(r"^-+\s+-+\s*$")
_SCOPE_LABEL = re.compile(r"^\S.*:\s*$")
# keys are single-space separated chords, the binding is the last token
_LOOSE_ROW = re.compile(r"^(?P<key>\S+(?: \S+)*)\s+(?P<binding>\S+)$")
_COMMAND_TOKEN = re.compile(r"^\w[\w\-.:/+*=!?]*$")

@dataclass
class _Section:
    label: str
    rows: list[str] = field(default_factory=list)

def extract_bindings(
    report: str,
    local_only: bool,
    resolve: Resolver,
) -> list[BindingPair]:
    """Extract the bindings listed in a binding report.

    Parameters
    ----------
    report : str
        Report text made of sections. Each section is an optional scope label
        such as "Global Bindings:", the "key / binding" column header and the
        rows, with the binding text aligned at `BINDING_COLUMN`.
    local_only : bool
        If true, stop at the "Global Bindings:" section.
    resolve : callable
        Function that converts a command name into a `Command`, or returns
        None if the name is unknown.
    """
    pairs: list[BindingPair] = []
    for key, binding in _iter_rows(report, local_only):
        if command := _resolve_binding(binding, resolve):
            pairs.append(BindingPair(key, command))
    pairs = unique_pairs(pairs)
    logger.debug("extracted %d bindings (local_only=%s)", len(pairs), local_only)
    return pairs

def unique_pairs(pairs: Iterable[BindingPair]) -> list[BindingPair]:
    """Drop pairs whose key was already seen."""
    seen: set[str] = set()
    out: list[BindingPair] = []
    for pair in pairs:
        if pair.key in seen:
            continue
        seen.add(pair.key)
        out.append(pair)
    return out

def split_sections(report: str) -> list[_Section]:
    """Split the report into sections, dropping blank lines and the preamble."""
    lines = [line.rstrip() for line in report.splitlines() if line.strip()]
    sections: list[_Section] = []
    for i, line in enumerate(lines):
        if _COLUMN_HEADER.match(line):
            label = ""
            if i > 0 and _SCOPE_LABEL.match(lines[i - 1]):
                label = lines[i - 1].strip()
                # the label was taken as a row of the previous section
                if sections and sections[-1].rows and sections[-1].rows[-1] is lines[i - 1]:
                    sections[-1].rows.pop()
            sections.append(_Section(label))
        elif not sections:
            continue  # preamble
        elif _COLUMN_UNDERLINE.match(line) and not sections[-1].rows:
            continue
        else:
            sections[-1].rows.append(line)
    return sections

def _iter_rows(report: str, local_only: bool) -> Iterator[tuple[str, str]]:
    for section in split_sections(report):
        if local_only and section.label == GLOBAL_BINDINGS_LABEL:
            break
        for row in section.rows:
            if parsed := _parse_row(row):
                yield parsed

def _parse_row(row: str) -> tuple[str, str] | None:
    if row.lstrip().startswith(PLACEHOLDER_MARKER):
        return None
    if (
        len(row) > BINDING_COLUMN
        and row[BINDING_COLUMN - 1] == " "
        and row[BINDING_COLUMN] != " "
    ):
        key = row[:BINDING_COLUMN].strip()
        binding = row[BINDING_COLUMN:].strip()
        # a long key may have a space right before the column
        if key and " " not in binding:
            return key, binding
    if match := _LOOSE_ROW.match(row):
        return match.group("key"), match.group("binding")
    return None

def _resolve_binding(binding: str, resolve: Resolver) -> Command | None:
    # "Prefix Command", "Keyboard Macro" and anything with trailing text fail here
    if not _COMMAND_TOKEN.match(binding):
        return None
    command = resolve(binding)
    if command is None or not command.is_invocable:
        return None
    if command.name == SELF_INSERT_COMMAND:
        return None
    return command
