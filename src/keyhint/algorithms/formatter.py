from __future__ import annotations

import re

from ..types import BindingPair, HintMessage
from .._utils import bold, escape_html, escape_percent as _escape_percent

# a calling-convention line such as ":around (fn &rest args)" and the blank lines after it
_CALLING_CONVENTION = re.compile(r"\A:[^\n]*\n(?:[ \t]*\n)*")

def hint_summary(doc: str | None) -> str | None:
    """Return the first line of the documentation, starting in lower case.

    None is returned if there is nothing to summarize.
    """
    if not doc:
        return None
    if doc.startswith("*"):
        doc = doc[1:]
    elif doc.startswith(":"):
        if (match := _CALLING_CONVENTION.match(doc)) is None:
            return None
        doc = doc[match.end():]
    summary = doc.split("\n", 1)[0]
    if summary == "":
        return None
    return summary[0].lower() + summary[1:]

def format_hint(
    pair: BindingPair,
    doc: str | None,
    *,
    rich_text: bool = False,
    escape_percent: bool = False,
) -> HintMessage:
    """Build the hint text for a binding.

    >>> from keyhint.types import BindingPair, Command
    >>> format_hint(BindingPair("C-n", Command("next-line")), "Move to the next line.").text
    'Press C-n to move to the next line.'
    >>> format_hint(BindingPair("M-f", Command("forward-word")), None).text
    'Press M-f for forward-word.'
    """
    if (summary := hint_summary(doc)) is not None:
        connective, rest = "to", summary
    else:
        connective, rest = "for", f"{pair.command.name}."
    if rich_text:
        text = f"Press {bold(escape_html(pair.key))} {connective} {escape_html(rest)}"
    else:
        text = f"Press {pair.key} {connective} {rest}"
    if escape_percent:
        text = _escape_percent(text)
    return HintMessage(text)
