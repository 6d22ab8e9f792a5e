from __future__ import annotations

from html import escape

def bold(text: str) -> str:
    return f"<b>{text}</b>"

def escape_html(text: str) -> str:
    return escape(text, quote=False)

def escape_percent(text: str) -> str:
    """Escape `%` for sinks that treat it as a format directive."""
    return text.replace("%", "%%")
