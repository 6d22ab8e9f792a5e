from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from keyhint import _preference
from keyhint.commands import CommandRegistry
from keyhint.types import Command

@pytest.fixture(autouse=True)
def preference_file(tmp_path, monkeypatch):
    """Keep the preference of the user untouched."""
    data_dir = tmp_path / "keyhint"
    monkeypatch.setattr(_preference, "KEYHINT_DATA_DIR", data_dir)
    monkeypatch.setattr(_preference, "KEYHINT_PREFERENCE_FILE", data_dir / "preferences.json")
    monkeypatch.setattr(_preference, "_CACHED_PREFERENCE", None)
    return data_dir / "preferences.json"

@pytest.fixture
def registry() -> CommandRegistry:
    reg = CommandRegistry()
    reg.register("next-line", lambda: None, "*Move cursor vertically down one line.\nSecond line.")
    reg.register("compile-buffer", lambda: None, "Compile the current buffer.")
    reg.register("indent-line", lambda: None, "")
    reg.register("global-compile", lambda: None, "Compile everything.")
    reg.register("execute-extended-command", lambda: None, "Read a command name, then call it.")
    reg.register("help-command", lambda: None, "Show help.")
    reg.register("goto-line", lambda: None, "Go to a line.")
    reg.register("self-insert-command", lambda: None, "Insert the character you type.")
    reg.add(Command("broken-command", None, "Cannot be called."))
    return reg
