from __future__ import annotations

import inspect
import re
from typing import TYPE_CHECKING, Any, Callable, Iterator

from .types import Command

if TYPE_CHECKING:
    from qtpy import QtWidgets as QtW

_SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")

def slugify(text: str) -> str:
    """Convert an action text such as "&Open File..." into "open-file"."""
    text = text.replace("&&", "and").replace("&", "").lower()
    return _SLUG_SEPARATOR.sub("-", text).strip("-")

def command_name_of_action(action: QtW.QAction) -> str:
    if name := action.objectName():
        return name
    return slugify(action.text())

def command_from_action(action: QtW.QAction) -> Command | None:
    """Create a command that triggers the action."""
    name = command_name_of_action(action)
    if not name:
        return None
    doc = action.statusTip() or action.whatsThis() or None
    return Command(name, action.trigger, doc)

class CommandRegistry:
    """Commands known by name.

    >>> registry = CommandRegistry()
    >>> @registry.register("say-hello")
    ... def say_hello():
    ...     '''Print a greeting.'''
    >>> registry.resolve("say-hello").doc
    'Print a greeting.'
    """

    def __init__(self):
        self._commands: dict[str, Command] = {}

    def register(
        self,
        name: str,
        callback: Callable[[], Any] | None = None,
        doc: str | None = None,
    ):
        """Register a command, or return a decorator if callback is not given."""
        if not name:
            raise ValueError("Command name must not be empty.")
        if callback is None:
            def _inner(func):
                self.register(name, func, doc)
                return func
            return _inner
        if doc is None:
            doc = inspect.getdoc(callback)
        return self.add(Command(name, callback, doc))

    def add(self, command: Command) -> Command:
        self._commands[command.name] = command
        return command

    def register_action(self, action: QtW.QAction) -> Command | None:
        if command := command_from_action(action):
            self.add(command)
        return command

    def resolve(self, name: str) -> Command | None:
        return self._commands.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)
