from __future__ import annotations

import itertools
import time
from dataclasses import replace
from typing import Any, Callable, Iterable, Iterator

from qtpy import QtWidgets as QtW, QtCore, QtGui
from qtpy.QtCore import Qt

from .algorithms import format_binding_report
from .commands import CommandRegistry, command_from_action
from .consts import GLOBAL_BINDINGS_LABEL
from .types import BindingPair, Command, ExplicitMap, Scope, ScopeSelector

Section = tuple[str, list[BindingPair]]

class QtTimerHandle:
    def __init__(self, delay: float, callback: Callable[[], Any]):
        self._callback = callback
        self._timer = QtCore.QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)
        self._timer.start(max(int(delay * 1000), 0))

    @property
    def active(self) -> bool:
        return self._timer is not None

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

    def _on_timeout(self):
        if self._timer is None:
            return
        self._timer.deleteLater()
        self._timer = None
        self._callback()

class QtTimerService:
    """Timer service running on the Qt event loop."""

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> QtTimerHandle:
        return QtTimerHandle(delay, callback)

def focus_context(main_window: QtW.QWidget) -> tuple[QtW.QWidget, QtW.QWidget]:
    """Return the focused widget and the window it belongs to.

    Modal dialogs take precedence over the active window, which takes
    precedence over the main window.
    """
    app = QtW.QApplication.instance()
    window = app.activeModalWidget() or app.activeWindow() or main_window
    focus = app.focusWidget()
    if focus is None or focus.window() is not window:
        focus = window
    return focus, window

def _has_shortcut(action: QtW.QAction) -> bool:
    return action.isEnabled() and any(not seq.isEmpty() for seq in action.shortcuts())

def local_actions(focus: QtW.QWidget, window: QtW.QWidget) -> Iterator[tuple[QtW.QWidget, QtW.QAction]]:
    """Iterate over the actions of the focused widget and its ancestors in the window."""
    widget = focus
    while widget is not None and widget is not window:
        for action in widget.actions():
            if widget is not focus and action.shortcutContext() == Qt.ShortcutContext.WidgetShortcut:
                # only reachable while the widget itself has focus
                continue
            if action.shortcutContext() == Qt.ShortcutContext.ApplicationShortcut:
                continue
            if _has_shortcut(action):
                yield widget, action
        widget = widget.parentWidget()

def window_actions(window: QtW.QWidget) -> Iterator[QtW.QAction]:
    """Iterate over the actions available anywhere in the window."""
    contexts = (Qt.ShortcutContext.WindowShortcut, Qt.ShortcutContext.ApplicationShortcut)
    for widget in _iter_widgets(window):
        for action in widget.actions():
            if action.shortcutContext() in contexts and _has_shortcut(action):
                yield action

def application_actions() -> Iterator[QtW.QAction]:
    """Iterate over the actions of all the top-level widgets with application context."""
    for top in QtW.QApplication.topLevelWidgets():
        for widget in _iter_widgets(top):
            for action in widget.actions():
                if (
                    action.shortcutContext() == Qt.ShortcutContext.ApplicationShortcut
                    and _has_shortcut(action)
                ):
                    yield action

def map_actions(target: QtW.QWidget) -> Iterator[QtW.QAction]:
    """Iterate over the actions of the target itself, including its submenus."""
    seen: set[int] = set()
    for widget in [target, *target.findChildren(QtW.QMenu)]:
        for action in widget.actions():
            if id(action) in seen or not _has_shortcut(action):
                continue
            seen.add(id(action))
            yield action

def _iter_widgets(root: QtW.QWidget) -> Iterator[QtW.QWidget]:
    yield root
    yield from root.findChildren(QtW.QWidget)

def _unique_command(command: Command, owner: int, names: dict[str, int]) -> Command:
    name = command.name
    n = 1
    while names.setdefault(name, owner) != owner:
        n += 1
        name = f"{command.name}-{n}"
    if name != command.name:
        command = replace(command, name=name)
    return command

def binding_pairs(
    actions: Iterable[QtW.QAction],
    names: dict[str, int] | None = None,
) -> list[BindingPair]:
    """Convert actions into binding pairs.

    `names` maps the command names in use to the id of their action. An action
    whose name is used by another action is given a numbered name such as
    "close-2", so that every name resolves to exactly one action.
    """
    if names is None:
        names = {}
    pairs: list[BindingPair] = []
    for action in actions:
        command = command_from_action(action)
        if command is None:
            continue
        command = _unique_command(command, id(action), names)
        for seq in action.shortcuts():
            key = seq.toString(QtGui.QKeySequence.SequenceFormat.NativeText)
            if key:
                pairs.append(BindingPair(key, command))
    return pairs

class QtBindingSource:
    """List the bindings of a Qt application directly from its actions."""

    def __init__(self, main_window: QtW.QWidget):
        self._main_window = main_window

    def sections(self, selector: ScopeSelector) -> list[Section]:
        """Return the labeled binding sections of the scope, narrowest first."""
        if isinstance(selector, ExplicitMap):
            target = selector.target
            return [(f"{type(target).__name__} Bindings:", binding_pairs(map_actions(target)))]

        focus, window = focus_context(self._main_window)
        sections: list[Section] = []
        seen: set[int] = set()
        names: dict[str, int] = {}
        current: QtW.QWidget | None = None
        for widget, action in local_actions(focus, window):
            seen.add(id(action))
            if widget is not current:
                current = widget
                sections.append((f"{type(widget).__name__} Bindings:", []))
            sections[-1][1].extend(binding_pairs([action], names))
        if selector is Scope.ALL:
            global_actions: list[QtW.QAction] = []
            for action in itertools.chain(window_actions(window), application_actions()):
                if id(action) not in seen:
                    seen.add(id(action))
                    global_actions.append(action)
            sections.append((GLOBAL_BINDINGS_LABEL, binding_pairs(global_actions, names)))
        return sections

    def bindings(self, selector: ScopeSelector) -> list[BindingPair]:
        return [pair for _, pairs in self.sections(selector) for pair in pairs]

class QtReportSupplier:
    """Describe the bindings of a Qt application as binding reports.

    The commands of the last report are resolved by `resolve`, so that the
    report can be read back into commands. Names that the report does not
    mention are looked up in `registry`.
    """

    def __init__(self, main_window: QtW.QWidget, registry: CommandRegistry | None = None):
        self._source = QtBindingSource(main_window)
        self.registry = registry if registry is not None else CommandRegistry()
        self._reported = CommandRegistry()

    def active_bindings_report(self, local_only: bool) -> str:
        scope = Scope.LOCAL if local_only else Scope.ALL
        return self._report(self._source.sections(scope))

    def map_bindings_report(self, target: Any) -> str:
        return self._report(self._source.sections(ExplicitMap(target)))

    def resolve(self, name: str) -> Command | None:
        if (command := self._reported.resolve(name)) is not None:
            return command
        return self.registry.resolve(name)

    def _report(self, sections: list[Section]) -> str:
        # actions of older reports may have been deleted since
        reported = CommandRegistry()
        for _, pairs in sections:
            for pair in pairs:
                reported.add(pair.command)
        self._reported = reported
        return format_binding_report(sections)
