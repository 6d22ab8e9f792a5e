from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from qtpy import QtWidgets as QtW, QtCore

class StatusBarSink:
    """Show hints as the temporary message of a status bar.

    The message the application showed before a hint is restored on `clear`
    for `restore_timeout` milliseconds (0 keeps it until it is replaced).
    A message the application posts while a hint is shown is kept as the one
    to restore, and `clear` leaves it alone.

    If a modal dialog, or any window that is not a main window, is active,
    the hint goes to the status bar of `main_window` instead.
    """

    rich_text = False
    percent_directives = False

    def __init__(self, main_window: QtW.QMainWindow, timeout: int = 0, restore_timeout: int = 5000):
        self._main_window = main_window
        self._timeout = timeout
        self._restore_timeout = restore_timeout
        self._bar: QtW.QStatusBar | None = None
        self._saved_message = ""
        self._last_hint: str | None = None

    def target_window(self) -> QtW.QMainWindow:
        app = QtW.QApplication.instance()
        if app.activeModalWidget() is None:
            active = app.activeWindow()
            if isinstance(active, QtW.QMainWindow):
                return active
        return self._main_window

    def show(self, text: str) -> None:
        bar = self.target_window().statusBar()
        if bar is not self._bar:
            self._restore()
            self._saved_message = bar.currentMessage()
            self._bar = bar
        elif (current := bar.currentMessage()) != self._last_hint:
            # the application replaced the previous hint
            self._saved_message = current
        bar.showMessage(text, self._timeout)
        self._last_hint = bar.currentMessage()

    def clear(self) -> None:
        self._restore()

    def _restore(self):
        bar, self._bar = self._bar, None
        saved, self._saved_message = self._saved_message, ""
        last_hint, self._last_hint = self._last_hint, None
        if bar is None or bar.currentMessage() != last_hint:
            return
        if saved:
            bar.showMessage(saved, self._restore_timeout)
        else:
            bar.clearMessage()

class LabelSink:
    """Show hints in a label, restoring its previous text on `clear`."""

    percent_directives = False

    def __init__(self, label: QtW.QLabel, rich_text: bool = True):
        self._label = label
        self.rich_text = rich_text
        self._saved_text: str | None = None

    @property
    def label(self) -> QtW.QLabel:
        return self._label

    def show(self, text: str) -> None:
        if self._saved_text is None:
            self._saved_text = self._label.text()
        if self.rich_text:
            self._label.setTextFormat(QtCore.Qt.TextFormat.RichText)
        else:
            self._label.setTextFormat(QtCore.Qt.TextFormat.PlainText)
        self._label.setText(text)

    def clear(self) -> None:
        if self._saved_text is None:
            return
        saved, self._saved_text = self._saved_text, None
        self._label.setText(saved)

@dataclass
class CallbackSink:
    """Display sink that forwards hints to plain functions."""

    on_show: Callable[[str], None]
    on_clear: Callable[[], None] = lambda: None
    rich_text: bool = False
    percent_directives: bool = False

    def show(self, text: str) -> None:
        self.on_show(text)

    def clear(self) -> None:
        self.on_clear()
