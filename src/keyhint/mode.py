from __future__ import annotations

import logging
from typing import Callable

from qtpy import QtWidgets as QtW, QtCore

from ._injection import QtBindingSource, QtTimerService
from ._preference import Preference, load_preference
from .cache import BindingCache, BindingSource
from .display import StatusBarSink
from .scheduler import DisplaySink, IdleScheduler, TimerService
from .types import SchedulerState
from .widgets import QHintLabel

logger = logging.getLogger(__name__)

_INPUT_EVENTS = frozenset([
    QtCore.QEvent.Type.KeyPress,
    QtCore.QEvent.Type.MouseButtonPress,
    QtCore.QEvent.Type.MouseButtonDblClick,
    QtCore.QEvent.Type.Wheel,
])

class QActivityFilter(QtCore.QObject):
    """Event filter that reports user input without consuming it."""

    def __init__(self, callback: Callable[[], None], parent: QtCore.QObject | None = None):
        super().__init__(parent)
        self._callback = callback

    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if event.type() in _INPUT_EVENTS:
            self._callback()
        return False

class KeyHintMode:
    """The on/off switch of key binding hints for a main window."""

    _instance: KeyHintMode | None = None

    def __init__(
        self,
        main_window: QtW.QMainWindow,
        preference: Preference | None = None,
        *,
        sink: DisplaySink | None = None,
        source: BindingSource | None = None,
        timers: TimerService | None = None,
    ):
        self._main_window = main_window
        self._preference = preference or load_preference()
        self._hint_label: QHintLabel | None = None
        if sink is None:
            sink = self._create_sink(self._preference)
        self._scheduler = IdleScheduler(
            BindingCache(source or QtBindingSource(main_window)),
            sink,
            timers or QtTimerService(),
            self._preference,
        )
        self._filter = QActivityFilter(self._scheduler.notify_input)
        self._enabled = False

    @classmethod
    def instance(cls, main_window: QtW.QMainWindow) -> KeyHintMode:
        """Return the mode of the main window, creating it if needed."""
        if cls._instance is None or cls._instance._main_window is not main_window:
            if cls._instance is not None:
                cls._instance.disable()
            cls._instance = cls(main_window)
        return cls._instance

    @property
    def scheduler(self) -> IdleScheduler:
        return self._scheduler

    @property
    def preference(self) -> Preference:
        return self._preference

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def state(self) -> SchedulerState:
        return self._scheduler.state

    def enable(self) -> None:
        if self._enabled:
            return
        QtW.QApplication.instance().installEventFilter(self._filter)
        self._scheduler.start()
        self._enabled = True
        logger.debug("key hint mode enabled")

    def disable(self) -> None:
        if not self._enabled:
            return
        if (app := QtW.QApplication.instance()) is not None:
            app.removeEventFilter(self._filter)
        self._scheduler.stop()
        self._enabled = False
        logger.debug("key hint mode disabled")

    def toggle(self) -> bool:
        """Toggle the mode and return whether it is enabled now."""
        if self._enabled:
            self.disable()
        else:
            self.enable()
        return self._enabled

    def apply_preference(self, preference: Preference) -> None:
        """Use the new preference from the next scheduling decision on."""
        old = self._preference
        self._preference = preference
        self._scheduler.config = preference
        self._scheduler.scope = preference.scope
        if (preference.display, preference.rich_text) != (old.display, old.rich_text):
            self._scheduler.sink = self._create_sink(preference)

    def _create_sink(self, preference: Preference) -> DisplaySink:
        if preference.display == "label":
            if self._hint_label is None:
                self._hint_label = QHintLabel()
                self._main_window.statusBar().addWidget(self._hint_label)
            sink = self._hint_label.sink()
            sink.rich_text = preference.rich_text
            return sink
        if self._hint_label is not None:
            self._main_window.statusBar().removeWidget(self._hint_label)
            self._hint_label.deleteLater()
            self._hint_label = None
        return StatusBarSink(self._main_window)
