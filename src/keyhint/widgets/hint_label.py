from __future__ import annotations

from qtpy import QtWidgets as QtW
from qtpy.QtCore import Qt

from ..display import LabelSink
from .consts import ColorPreset

class QHintLabel(QtW.QLabel):
    """Label that shows key binding hints, e.g. as a status bar widget."""

    def __init__(self, parent: QtW.QWidget | None = None):
        super().__init__(parent)
        self.setTextFormat(Qt.TextFormat.RichText)
        self.setTextInteractionFlags(Qt.TextInteractionFlag.NoTextInteraction)
        self.setStyleSheet(f"QHintLabel {{ color: {ColorPreset.HINT}; }}")
        self.setToolTip("Key binding hint shown while idle")
        self._sink = LabelSink(self)

    def sink(self) -> LabelSink:
        """The display sink that writes to this label."""
        return self._sink
