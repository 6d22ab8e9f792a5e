from __future__ import annotations

from .._preference import Preference, load_preference, save_preference
from qtpy import QtWidgets as QtW

class QPreferenceDialog(QtW.QDialog):
    def __init__(self, parent: QtW.QWidget | None = None):
        super().__init__(parent)
        self._init_ui(load_preference())

    def _init_ui(self, preference: Preference):
        self.setWindowTitle("Key Hint Preference")

        layout = QtW.QFormLayout()
        self.setLayout(layout)

        self._idle_delay = QtW.QDoubleSpinBox()
        self._idle_delay.setRange(0.5, 3600.0)
        self._idle_delay.setSuffix(" s")
        self._idle_delay.setToolTip("Seconds without any input before the first hint is shown")
        self._idle_delay.setValue(preference.idle_delay)
        layout.addRow("Idle delay", self._idle_delay)

        self._update_interval = QtW.QDoubleSpinBox()
        self._update_interval.setRange(0.5, 3600.0)
        self._update_interval.setSuffix(" s")
        self._update_interval.setToolTip("Seconds between two hints while idle")
        self._update_interval.setValue(preference.update_interval)
        layout.addRow("Update interval", self._update_interval)

        self._scope = QtW.QComboBox()
        self._scope.addItems(["local", "all"])
        self._scope.setToolTip(
            "\"local\" only teaches the bindings of the focused widget. \"all\" also \n"
            "includes the menu and window shortcuts."
        )
        self._scope.setCurrentText(preference.scope)
        layout.addRow("Bindings", self._scope)

        self._display = QtW.QComboBox()
        self._display.addItems(["status-bar", "label"])
        self._display.setToolTip("Show hints as status bar messages or in a dedicated label")
        self._display.setCurrentText(preference.display)
        layout.addRow("Display", self._display)

        self._rich_text = QtW.QCheckBox("Show keys in bold")
        self._rich_text.setToolTip("Only effective where the display supports rich text.")
        self._rich_text.setChecked(preference.rich_text)
        layout.addRow(self._rich_text)

        buttons = QtW.QDialogButtonBox()
        buttons.setStandardButtons(
            QtW.QDialogButtonBox.StandardButton.Cancel
            | QtW.QDialogButtonBox.StandardButton.Ok
        )
        buttons.accepted.connect(self._on_ok)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def _on_ok(self):
        from ..mode import KeyHintMode

        pref = save_preference(
            idle_delay=self._idle_delay.value(),
            update_interval=self._update_interval.value(),
            scope=self._scope.currentText(),
            display=self._display.currentText(),
            rich_text=self._rich_text.isChecked(),
        )
        if (mode := KeyHintMode._instance) is not None:
            mode.apply_preference(pref)
        self.accept()
