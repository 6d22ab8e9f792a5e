from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from qtpy import QtWidgets as QtW
    from .mode import KeyHintMode

def keyhint_mode(main_window: QtW.QMainWindow, enable: bool | None = None) -> KeyHintMode:
    """Toggle key binding hints, or turn them on/off if `enable` is given."""
    from .mode import KeyHintMode

    mode = KeyHintMode.instance(main_window)
    if enable is None:
        mode.toggle()
    elif enable:
        mode.enable()
    else:
        mode.disable()
    return mode

def keyhint_describe(main_window: QtW.QMainWindow, local_only: bool = False) -> str:
    """Return the binding report of the focused widget."""
    from ._injection import QtReportSupplier

    return QtReportSupplier(main_window).active_bindings_report(local_only)

def keyhint_preference(
    main_window: QtW.QMainWindow | None = None,
    *,
    idle_delay: float | None = None,
    update_interval: float | None = None,
    scope: str | None = None,
    display: str | None = None,
    rich_text: bool | None = None,
    show: bool = False,
):
    from ._preference import load_preference, save_preference
    from .mode import KeyHintMode

    old_pref = load_preference()
    new_pref = save_preference(
        idle_delay=idle_delay,
        update_interval=update_interval,
        scope=scope,
        display=display,
        rich_text=rich_text,
    )
    if show:
        print(new_pref.as_repr())
    if old_pref != new_pref:
        mode = KeyHintMode._instance
        if main_window is not None:
            mode = KeyHintMode.instance(main_window)
        if mode is not None:
            mode.apply_preference(new_pref)
    return new_pref

def keyhint_preference_dialog(parent: QtW.QWidget | None = None) -> int:
    """Open the preference dialog and return its result code."""
    from .widgets import QPreferenceDialog

    return QPreferenceDialog(parent).exec()
