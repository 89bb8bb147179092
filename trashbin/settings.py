"""
TrashSettings - Persisted Preferences

Stored with QSettings("Trashbin", "Preferences"):
- sortKey:             SortKey int (default TYPE)
- sortReversed:        bool (default False)
- confirmBeforeDelete: ask before permanent deletion (default True)
- trashDir:            trash directory override, "" = $XDG_DATA_HOME/Trash

Usage:
    settings = TrashSettings()
    settings.setSortKey(SortKey.DATE)
    scanner = TrashScanner(settings.trashDir() or None)
"""

from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot, Property, QSettings

from trashbin.sorter import SortKey


DEFAULTS = {
    "sortKey": int(SortKey.TYPE),
    "sortReversed": False,
    "confirmBeforeDelete": True,
    "trashDir": "",
}


class TrashSettings(QObject):
    """Typed accessors over QSettings with change notification."""

    # Emitted with the key that changed
    settingsChanged = Signal(str)

    def __init__(self, settings: Optional[QSettings] = None, parent=None):
        super().__init__(parent)
        self._settings = settings if settings is not None else QSettings("Trashbin", "Preferences")

    def _value(self, key: str, value_type):
        return self._settings.value(key, DEFAULTS[key], type=value_type)

    def _set(self, key: str, value) -> None:
        if self._settings.value(key, DEFAULTS[key], type=type(DEFAULTS[key])) == value:
            return
        self._settings.setValue(key, value)
        self._settings.sync()
        self.settingsChanged.emit(key)

    # -------------------------------------------------------------------------
    # ACCESSORS
    # -------------------------------------------------------------------------
    @Slot(result=int)
    def sortKey(self) -> int:
        value = self._value("sortKey", int)
        try:
            return int(SortKey(value))
        except ValueError:
            return DEFAULTS["sortKey"]  # Unknown key in settings

    @Slot(int)
    def setSortKey(self, key: int) -> None:
        self._set("sortKey", int(SortKey(key)))

    @Slot(result=bool)
    def sortReversed(self) -> bool:
        return self._value("sortReversed", bool)

    @Slot(bool)
    def setSortReversed(self, reverse: bool) -> None:
        self._set("sortReversed", bool(reverse))

    @Slot(result=bool)
    def confirmBeforeDelete(self) -> bool:
        return self._value("confirmBeforeDelete", bool)

    @Slot(bool)
    def setConfirmBeforeDelete(self, enabled: bool) -> None:
        self._set("confirmBeforeDelete", bool(enabled))

    @Slot(result=str)
    def trashDir(self) -> str:
        return self._value("trashDir", str)

    @Slot(str)
    def setTrashDir(self, path: str) -> None:
        self._set("trashDir", path or "")

    @Slot()
    def reset(self) -> None:
        """Restore all defaults."""
        for key in DEFAULTS:
            self._settings.remove(key)
        self._settings.sync()
        self.settingsChanged.emit("")
