"""
Sorter - TrashItem Ordering

Wraps the three collate functions behind a stateful, bindable sort
preference.

Keys:
- DATE: oldest deletion first, ties by name
- NAME: code point order, case preserved
- TYPE: directories first, then by name

Usage:
    sorter = Sorter()
    ordered = sorter.sort(items)

    sorter.setKey(SortKey.DATE)
    sorter.setReverse(True)  # Newest first
    ordered = sorter.sort(items)
"""

from enum import IntEnum
from functools import cmp_to_key
from typing import List, Optional

from PySide6.QtCore import QObject, Signal, Slot, Property

from trashbin.trash_operations import collate_by_date, collate_by_name, collate_by_type


class SortKey(IntEnum):
    """Available sort keys. IntEnum for easy QML interop."""
    DATE = 0
    NAME = 1
    TYPE = 2


_COLLATORS = {
    SortKey.DATE: collate_by_date,
    SortKey.NAME: collate_by_name,
    SortKey.TYPE: collate_by_type,
}


class Sorter(QObject):
    """
    Sorts TrashItem lists.

    Thread-safe: sorting works on a copy and the collators only read
    already-loaded fields.
    """

    # Emitted when sort preference changes (for UI sync)
    sortChanged = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._current_key = SortKey.TYPE
        self._reverse = False

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------
    def sort(self, items: list, key: Optional[SortKey] = None, reverse: Optional[bool] = None) -> List:
        """
        Return a new sorted list. The input is not modified.

        reverse=True flips the whole order, tie-breaks included.
        """
        if not items:
            return []

        sort_key = SortKey(key) if key is not None else self._current_key
        is_reverse = reverse if reverse is not None else self._reverse

        return sorted(items, key=cmp_to_key(_COLLATORS[sort_key]), reverse=is_reverse)

    @Slot(int)
    def setKey(self, key: int) -> None:
        """Change the sort key. Accepts int for QML compatibility."""
        try:
            new_key = SortKey(key)
        except ValueError:
            return  # Invalid key, ignore

        if new_key != self._current_key:
            self._current_key = new_key
            self.sortChanged.emit()

    @Slot(bool)
    def setReverse(self, reverse: bool) -> None:
        if reverse != self._reverse:
            self._reverse = reverse
            self.sortChanged.emit()

    @Slot(result=int)
    def currentKey(self) -> int:
        return int(self._current_key)

    @Slot(result=bool)
    def isReversed(self) -> bool:
        return self._reverse

    # Qt Properties for QML binding
    key = Property(int, currentKey, setKey, notify=sortChanged)
    reverseOrder = Property(bool, isReversed, setReverse, notify=sortChanged)
