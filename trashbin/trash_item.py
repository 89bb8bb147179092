"""
TrashItem - One Trashed File or Directory

Plain entity built by the scanner from (name, trashed path, icon,
is-directory, TrashInfo). Everything except the confirmation flag is fixed
at construction; no filesystem I/O happens here.

Lifecycle:
    created by TrashScanner -> listed by TrashManager -> delete() or
    restore() succeeds -> owner drops it. A failed operation leaves the item
    (and its file in the trash) exactly as it was.
"""

from datetime import datetime
from typing import Optional

import gi
gi.require_version('Gio', '2.0')
from gi.repository import Gio

from trashbin import trash_operations
from trashbin.errors import InvalidEntryError
from trashbin.trash_info import TrashInfo


class TrashItem:
    """A single entry of the trash."""

    __slots__ = (
        "_name", "_path", "_icon", "_is_directory",
        "_original_path", "_deletion_date", "_info_path",
        "confirmation_pending",
    )

    def __init__(self, name: str, path: str, icon: Optional[Gio.Icon],
                 is_directory: bool, trash_info: TrashInfo):
        if not name:
            raise InvalidEntryError("TrashItem name must not be empty")
        if not path:
            raise InvalidEntryError(f"TrashItem {name!r} has no trashed path")

        self._name = name
        self._path = path
        self._icon = icon
        self._is_directory = bool(is_directory)

        # Only the fields are kept, not the TrashInfo itself
        self._original_path = trash_info.original_path
        self._deletion_date = trash_info.deletion_date
        self._info_path = trash_info.info_path

        self.confirmation_pending = False

    def __repr__(self):
        kind = "dir" if self._is_directory else "file"
        return f"TrashItem({self._name!r}, {kind}, from={self._original_path!r})"

    # -------------------------------------------------------------------------
    # IDENTITY
    # -------------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> str:
        """Current location inside the trash store."""
        return self._path

    @property
    def icon(self) -> Optional[Gio.Icon]:
        return self._icon

    @property
    def is_directory(self) -> bool:
        return self._is_directory

    @property
    def original_path(self) -> str:
        return self._original_path

    @property
    def deletion_date(self) -> datetime:
        return self._deletion_date

    @property
    def info_path(self) -> str:
        """The .trashinfo sidecar, or "" if the metadata came from elsewhere."""
        return self._info_path

    def has_name(self, candidate: str) -> bool:
        """Exact comparison. Callers wanting case-insensitive search normalize first."""
        return self._name == candidate

    def toggle_confirmation(self) -> bool:
        """Flip the pending-confirmation flag. Returns the new value."""
        self.confirmation_pending = not self.confirmation_pending
        return self.confirmation_pending

    # -------------------------------------------------------------------------
    # OPERATIONS
    # -------------------------------------------------------------------------
    def delete(self) -> None:
        """Permanently erase. Raises DeleteError."""
        trash_operations.delete_item(self)

    def restore(self) -> None:
        """Move back to original_path. Raises TargetExistsError / RestoreIOError."""
        trash_operations.restore_item(self)

    # -------------------------------------------------------------------------
    # ORDERING
    # -------------------------------------------------------------------------
    def collate_by_date(self, other: "TrashItem") -> int:
        return trash_operations.collate_by_date(self, other)

    def collate_by_name(self, other: "TrashItem") -> int:
        return trash_operations.collate_by_name(self, other)

    def collate_by_type(self, other: "TrashItem") -> int:
        return trash_operations.collate_by_type(self, other)
