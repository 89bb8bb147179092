"""
TrashInfo - Parsed .trashinfo Sidecar

Every object in a freedesktop.org trash has a sidecar in `info/` named
`<name>.trashinfo`:

    [Trash Info]
    Path=/home/user/Documents/report%20final.txt
    DeletionDate=2024-05-01T14:03:22

`Path` is percent-encoded and may be relative to the volume top directory
(for `$topdir/.Trash-$uid` trashes). `DeletionDate` is local time without
a timezone.

Usage:
    info = TrashInfo.from_file("~/.local/share/Trash/info/a.txt.trashinfo")
    print(info.original_path, info.deletion_date)
"""

import os
from datetime import datetime
from typing import Optional
from urllib.parse import unquote

import gi
gi.require_version('Gio', '2.0')
from gi.repository import Gio, GLib

from trashbin.errors import TrashInfoError


TRASH_INFO_GROUP = "Trash Info"
TRASH_INFO_SUFFIX = ".trashinfo"
DELETION_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def parse_deletion_date(value: str) -> datetime:
    """
    Parse a DeletionDate value into a naive local datetime.
    Raises ValueError if the value is not a date.
    """
    value = value.strip()
    try:
        return datetime.strptime(value, DELETION_DATE_FORMAT)
    except ValueError:
        # Some implementations write fractions or an offset
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed


class TrashInfo:
    """Original location and deletion time of one trashed object."""

    def __init__(self, original_path: str, deletion_date: datetime, info_path: str = ""):
        self.original_path = original_path
        self.deletion_date = deletion_date
        self.info_path = info_path

    def __repr__(self):
        return f"TrashInfo({self.original_path!r}, {self.deletion_date.isoformat()})"

    @classmethod
    def from_file(cls, info_path: str, topdir: Optional[str] = None) -> "TrashInfo":
        """
        Load a .trashinfo key file.

        Args:
            info_path: Path of the sidecar
            topdir: Volume root used to resolve relative `Path` values

        Raises:
            TrashInfoError: unreadable file, missing group/key, bad date
        """
        keyfile = GLib.KeyFile.new()
        try:
            keyfile.load_from_file(info_path, GLib.KeyFileFlags.NONE)
        except GLib.Error as e:
            raise TrashInfoError(info_path, e.message) from e

        try:
            raw_path = keyfile.get_string(TRASH_INFO_GROUP, "Path")
            raw_date = keyfile.get_string(TRASH_INFO_GROUP, "DeletionDate")
        except GLib.Error as e:
            raise TrashInfoError(info_path, e.message) from e

        original_path = unquote(raw_path)
        if not original_path:
            raise TrashInfoError(info_path, "empty Path")
        if not os.path.isabs(original_path):
            if topdir is None:
                raise TrashInfoError(info_path, f"relative Path without volume root: {original_path}")
            original_path = os.path.join(topdir, original_path)

        try:
            deletion_date = parse_deletion_date(raw_date)
        except ValueError as e:
            raise TrashInfoError(info_path, f"bad DeletionDate {raw_date!r}") from e

        return cls(os.path.normpath(original_path), deletion_date, info_path)

    @classmethod
    def from_gfile_info(cls, info: Gio.FileInfo, info_path: str = "") -> "TrashInfo":
        """Build from a trash:/// enumeration result (trash::orig-path, trash::deletion-date)."""
        orig_path = info.get_attribute_byte_string("trash::orig-path")
        # PyGObject might return str or bytes depending on version
        if isinstance(orig_path, bytes):
            orig_path = orig_path.decode('utf-8', errors='surrogateescape')
        if not orig_path:
            raise TrashInfoError(info.get_name() or "", "missing trash::orig-path")

        gdate = info.get_deletion_date()
        if gdate is not None:
            deletion_date = datetime.fromtimestamp(gdate.to_unix())
        else:
            raw_date = info.get_attribute_string("trash::deletion-date") or ""
            try:
                deletion_date = parse_deletion_date(raw_date)
            except ValueError as e:
                raise TrashInfoError(info.get_name() or "", f"bad deletion date {raw_date!r}") from e

        return cls(orig_path, deletion_date, info_path)

