"""
TrashScanner - Discovers TrashItems

Two sources:
- scan(): a trash directory on disk (`files/` + `info/`), by default the
  home trash at $XDG_DATA_HOME/Trash.
- scan_vfs(): the `trash:///` GVFS location, which aggregates the home trash
  and every mounted volume's `.Trash-$UID`.

Sidecars that cannot be parsed and sidecars without a trashed object are
skipped (and logged) before any TrashItem is built.

Usage:
    scanner = TrashScanner()
    for item in scanner.scan():
        print(item.name, item.original_path)
"""

import os
from typing import List, Optional

import gi
gi.require_version('Gio', '2.0')
from gi.repository import Gio, GLib

from trashbin.errors import TrashInfoError
from trashbin.trash_info import TrashInfo, TRASH_INFO_SUFFIX
from trashbin.trash_item import TrashItem


ITEM_ATTRS = "standard::type,standard::icon"
VFS_ATTRS = (
    "standard::name,standard::type,standard::icon,standard::target-uri,"
    "trash::orig-path,trash::deletion-date"
)


def default_trash_dir() -> str:
    """$XDG_DATA_HOME/Trash"""
    return os.path.join(GLib.get_user_data_dir(), "Trash")


def sidecar_for(trashed_path: str) -> str:
    """`<trash>/files/<name>` -> `<trash>/info/<name>.trashinfo`, or "" if not in that layout."""
    files_dir, name = os.path.split(trashed_path)
    if os.path.basename(files_dir) != "files":
        return ""
    return os.path.join(os.path.dirname(files_dir), "info", name + TRASH_INFO_SUFFIX)


class TrashScanner:
    """Builds one TrashItem per trashed object."""

    def __init__(self, trash_dir: Optional[str] = None, topdir: Optional[str] = None):
        self.trash_dir = trash_dir or default_trash_dir()
        # Volume root for relative Path= values ($topdir/.Trash-$uid)
        self.topdir = topdir
        self._items: List[TrashItem] = []

    @property
    def files_dir(self) -> str:
        return os.path.join(self.trash_dir, "files")

    @property
    def info_dir(self) -> str:
        return os.path.join(self.trash_dir, "info")

    def items(self) -> List[TrashItem]:
        """Result of the last scan."""
        return list(self._items)

    def find(self, name: str) -> Optional[TrashItem]:
        for item in self._items:
            if item.has_name(name):
                return item
        return None

    # -------------------------------------------------------------------------
    # ON-DISK TRASH
    # -------------------------------------------------------------------------
    def scan(self) -> List[TrashItem]:
        info_dir = Gio.File.new_for_path(self.info_dir)
        items = []

        try:
            enumerator = info_dir.enumerate_children(
                "standard::name", Gio.FileQueryInfoFlags.NOFOLLOW_SYMLINKS, None
            )
        except GLib.Error as e:
            if e.matches(Gio.io_error_quark(), Gio.IOErrorEnum.NOT_FOUND):
                self._items = []
                return []
            raise

        try:
            for info in enumerator:
                info_name = info.get_name()
                if not info_name.endswith(TRASH_INFO_SUFFIX):
                    continue
                item = self._load(info_name[:-len(TRASH_INFO_SUFFIX)])
                if item is not None:
                    items.append(item)
        finally:
            enumerator.close(None)

        print(f"[TrashScanner] {len(items)} items in {self.trash_dir}")
        self._items = items
        return list(items)

    def _load(self, trash_name: str) -> Optional[TrashItem]:
        info_path = os.path.join(self.info_dir, trash_name + TRASH_INFO_SUFFIX)
        trashed_path = os.path.join(self.files_dir, trash_name)

        try:
            trash_info = TrashInfo.from_file(info_path, self.topdir)
        except TrashInfoError as e:
            print(f"[TrashScanner] Warning: skipping {trash_name}: {e.reason}")
            return None

        try:
            file_info = Gio.File.new_for_path(trashed_path).query_info(
                ITEM_ATTRS, Gio.FileQueryInfoFlags.NOFOLLOW_SYMLINKS, None
            )
        except GLib.Error as e:
            print(f"[TrashScanner] Warning: skipping {trash_name}: {e.message}")
            return None

        name = os.path.basename(trash_info.original_path) or trash_name
        return TrashItem(
            name,
            trashed_path,
            file_info.get_icon(),
            file_info.get_file_type() == Gio.FileType.DIRECTORY,
            trash_info,
        )

    # -------------------------------------------------------------------------
    # trash:/// (GVFS)
    # -------------------------------------------------------------------------
    def scan_vfs(self) -> List[TrashItem]:
        """Enumerate trash:///. Needs gvfsd-trash running."""
        trash_root = Gio.File.new_for_uri("trash:///")
        items = []

        enumerator = trash_root.enumerate_children(
            VFS_ATTRS, Gio.FileQueryInfoFlags.NONE, None
        )
        try:
            while True:
                try:
                    info = enumerator.next_file(None)
                except GLib.Error as e:
                    print(f"[TrashScanner] Warning: Error reading trash:///, stopping early: {e}")
                    break
                if not info:
                    break

                target_uri = info.get_attribute_string("standard::target-uri")
                trashed_path = Gio.File.new_for_uri(target_uri).get_path() if target_uri else None
                if not trashed_path:
                    print(f"[TrashScanner] Warning: {info.get_name()} has no local path, skipping")
                    continue

                try:
                    trash_info = TrashInfo.from_gfile_info(info, sidecar_for(trashed_path))
                except TrashInfoError as e:
                    print(f"[TrashScanner] Warning: skipping {info.get_name()}: {e.reason}")
                    continue

                items.append(TrashItem(
                    os.path.basename(trash_info.original_path) or info.get_name(),
                    trashed_path,
                    info.get_icon(),
                    info.get_file_type() == Gio.FileType.DIRECTORY,
                    trash_info,
                ))
        finally:
            enumerator.close(None)

        print(f"[TrashScanner] {len(items)} items in trash:///")
        self._items = items
        return list(items)
