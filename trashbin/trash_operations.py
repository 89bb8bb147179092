"""
TrashOperations - Delete, Restore and Collation for TrashItems

Stateless functions over TrashItem. Delete and restore are synchronous and
block on the filesystem; TrashManager runs them in QThreadPool.

Restore strategy:
- Refuse if anything (even a dangling symlink) sits at the original path.
- Recreate missing parent directories.
- Atomic rename first (NO_FALLBACK_FOR_MOVE).
- Cross-volume: copy into a hidden staging name next to the target, rename
  it into place once complete, then delete the trashed source.

Collation uses Python string ordering (Unicode code points), so results do
not depend on the locale and case is significant.
"""

from uuid import uuid4

import gi
gi.require_version('Gio', '2.0')
from gi.repository import Gio, GLib

from trashbin.errors import DeleteError, RestoreIOError, TargetExistsError


QUERY_FLAGS = Gio.FileQueryInfoFlags.NOFOLLOW_SYMLINKS
MOVE_FLAGS = (
    Gio.FileCopyFlags.NOFOLLOW_SYMLINKS
    | Gio.FileCopyFlags.ALL_METADATA
    | Gio.FileCopyFlags.NO_FALLBACK_FOR_MOVE
)
COPY_FLAGS = Gio.FileCopyFlags.NOFOLLOW_SYMLINKS | Gio.FileCopyFlags.ALL_METADATA

# Errors from a rename that only mean "not on this volume"
_CROSS_DEVICE_CODES = (Gio.IOErrorEnum.NOT_SUPPORTED, Gio.IOErrorEnum.WOULD_RECURSE)


def _is_io_error(e: GLib.Error, *codes) -> bool:
    return any(e.matches(Gio.io_error_quark(), code) for code in codes)


def _gfile_path(gfile: Gio.File) -> str:
    return gfile.get_path() or gfile.get_uri()


# =============================================================================
# DELETE
# =============================================================================
def delete_item(item) -> None:
    """
    Permanently remove item.path. Directories are removed depth first.

    The first child that cannot be removed stops the walk; children removed
    before it stay removed.

    Raises:
        DeleteError: with the path that failed and the GLib.Error cause
    """
    gfile = Gio.File.new_for_path(item.path)

    if item.is_directory:
        _delete_tree(gfile)
    else:
        try:
            _delete_one(gfile)
        except GLib.Error as e:
            raise DeleteError(item.path, e) from e

    print(f"[TRASH] Deleted: {item.path}")
    _remove_sidecar(item)


def _delete_tree(gfile: Gio.File) -> None:
    path = _gfile_path(gfile)
    try:
        info = gfile.query_info("standard::type", QUERY_FLAGS, None)
    except GLib.Error as e:
        raise DeleteError(path, e) from e

    if info.get_file_type() == Gio.FileType.DIRECTORY:
        # Snapshot names first so deleting does not disturb the enumerator
        try:
            enumerator = gfile.enumerate_children("standard::name", QUERY_FLAGS, None)
        except GLib.Error as e:
            raise DeleteError(path, e) from e
        try:
            names = [child_info.get_name() for child_info in enumerator]
        except GLib.Error as e:
            raise DeleteError(path, e) from e
        finally:
            enumerator.close(None)

        for name in names:
            _delete_tree(gfile.get_child(name))

    try:
        _delete_one(gfile)
    except GLib.Error as e:
        raise DeleteError(path, e) from e


def _delete_one(gfile: Gio.File) -> None:
    """Remove a single file, symlink or empty directory."""
    gfile.delete(None)


# =============================================================================
# RESTORE
# =============================================================================
def restore_item(item) -> None:
    """
    Move item.path back to item.original_path.

    Raises:
        TargetExistsError: something already exists at original_path
        RestoreIOError: parents could not be created, or the move/copy failed
    """
    source = Gio.File.new_for_path(item.path)
    dest = Gio.File.new_for_path(item.original_path)

    if _exists(dest):
        raise TargetExistsError(item.original_path)

    parent = dest.get_parent()
    if parent is not None:
        try:
            _make_parents(parent)
        except GLib.Error as e:
            if not _is_io_error(e, Gio.IOErrorEnum.EXISTS):
                raise RestoreIOError(e, _gfile_path(parent)) from e

    try:
        _rename(source, dest)
    except GLib.Error as e:
        if _is_io_error(e, Gio.IOErrorEnum.EXISTS):
            raise TargetExistsError(item.original_path) from e
        if not _is_io_error(e, *_CROSS_DEVICE_CODES):
            raise RestoreIOError(e, item.path) from e
        print(f"[TRASH] Rename not possible, copying: {item.path} -> {item.original_path}")
        _copy_then_delete(source, dest)

    print(f"[TRASH] Restored: {item.original_path}")
    _remove_sidecar(item)


def _exists(gfile: Gio.File) -> bool:
    """lstat-style existence check; dangling symlinks count."""
    try:
        gfile.query_info("standard::type", QUERY_FLAGS, None)
    except GLib.Error as e:
        if _is_io_error(e, Gio.IOErrorEnum.NOT_FOUND):
            return False
        raise RestoreIOError(e, _gfile_path(gfile)) from e
    return True


def _make_parents(directory: Gio.File) -> None:
    directory.make_directory_with_parents(None)


def _rename(source: Gio.File, dest: Gio.File) -> None:
    """Atomic same-volume move. Never overwrites."""
    source.move(dest, MOVE_FLAGS, None, None, None)


def _copy_then_delete(source: Gio.File, dest: Gio.File) -> None:
    staging = dest.get_parent().get_child(f".{dest.get_basename()}.restoring-{uuid4().hex[:8]}")

    try:
        _copy_tree(source, staging)
    except GLib.Error as e:
        _discard(staging)
        raise RestoreIOError(e, _gfile_path(dest)) from e

    # Copy is complete; publishing it is a same-directory rename
    try:
        _rename(staging, dest)
    except GLib.Error as e:
        _discard(staging)
        if _is_io_error(e, Gio.IOErrorEnum.EXISTS):
            raise TargetExistsError(_gfile_path(dest)) from e
        raise RestoreIOError(e, _gfile_path(dest)) from e

    try:
        _delete_tree(source)
    except DeleteError as e:
        # The restored copy is complete, only the trashed original lingers
        raise RestoreIOError(e.cause, e.path) from e


def _copy_tree(source: Gio.File, dest: Gio.File) -> None:
    info = source.query_info("standard::type", QUERY_FLAGS, None)

    if info.get_file_type() != Gio.FileType.DIRECTORY:
        source.copy(dest, COPY_FLAGS, None, None, None)
        return

    dest.make_directory(None)
    enumerator = source.enumerate_children("standard::name", QUERY_FLAGS, None)
    try:
        for child_info in enumerator:
            name = child_info.get_name()
            _copy_tree(source.get_child(name), dest.get_child(name))
    finally:
        enumerator.close(None)

    # After the children, so mtime is not bumped again
    source.copy_attributes(dest, COPY_FLAGS, None)


def _discard(staging: Gio.File) -> None:
    """Remove a partial staging copy. The caller re-raises the real error."""
    try:
        if _exists(staging):
            _delete_tree(staging)
    except (DeleteError, RestoreIOError) as e:
        print(f"[TRASH] Warning: could not clean up {_gfile_path(staging)}: {e}")


def _remove_sidecar(item) -> None:
    if not item.info_path:
        return
    try:
        Gio.File.new_for_path(item.info_path).delete(None)
    except GLib.Error as e:
        # The object itself is already gone from the trash
        print(f"[TRASH] Warning: could not remove {item.info_path}: {e.message}")


# =============================================================================
# COLLATION
# =============================================================================
def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def collate_by_name(a, b) -> int:
    """Code point order of names, case preserved."""
    return _cmp(a.name, b.name)


def collate_by_date(a, b) -> int:
    """Oldest deletion first; equal timestamps fall back to name."""
    return _cmp(a.deletion_date, b.deletion_date) or collate_by_name(a, b)


def collate_by_type(a, b) -> int:
    """Directories above files, each group by name."""
    if a.is_directory != b.is_directory:
        return -1 if a.is_directory else 1
    return collate_by_name(a, b)
