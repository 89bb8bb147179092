"""
Trash error taxonomy.

Every failure of the trash core surfaces as one of these. `cause` carries the
underlying GLib.Error / OSError so the host can show the real reason.
"""

import gi
gi.require_version('Gio', '2.0')
from gi.repository import Gio, GLib


class TrashError(Exception):
    """Base class for all trash core errors."""


class InvalidEntryError(TrashError, ValueError):
    """A TrashItem was constructed from inputs that break its contract."""


class TrashInfoError(TrashError):
    """A .trashinfo sidecar could not be parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DeleteError(TrashError):
    """Permanent deletion failed at `path`."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Could not delete {path}: {describe_cause(cause)}")
        self.path = path
        self.cause = cause


class RestoreError(TrashError):
    """Base class for restore failures."""


class TargetExistsError(RestoreError):
    """Something already occupies the original location. Nothing was moved."""

    def __init__(self, path: str):
        super().__init__(f"Target already exists: {path}")
        self.path = path


class RestoreIOError(RestoreError):
    """Creating ancestors, moving or copying failed."""

    def __init__(self, cause: Exception, path: str = ""):
        where = f" ({path})" if path else ""
        super().__init__(f"Restore failed{where}: {describe_cause(cause)}")
        self.cause = cause
        self.path = path


def describe_cause(cause: Exception) -> str:
    """Human readable reason for a low-level failure."""
    if isinstance(cause, GLib.Error):
        if cause.matches(Gio.io_error_quark(), Gio.IOErrorEnum.PERMISSION_DENIED):
            return "Permission denied"
        if cause.matches(Gio.io_error_quark(), Gio.IOErrorEnum.NOT_FOUND):
            return "No such file or directory"
        if cause.matches(Gio.io_error_quark(), Gio.IOErrorEnum.EXISTS):
            return "Target already exists"
        if cause.matches(Gio.io_error_quark(), Gio.IOErrorEnum.BUSY):
            return "Resource busy"
        return cause.message
    if isinstance(cause, OSError) and cause.strerror:
        return cause.strerror
    return str(cause)
