"""
Trash Workers
QRunnables for the blocking trash operations (Delete, Restore, Scan).

Each runnable reports through a shared TrashSignals hub; since the hub lives
in the main thread, connected slots run there via queued connections.
"""

from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QObject, Signal, QRunnable

from trashbin.errors import TrashError
from trashbin.trash_item import TrashItem
from trashbin.trash_operations import delete_item, restore_item
from trashbin.trash_scanner import TrashScanner


@dataclass
class TrashJob:
    """Tracks one trash operation."""
    id: str
    op_type: str                      # "delete", "restore", "scan"
    source: str = ""                  # Trashed path (delete/restore) or trash dir (scan)
    item: Optional[TrashItem] = None
    status: str = "pending"           # "pending", "running", "done", "error"


class TrashSignals(QObject):
    """Signals emitted by trash runnables."""
    started = Signal(str, str, str)              # (job_id, op_type, source)
    finished = Signal(str, str, str, bool, str)  # (job_id, op_type, source, success, message)
    itemsScanned = Signal(str, object)           # (job_id, list[TrashItem])


class TrashRunnable(QRunnable):
    """Base class for trash operations."""

    def __init__(self, job: TrashJob, signals: TrashSignals):
        super().__init__()
        self.job = job
        self.signals = signals
        self.setAutoDelete(True)

    def emit_started(self):
        self.job.status = "running"
        self.signals.started.emit(self.job.id, self.job.op_type, self.job.source)

    def emit_finished(self, success: bool, message: str = ""):
        self.job.status = "done" if success else "error"
        self.signals.finished.emit(self.job.id, self.job.op_type, self.job.source, success, message)

    def run(self):
        self.emit_started()
        try:
            message = self.perform()
        except TrashError as e:
            print(f"[TRASH:{self.job.id[:8]}] {self.job.op_type} FAILED: {e}")
            self.emit_finished(False, str(e))
        except Exception as e:
            # Anything else still has to reach the host so controls come back
            print(f"[TRASH:{self.job.id[:8]}] {self.job.op_type} crashed: {e!r}")
            self.emit_finished(False, str(e))
        else:
            self.emit_finished(True, message)

    def perform(self) -> str:
        raise NotImplementedError


class DeleteItemRunnable(TrashRunnable):
    """Permanently erases one item."""

    def perform(self) -> str:
        delete_item(self.job.item)
        return self.job.item.path


class RestoreItemRunnable(TrashRunnable):
    """Moves one item back to where it came from."""

    def perform(self) -> str:
        restore_item(self.job.item)
        return self.job.item.original_path


class ScanTrashRunnable(TrashRunnable):
    """Lists a trash directory."""

    def perform(self) -> str:
        items = TrashScanner(self.job.source or None).scan()
        self.signals.itemsScanned.emit(self.job.id, items)
        return str(len(items))
