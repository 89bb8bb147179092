"""
TrashManager - Owns the Trash Listing and Runs Delete/Restore

Main-thread interface for the view. Holds the TrashItem collection (keyed by
trashed path) with one TrashItemAdapter per item, and runs the blocking
operations in QThreadPool.

Per item:
- at most one delete/restore in flight; a second request is refused
- controls are disabled before the job starts and re-enabled when it ends
- success removes the item and its adapter, failure keeps both

Usage:
    manager = TrashManager()
    manager.operationFinished.connect(on_done)
    manager.refresh()
    ...
    manager.restore(item.path)
"""

from typing import Dict, List, Optional, Set
from uuid import uuid4

from PySide6.QtCore import QObject, Signal, Slot, QThreadPool, QMutex, QMutexLocker

from trashbin.item_adapter import TrashItemAdapter
from trashbin.settings import TrashSettings
from trashbin.sorter import Sorter
from trashbin.trash_item import TrashItem
from trashbin.trash_scanner import default_trash_dir
from trashbin.trash_workers import (
    TrashJob, TrashSignals, DeleteItemRunnable, RestoreItemRunnable, ScanTrashRunnable,
)


def _same_entry(a: TrashItem, b: TrashItem) -> bool:
    return (
        a.original_path == b.original_path
        and a.deletion_date == b.deletion_date
        and a.is_directory == b.is_directory
        and a.info_path == b.info_path
    )


class TrashManager(QObject):
    """
    Non-blocking trash listing and delete/restore.

    Operations on different items run in parallel; operations on the same
    item are serialized by refusing overlap.
    """

    # Public signals
    operationStarted = Signal(str, str, str)              # (job_id, op_type, path)
    operationFinished = Signal(str, str, str, bool, str)  # (job_id, op_type, path, success, message)
    itemRemoved = Signal(str)                             # trashed path
    itemsChanged = Signal()

    def __init__(self, settings: Optional[TrashSettings] = None, parent=None):
        super().__init__(parent)
        self._settings = settings if settings is not None else TrashSettings(parent=self)
        self._pool = QThreadPool.globalInstance()
        self._mutex = QMutex()
        self._jobs: Dict[str, TrashJob] = {}
        self._busy: Set[str] = set()

        self._items: Dict[str, TrashItem] = {}
        self._adapters: Dict[str, TrashItemAdapter] = {}

        self._sorter = Sorter(self)
        self._sorter.setKey(self._settings.sortKey())
        self._sorter.setReverse(self._settings.sortReversed())
        self._sorter.sortChanged.connect(self.itemsChanged)
        self._settings.settingsChanged.connect(self._on_settings_changed)

        # Internal signals bridge
        self._signals = TrashSignals()
        self._signals.started.connect(self._on_started)
        self._signals.finished.connect(self._on_finished)
        self._signals.itemsScanned.connect(self._on_scanned)

    # -------------------------------------------------------------------------
    # COLLECTION
    # -------------------------------------------------------------------------
    @property
    def sorter(self) -> Sorter:
        return self._sorter

    def trashDir(self) -> str:
        return self._settings.trashDir() or default_trash_dir()

    def items(self) -> List[TrashItem]:
        """Items in the current sort order."""
        return self._sorter.sort(list(self._items.values()))

    def item(self, path: str) -> Optional[TrashItem]:
        return self._items.get(path)

    def adapterFor(self, path: str) -> Optional[TrashItemAdapter]:
        return self._adapters.get(path)

    def findByName(self, name: str) -> List[TrashItem]:
        """Exact-name search. Several trashed objects can share a name."""
        return [item for item in self.items() if item.has_name(name)]

    def setItems(self, items: List[TrashItem]) -> None:
        """
        Replace the listing, e.g. with a fresh scan.
        Paths already listed keep their current entry and adapter, unless the
        scan found a different object at that path (trash names get reused).
        """
        with QMutexLocker(self._mutex):
            busy = set(self._busy)

        fresh = {item.path: item for item in items}
        for path in list(self._items):
            if path not in fresh and path not in busy:
                self._drop(path)

        for path, item in fresh.items():
            if path in busy:
                continue
            known = self._items.get(path)
            # Known entries keep their adapter and its UI state
            if known is not None:
                if _same_entry(known, item):
                    continue
                print(f"[TrashManager] {path} now holds a different object, replacing")
                self._drop(path)
            self._items[path] = item
            self._adapters[path] = TrashItemAdapter(item, self)

        self.itemsChanged.emit()

    def _drop(self, path: str) -> None:
        self._items.pop(path, None)
        adapter = self._adapters.pop(path, None)
        if adapter is not None:
            adapter.deleteLater()

    # -------------------------------------------------------------------------
    # PRIVATE SLOTS
    # -------------------------------------------------------------------------
    def _on_settings_changed(self, key: str):
        if key in ("sortKey", ""):
            self._sorter.setKey(self._settings.sortKey())
        if key in ("sortReversed", ""):
            self._sorter.setReverse(self._settings.sortReversed())

    def _on_started(self, job_id: str, op_type: str, path: str):
        self.operationStarted.emit(job_id, op_type, path)

    def _on_finished(self, job_id: str, op_type: str, path: str, success: bool, message: str):
        with QMutexLocker(self._mutex):
            self._jobs.pop(job_id, None)
            self._busy.discard(path)

        if op_type in ("delete", "restore"):
            adapter = self._adapters.get(path)
            if adapter is not None:
                adapter.setControlsSensitive(True)
                adapter.notifyOutcome(op_type, success, message)

            if success:
                print(f"[TrashManager] {op_type} done: {path}")
                self._drop(path)
                self.itemRemoved.emit(path)
                self.itemsChanged.emit()
            else:
                print(f"[TrashManager] {op_type} failed: {message}")

        self.operationFinished.emit(job_id, op_type, path, success, message)

    def _on_scanned(self, job_id: str, items: list):
        self.setItems(items)

    def _submit(self, job: TrashJob, runnable_class) -> str:
        """Submit a job to the thread pool."""
        with QMutexLocker(self._mutex):
            self._jobs[job.id] = job

        runnable = runnable_class(job, self._signals)
        self._pool.start(runnable)
        return job.id

    def _submit_item_job(self, op_type: str, path: str, runnable_class) -> str:
        item = self._items.get(path)
        if item is None:
            print(f"[TrashManager] No trash item at {path}")
            return ""

        with QMutexLocker(self._mutex):
            if path in self._busy:
                print(f"[TrashManager] {op_type} refused, operation already running: {path}")
                return ""
            self._busy.add(path)

        adapter = self._adapters.get(path)
        if adapter is not None:
            adapter.setControlsSensitive(False)

        job = TrashJob(id=str(uuid4()), op_type=op_type, source=path, item=item)
        return self._submit(job, runnable_class)

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------
    @Slot(result=str)
    def refresh(self) -> str:
        """Rescan the trash directory. Returns job_id."""
        job = TrashJob(id=str(uuid4()), op_type="scan", source=self.trashDir())
        return self._submit(job, ScanTrashRunnable)

    @Slot(str, result=str)
    def delete(self, path: str) -> str:
        """Permanently delete an item. Returns job_id, or "" if refused."""
        return self._submit_item_job("delete", path, DeleteItemRunnable)

    @Slot(str, result=str)
    def requestDelete(self, path: str) -> str:
        """
        Delete button handler. With confirmBeforeDelete on, the first call
        only opens the item's confirmation step; the next one deletes.
        """
        adapter = self._adapters.get(path)
        if adapter is None:
            return ""
        if self._settings.confirmBeforeDelete() and not adapter.item.confirmation_pending:
            adapter.toggleConfirmation()
            return ""
        return self.delete(path)

    @Slot(str, result=str)
    def restore(self, path: str) -> str:
        """Restore an item to its original location. Returns job_id, or "" if refused."""
        return self._submit_item_job("restore", path, RestoreItemRunnable)

    @Slot(result=list)
    def deleteAll(self) -> list:
        """Empty the trash, one job per item."""
        return [job_id for job_id in (self.delete(path) for path in list(self._items)) if job_id]

    @Slot(result=list)
    def restoreAll(self) -> list:
        return [job_id for job_id in (self.restore(path) for path in list(self._items)) if job_id]

    def isBusy(self, path: str) -> bool:
        with QMutexLocker(self._mutex):
            return path in self._busy

    def pendingJobs(self) -> int:
        with QMutexLocker(self._mutex):
            return len(self._jobs)

    def waitForDone(self, msecs: int = -1) -> bool:
        """Block until queued jobs have run. Finished signals still need the event loop."""
        return self._pool.waitForDone(msecs)
