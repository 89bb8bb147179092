import os
import sys
import time
from datetime import datetime

import pytest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from PySide6.QtCore import QCoreApplication

from trashbin.trash_info import TrashInfo
from trashbin.trash_item import TrashItem


@pytest.fixture(scope="session")
def qapp():
    """Headless Qt application for signal delivery (no display server)."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def wait_until(predicate, timeout_ms=5000) -> bool:
    """Pump the event loop until predicate() is true."""
    start = time.time()
    while not predicate():
        QCoreApplication.processEvents()
        if (time.time() - start) * 1000 > timeout_ms:
            return False
        time.sleep(0.01)
    return True


def make_item(name, is_directory=False, deleted=None, path=None, original_path=None, icon=None):
    """In-memory TrashItem; nothing is touched on disk."""
    info = TrashInfo(
        original_path or f"/home/user/{name}",
        deleted or datetime(2024, 1, 1, 12, 0, 0),
    )
    return TrashItem(name, path or f"/trash/files/{name}", icon, is_directory, info)


@pytest.fixture
def trash_dir(tmp_path):
    """An empty freedesktop trash layout: files/ and info/."""
    root = tmp_path / "Trash"
    (root / "files").mkdir(parents=True)
    (root / "info").mkdir()
    return root


@pytest.fixture
def trashed(trash_dir):
    """
    Factory placing an object in the trash with its .trashinfo.

    content=str makes a file, content=dict makes a directory tree.
    Returns the trashed path.
    """
    def _trash(trash_name, original_path, content="data", deleted="2024-05-01T14:03:22"):
        target = trash_dir / "files" / trash_name
        _write_tree(target, content)
        (trash_dir / "info" / f"{trash_name}.trashinfo").write_text(
            "[Trash Info]\n"
            f"Path={original_path}\n"
            f"DeletionDate={deleted}\n"
        )
        return target
    return _trash


def _write_tree(target, content):
    if isinstance(content, dict):
        target.mkdir()
        for child, child_content in content.items():
            _write_tree(target / child, child_content)
    else:
        target.write_text(content)
