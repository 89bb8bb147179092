"""
Tests for .trashinfo parsing.

Usage:
    pytest tests/test_trash_info.py -v
"""

from datetime import datetime

import pytest

from trashbin.errors import TrashInfoError
from trashbin.trash_info import TrashInfo, parse_deletion_date


def write_info(tmp_path, body, name="x.trashinfo"):
    path = tmp_path / name
    path.write_text(body)
    return str(path)


def test_parses_path_and_date(tmp_path):
    info_path = write_info(tmp_path, "[Trash Info]\nPath=/home/user/a.txt\nDeletionDate=2024-05-01T14:03:22\n")
    info = TrashInfo.from_file(info_path)

    assert info.original_path == "/home/user/a.txt"
    assert info.deletion_date == datetime(2024, 5, 1, 14, 3, 22)
    assert info.info_path == info_path


def test_path_is_percent_decoded(tmp_path):
    info_path = write_info(
        tmp_path,
        "[Trash Info]\nPath=/home/user/My%20Docs/caf%C3%A9%25.txt\nDeletionDate=2024-05-01T14:03:22\n",
    )
    assert TrashInfo.from_file(info_path).original_path == "/home/user/My Docs/café%.txt"


def test_relative_path_uses_topdir(tmp_path):
    info_path = write_info(tmp_path, "[Trash Info]\nPath=photos/b.jpg\nDeletionDate=2024-05-01T14:03:22\n")

    assert TrashInfo.from_file(info_path, topdir="/media/usb").original_path == "/media/usb/photos/b.jpg"
    with pytest.raises(TrashInfoError):
        TrashInfo.from_file(info_path)


@pytest.mark.parametrize("body", [
    "Path=/a\nDeletionDate=2024-05-01T14:03:22\n",                  # no group
    "[Trash Info]\nDeletionDate=2024-05-01T14:03:22\n",             # no Path
    "[Trash Info]\nPath=/a\n",                                      # no date
    "[Trash Info]\nPath=/a\nDeletionDate=yesterday\n",              # bad date
    "[Trash Info]\nPath=\nDeletionDate=2024-05-01T14:03:22\n",      # empty Path
])
def test_malformed_sidecars_raise(tmp_path, body):
    with pytest.raises(TrashInfoError) as exc:
        TrashInfo.from_file(write_info(tmp_path, body))
    assert exc.value.path.endswith("x.trashinfo")


def test_missing_file_raises(tmp_path):
    with pytest.raises(TrashInfoError):
        TrashInfo.from_file(str(tmp_path / "nope.trashinfo"))


def test_deletion_date_variants():
    assert parse_deletion_date("2024-05-01T14:03:22") == datetime(2024, 5, 1, 14, 3, 22)
    assert parse_deletion_date("2024-05-01T14:03:22.250") == datetime(2024, 5, 1, 14, 3, 22, 250000)
    assert parse_deletion_date(" 2024-05-01T14:03:22 ") == datetime(2024, 5, 1, 14, 3, 22)
    assert parse_deletion_date("2024-05-01T14:03:22+00:00").tzinfo is None
    with pytest.raises(ValueError):
        parse_deletion_date("")
