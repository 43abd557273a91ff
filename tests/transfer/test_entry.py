from datetime import datetime, timedelta, UTC

import pytest

from transfer.entry import StoredFile, TransferEntry, safe_relative_path


def _entry(**kwargs):
    files = [
        StoredFile(stored_name="1-x.txt", display_name="a.txt", relative_path="docs/a.txt", size_bytes=10),
        StoredFile(stored_name="2-y.txt", display_name="b.txt", relative_path="docs/b.txt", size_bytes=32),
    ]
    return TransferEntry(code="123456", files=files, label="docs", **kwargs)


def test_totals_are_derived_from_files():
    entry = _entry()
    assert entry.total_size_bytes == 42
    assert entry.file_count == 2


def test_summary_shape():
    summary = _entry().to_summary()

    assert summary["code"] == "123456"
    assert summary["filename"] == "docs"
    assert summary["size"] == 42
    assert summary["fileCount"] == 2
    assert summary["isZipped"] is False
    assert "originalFileCount" not in summary
    assert summary["files"][1] == {"index": 1, "name": "b.txt", "relativePath": "docs/b.txt", "size": 32}


def test_zipped_summary_reports_original_count():
    summary = _entry(is_zipped=True, original_file_count=7).to_summary()
    assert summary["originalFileCount"] == 7


def test_is_expired_is_strictly_older_than_max_age():
    now = datetime.now(UTC)
    entry = _entry(uploaded_at=now - timedelta(hours=24))

    assert entry.is_expired(now, 24 * 3600) is False
    assert entry.is_expired(now + timedelta(seconds=1), 24 * 3600) is True


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("photos/2026/a.jpg", "photos/2026/a.jpg"),
        ("photos\\win\\a.jpg", "photos/win/a.jpg"),
        ("../../etc/passwd", "etc/passwd"),
        ("/abs/path.txt", "abs/path.txt"),
        ("./a/./b.txt", "a/b.txt"),
        ("C:/Users/me/a.txt", "Users/me/a.txt"),
        ("", "fallback.txt"),
        (None, "fallback.txt"),
        ("..", "fallback.txt"),
    ],
)
def test_safe_relative_path(raw, expected):
    assert safe_relative_path(raw, "fallback.txt") == expected
