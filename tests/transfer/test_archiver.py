import zipfile

import pytest

from tests.helpers import write_file
from transfer.archiver import COMPRESSION_LEVEL, pack
from transfer.errors import ArchiveError


def test_pack_writes_members_at_relative_paths(tmp_path):
    a = write_file(tmp_path / "src" / "1", b"alpha" * 100)
    b = write_file(tmp_path / "src" / "2", b"beta")

    dest = pack([(a, "trip/a.txt"), (b, "trip/sub/b.txt")], tmp_path / "out" / "trip.zip")

    with zipfile.ZipFile(dest) as archive:
        assert sorted(archive.namelist()) == ["trip/a.txt", "trip/sub/b.txt"]
        assert archive.read("trip/a.txt") == b"alpha" * 100
        assert archive.read("trip/sub/b.txt") == b"beta"
        assert archive.getinfo("trip/a.txt").compress_type == zipfile.ZIP_DEFLATED


def test_compression_level_is_moderate():
    assert 1 < COMPRESSION_LEVEL < 9


def test_pack_failure_leaves_nothing_behind(tmp_path):
    a = write_file(tmp_path / "a.txt", b"alpha")
    dest = tmp_path / "out.zip"

    with pytest.raises(ArchiveError, match="out.zip"):
        pack([(a, "a.txt"), (tmp_path / "missing.txt", "missing.txt")], dest)

    assert not dest.exists()
    assert list(tmp_path.glob(".out.zip.*")) == []


def test_pack_does_not_replace_existing_destination_on_failure(tmp_path):
    dest = write_file(tmp_path / "out.zip", b"previous")

    with pytest.raises(ArchiveError):
        pack([(tmp_path / "missing.txt", "missing.txt")], dest)

    assert dest.read_bytes() == b"previous"
