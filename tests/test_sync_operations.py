"""Tests for the SyncOperations class."""

import os
import tempfile
from pathlib import Path

import pytest

from ssync.exceptions import SSyncIOError
from ssync.sync.context import SyncContext
from ssync.sync.filter import PathFilter
from ssync.sync.operations import SyncOperations


class TestSyncOperations:
    """Test copy, delete and compare operations."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for testing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir).resolve()

    @pytest.fixture
    def operations(self):
        """Create unfiltered sync operations."""
        return SyncOperations()

    def test_copy_file_preserves_content_and_timestamps(self, temp_dir, operations):
        """A copied file is byte-identical and keeps the source timestamps."""
        src = temp_dir / "a.bin"
        src.write_bytes(os.urandom(200_000))
        os.utime(src, ns=(1_600_000_000_123_456_789, 1_600_000_100_987_654_321))
        dest = temp_dir / "out" / "a.bin"

        operations.copy_path(src, dest)

        src_stat = src.stat()
        dest_stat = dest.stat()
        assert dest_stat.st_mtime_ns == src_stat.st_mtime_ns
        assert dest_stat.st_atime_ns == src_stat.st_atime_ns
        assert dest.read_bytes() == src.read_bytes()
        assert operations.files_equal(src, dest)

    def test_copy_file_does_not_overwrite_by_default(self, temp_dir, operations):
        """Without overwrite an existing destination is left alone."""
        src = temp_dir / "a.txt"
        src.write_text("new")
        dest = temp_dir / "b.txt"
        dest.write_text("old")

        operations.copy_path(src, dest)

        assert dest.read_text() == "old"

    def test_copy_file_overwrite(self, temp_dir, operations):
        """With overwrite an existing destination is replaced."""
        src = temp_dir / "a.txt"
        src.write_text("new content")
        dest = temp_dir / "b.txt"
        dest.write_text("old")

        operations.copy_path(src, dest, overwrite=True)

        assert dest.read_text() == "new content"
        assert dest.stat().st_mtime_ns == src.stat().st_mtime_ns

    def test_copy_directory_recursively(self, temp_dir, operations):
        """Directories are copied with all their contents."""
        src = temp_dir / "src"
        (src / "sub" / "deep").mkdir(parents=True)
        (src / "a.txt").write_text("a")
        (src / "sub" / "deep" / "b.txt").write_text("b")
        dest = temp_dir / "dest" / "src"

        operations.copy_path(src, dest)

        assert (dest / "a.txt").read_text() == "a"
        assert (dest / "sub" / "deep" / "b.txt").read_text() == "b"

    def test_copy_directory_applies_source_filter(self, temp_dir):
        """Children rejected by the source filter are not copied."""
        src = temp_dir / "src"
        (src / "cache").mkdir(parents=True)
        (src / "keep.txt").write_text("k")
        (src / "skip.tmp").write_text("s")
        (src / "cache" / "c.txt").write_text("c")
        context = SyncContext.from_dict(
            {
                "from": {"path": str(src), "exclude": [r"\.tmp$", "/cache$"]},
                "to": {"path": str(temp_dir / "dest")},
            }
        )
        operations = SyncOperations(PathFilter(context))
        dest = temp_dir / "dest"

        operations.copy_path(src, dest)

        assert sorted(p.name for p in dest.iterdir()) == ["keep.txt"]

    def test_copy_directory_onto_file_is_skipped(self, temp_dir, operations):
        """A directory is not copied over an existing file without overwrite."""
        src = temp_dir / "src"
        src.mkdir()
        (src / "a.txt").write_text("a")
        dest = temp_dir / "dest"
        dest.write_text("file")

        operations.copy_path(src, dest)

        assert dest.read_text() == "file"

    def test_copy_missing_source_raises(self, temp_dir, operations):
        """Copy failures are reported as SSyncIOError."""
        with pytest.raises(SSyncIOError):
            operations.copy_path(temp_dir / "missing", temp_dir / "dest")

    def test_delete_file(self, temp_dir, operations):
        """A single file is removed."""
        path = temp_dir / "a.txt"
        path.write_text("a")

        operations.delete_path(path)

        assert not path.exists()

    def test_delete_directory(self, temp_dir, operations):
        """A directory is removed with all its contents."""
        path = temp_dir / "dir"
        (path / "sub").mkdir(parents=True)
        (path / "sub" / "x.txt").write_text("x")

        operations.delete_path(path)

        assert not path.exists()

    def test_delete_missing_raises(self, temp_dir, operations):
        """Deleting a missing path is reported as SSyncIOError."""
        with pytest.raises(SSyncIOError) as exc_info:
            operations.delete_path(temp_dir / "missing")

        assert exc_info.value.path == str(temp_dir / "missing")

    def test_files_equal(self, temp_dir, operations):
        """Files with the same bytes are equal."""
        first = temp_dir / "a"
        second = temp_dir / "b"
        first.write_bytes(b"x" * 100_000)
        second.write_bytes(b"x" * 100_000)

        assert operations.files_equal(first, second)

    def test_files_differ_in_size(self, temp_dir, operations):
        """Files with different sizes are not equal."""
        first = temp_dir / "a"
        second = temp_dir / "b"
        first.write_bytes(b"abc")
        second.write_bytes(b"abcd")

        assert not operations.files_equal(first, second)

    def test_files_differ_in_last_chunk(self, temp_dir, operations):
        """A difference past the first chunk is detected."""
        first = temp_dir / "a"
        second = temp_dir / "b"
        first.write_bytes(b"x" * 200_000 + b"1")
        second.write_bytes(b"x" * 200_000 + b"2")

        assert not operations.files_equal(first, second)

    def test_files_equal_missing_raises(self, temp_dir, operations):
        """Comparing a missing file is reported as SSyncIOError."""
        existing = temp_dir / "a"
        existing.write_text("a")

        with pytest.raises(SSyncIOError):
            operations.files_equal(existing, temp_dir / "missing")
