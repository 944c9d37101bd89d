"""Filesystem operations used to apply sync decisions."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from ..exceptions import SSyncIOError
from ..utils import COMPARE_CHUNK_SIZE
from .context import Side
from .filter import PathFilter

logger = logging.getLogger(__name__)


class SyncOperations:
    """Copy, delete and compare operations on the local filesystem.

    Every OSError is re-raised as SSyncIOError; nothing is retried.
    """

    def __init__(self, path_filter: Optional[PathFilter] = None):
        """Initialize sync operations.

        Args:
            path_filter: Source-side filter applied to the children of copied
                directories. When None, everything is copied.
        """
        self.path_filter = path_filter

    def copy_path(self, src: Path, dest: Path, overwrite: bool = False) -> None:
        """Copy a file or directory tree.

        Directories are created and their children copied recursively;
        directory timestamps are left alone. Files keep the source's access
        and modification times.

        Args:
            src: Source file or directory
            dest: Destination path
            overwrite: If True, an existing destination file is replaced;
                otherwise it is left untouched

        Raises:
            SSyncIOError: If reading, writing or stat-ing fails
        """
        try:
            if src.is_dir():
                if not overwrite and dest.exists() and not dest.is_dir():
                    logger.debug("Destination exists, not overwriting: %s", dest)
                    return
                self._copy_directory(src, dest)
            else:
                self._copy_file(src, dest, overwrite)
        except SSyncIOError:
            raise
        except OSError as e:
            raise SSyncIOError(f"Failed to copy {src} to {dest}: {e}", str(src)) from e

    def _copy_directory(self, src: Path, dest: Path) -> None:
        dest.mkdir(parents=True, exist_ok=True)
        for child in sorted(src.iterdir()):
            if self.path_filter is not None and not self.path_filter.admit(
                str(child), Side.SOURCE
            ):
                continue
            if child.is_dir():
                self._copy_directory(child, dest / child.name)
            else:
                self._copy_file(child, dest / child.name, overwrite=True)

    def _copy_file(self, src: Path, dest: Path, overwrite: bool) -> None:
        if dest.exists() or dest.is_symlink():
            if not overwrite:
                logger.debug("Destination exists, not overwriting: %s", dest)
                return
            dest.unlink()

        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)

        stat = src.stat()
        os.utime(dest, ns=(stat.st_atime_ns, stat.st_mtime_ns))
        logger.debug("Copied %s -> %s (%d bytes)", src, dest, stat.st_size)

    def delete_path(self, path: Path) -> None:
        """Delete a file, or a directory with all its contents.

        Raises:
            SSyncIOError: If the deletion fails
        """
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            raise SSyncIOError(f"Failed to delete {path}: {e}", str(path)) from e
        logger.debug("Deleted %s", path)

    def files_equal(self, first: Path, second: Path) -> bool:
        """Compare two files byte by byte.

        Sizes are compared first; only same-sized files are read.

        Raises:
            SSyncIOError: If either file cannot be read
        """
        try:
            if first.stat().st_size != second.stat().st_size:
                return False

            with open(first, "rb") as f1, open(second, "rb") as f2:
                while True:
                    chunk1 = f1.read(COMPARE_CHUNK_SIZE)
                    chunk2 = f2.read(COMPARE_CHUNK_SIZE)
                    if chunk1 != chunk2:
                        return False
                    if not chunk1:
                        return True
        except OSError as e:
            raise SSyncIOError(
                f"Failed to compare {first} with {second}: {e}", str(first)
            ) from e
