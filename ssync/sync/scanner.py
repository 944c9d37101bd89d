"""Directory loading: builds in-memory trees of the entries taking part in a sync."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from ..exceptions import SSyncConfigError, SSyncIOError
from .context import Side, SyncContext
from .filter import PathFilter

logger = logging.getLogger(__name__)


def _relative_posix(path: Path, root: Path) -> str:
    """Path relative to root using forward slashes ("." for the root itself)."""
    return path.relative_to(root).as_posix()


@dataclass(frozen=True)
class FileInfo:
    """A single filesystem entry below a sync root.

    Used for files and, in decisions, for whole directories that are added
    or deleted.
    """

    name: str
    """Entry name"""

    root: Path
    """Canonical top-level sync root this entry belongs to"""

    absolute_dir: Path
    """Canonical directory containing the entry"""

    @property
    def path(self) -> Path:
        """Absolute path of the entry."""
        return self.absolute_dir / self.name

    @property
    def relative_path(self) -> str:
        """Path relative to the sync root (using forward slashes)."""
        return _relative_posix(self.path, self.root)

    def stat(self) -> os.stat_result:
        """Stat the entry.

        Raises:
            SSyncIOError: If the metadata cannot be read
        """
        try:
            return self.path.stat()
        except OSError as e:
            raise SSyncIOError(
                f"Cannot read metadata of {self.path}: {e}", str(self.path)
            ) from e


@dataclass
class DirectoryInfo:
    """A directory node and its (filtered) children."""

    root: Path
    """Canonical top-level sync root"""

    absolute_dir: Path
    """Canonical path of this directory"""

    sub_dirs: list["DirectoryInfo"] = field(default_factory=list)
    """Child directories (empty leaves when loaded non-recursively)"""

    files: list[FileInfo] = field(default_factory=list)
    """Files directly inside this directory"""

    @property
    def name(self) -> str:
        """Directory name."""
        return self.absolute_dir.name

    @property
    def relative_path(self) -> str:
        """Path relative to the sync root ("." for the root itself)."""
        return _relative_posix(self.absolute_dir, self.root)

    def as_file_info(self) -> FileInfo:
        """Describe this directory as an entry of its parent."""
        return FileInfo(
            name=self.name, root=self.root, absolute_dir=self.absolute_dir.parent
        )

    def count_files(self) -> int:
        """Number of files in this directory and all loaded subdirectories."""
        return len(self.files) + sum(d.count_files() for d in self.sub_dirs)


def canonicalize(path: Union[str, Path]) -> Path:
    """Resolve a path to its canonical absolute form.

    Missing paths are allowed; symlinks and ".." are resolved as far as the
    path exists.

    Raises:
        SSyncIOError: If the path cannot be resolved (e.g. a symlink loop)
    """
    try:
        return Path(path).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        raise SSyncIOError(f"Cannot resolve path {path}: {e}", str(path)) from e


class DirectoryLoader:
    """Walks a directory and builds a DirectoryInfo tree.

    Entries rejected by the side's PathFilter never appear in the tree, so
    the rest of the system never sees them.

    Examples:
        >>> loader = DirectoryLoader(context)  # doctest: +SKIP
        >>> tree = loader.load("/data", True, "/data", Side.SOURCE)  # doctest: +SKIP
        >>> [f.name for f in tree.files]  # doctest: +SKIP
        ['a.txt', 'b.txt']
    """

    def __init__(self, context: SyncContext, path_filter: Optional[PathFilter] = None):
        """Initialize directory loader.

        Args:
            context: Sync context
            path_filter: Filter to apply (defaults to one built from context)
        """
        self.context = context
        self.path_filter = path_filter or PathFilter(context)

    def load_side(self, side: Side) -> DirectoryInfo:
        """Load the tree for one side of the context, rooted at its path."""
        path = self.context.for_side(side).path
        return self.load(path, self.context.recursive, path, side)

    def load(
        self,
        absolute_path: Union[str, Path],
        recursive: bool,
        root: Union[str, Path, None],
        side: Side,
    ) -> DirectoryInfo:
        """Load a directory tree.

        Args:
            absolute_path: Directory to load
            recursive: Whether to load subdirectories' contents
            root: Sync root the relative paths are computed from
            side: Side whose filter patterns apply

        Returns:
            DirectoryInfo for the directory (empty if it does not exist or
            is not a directory)

        Raises:
            SSyncConfigError: If recursive loading is requested without a root
            SSyncIOError: If a path cannot be resolved or a directory cannot
                be listed
        """
        if recursive and not root:
            raise SSyncConfigError("Recursive loading requires a sync root")

        directory = canonicalize(absolute_path)
        root_path = canonicalize(root) if root else directory

        if not directory.is_dir():
            logger.debug("Not a directory, treating as empty: %s", directory)
            return DirectoryInfo(root=root_path, absolute_dir=directory)

        return self._load_directory(directory, recursive, root_path, side)

    def _load_directory(
        self, directory: Path, recursive: bool, root: Path, side: Side
    ) -> DirectoryInfo:
        info = DirectoryInfo(root=root, absolute_dir=directory)

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise SSyncIOError(
                f"Cannot read directory {directory}: {e}", str(directory)
            ) from e

        for item in entries:
            if not self.path_filter.admit(str(item), side):
                continue

            if item.is_dir():
                if recursive:
                    info.sub_dirs.append(
                        self._load_directory(item, recursive, root, side)
                    )
                else:
                    info.sub_dirs.append(DirectoryInfo(root=root, absolute_dir=item))
            elif item.is_file():
                info.files.append(
                    FileInfo(name=item.name, root=root, absolute_dir=directory)
                )
            else:
                logger.debug("Skipping special file: %s", item)

        return info
