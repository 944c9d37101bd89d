"""Tree comparison logic: decides what to add, delete and update."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .context import SyncContext
from .operations import SyncOperations
from .scanner import DirectoryInfo, FileInfo

logger = logging.getLogger(__name__)


class DecisionAction(str, Enum):
    """Actions that can be taken on the destination."""

    ADD = "add"
    """Copy a new entry from the source"""

    DELETE = "delete"
    """Remove an entry missing from the source"""

    UPDATE = "update"
    """Overwrite a file whose content changed"""

    @property
    def verb(self) -> str:
        """Capitalized verb used in status lines."""
        return self.value.capitalize()


@dataclass(frozen=True)
class DecisionResultItem:
    """One filesystem operation to perform."""

    action: DecisionAction
    """Action to take"""

    dest_file_info: FileInfo
    """Destination entry (synthesized for ADD)"""

    src_file_info: Optional[FileInfo] = None
    """Source entry (None for DELETE)"""

    @property
    def relative_path(self) -> str:
        """Path of the entry relative to the sync roots."""
        return self.dest_file_info.relative_path


@dataclass
class DecisionResult:
    """Decisions grouped by action and by directory.

    Each mapping goes from a directory's relative path ("." for the sync
    root) to the decisions made at that directory level.

    `context` is the sync context the decisions were made under; it lets the
    execution side apply the same source filter when copying directories.
    """

    add: dict[str, list[DecisionResultItem]] = field(default_factory=dict)
    delete: dict[str, list[DecisionResultItem]] = field(default_factory=dict)
    update: dict[str, list[DecisionResultItem]] = field(default_factory=dict)

    context: Optional[SyncContext] = field(default=None, compare=False)
    """Sync context the decisions were made under"""

    def _mapping(self, action: DecisionAction) -> dict[str, list[DecisionResultItem]]:
        if action == DecisionAction.ADD:
            return self.add
        if action == DecisionAction.DELETE:
            return self.delete
        return self.update

    def append(self, directory: str, item: DecisionResultItem) -> None:
        """Record a decision made in the given directory."""
        self._mapping(item.action).setdefault(directory, []).append(item)

    def merge(self, other: "DecisionResult") -> None:
        """Merge another result into this one.

        Lists under the same directory key are concatenated, so neither
        side's decisions are lost.
        """
        for action in DecisionAction:
            target = self._mapping(action)
            for directory, items in other._mapping(action).items():
                if directory in target:
                    logger.warning(
                        "Duplicate %s decisions for directory %s",
                        action.value,
                        directory,
                    )
                target.setdefault(directory, []).extend(items)

    def items(self, action: DecisionAction) -> Iterator[DecisionResultItem]:
        """Iterate over all decisions with the given action."""
        for items in self._mapping(action).values():
            yield from items

    def count(self, action: DecisionAction) -> int:
        """Number of decisions with the given action."""
        return sum(len(items) for items in self._mapping(action).values())

    def total_count(self) -> int:
        """Number of decisions across all actions."""
        return sum(self.count(action) for action in DecisionAction)

    def is_empty(self) -> bool:
        """True when nothing needs to be done."""
        return self.total_count() == 0


class TreeComparator:
    """Compares a source tree with a destination tree.

    The comparison walks both trees depth-first over directories present on
    both sides. At every level, source entries without a destination
    counterpart are added, destination entries without a source counterpart
    are deleted, and files present on both sides are updated when their
    content differs. Subdirectories only take part when the context is
    recursive.

    Examples:
        >>> comparator = TreeComparator(context, SyncOperations())  # doctest: +SKIP
        >>> result = comparator.decide(from_tree, to_tree)  # doctest: +SKIP
        >>> result.count(DecisionAction.ADD)  # doctest: +SKIP
        2
    """

    def __init__(self, context: SyncContext, operations: SyncOperations):
        """Initialize tree comparator.

        Args:
            context: Sync context
            operations: Filesystem operations used for content comparison
        """
        self.context = context
        self.operations = operations

    def decide(
        self, from_tree: DirectoryInfo, to_tree: DirectoryInfo
    ) -> DecisionResult:
        """Compare two directory trees rooted at corresponding paths.

        Args:
            from_tree: Source directory
            to_tree: Destination directory

        Returns:
            DecisionResult for this directory and everything below it

        Raises:
            SSyncIOError: If file contents or metadata cannot be read
        """
        result = DecisionResult(context=self.context)
        directory = from_tree.relative_path
        recursive = self.context.recursive

        from_files = {f.name: f for f in from_tree.files}
        to_files = {f.name: f for f in to_tree.files}
        from_dirs = {d.name: d for d in from_tree.sub_dirs}
        to_dirs = {d.name: d for d in to_tree.sub_dirs}

        # Add
        for name, src in from_files.items():
            if name in to_files:
                continue
            if not recursive and name in to_dirs:
                logger.warning(
                    "Not adding %s: destination is a directory and directories "
                    "are left alone without recursion",
                    src.relative_path,
                )
                continue
            result.append(directory, self._add_item(src, to_tree))
        if recursive:
            for name, src_dir in from_dirs.items():
                if name not in to_dirs:
                    result.append(
                        directory, self._add_item(src_dir.as_file_info(), to_tree)
                    )

        # Delete
        for name, dest in to_files.items():
            if name not in from_files:
                result.append(
                    directory,
                    DecisionResultItem(
                        action=DecisionAction.DELETE, dest_file_info=dest
                    ),
                )
        if recursive:
            for name, dest_dir in to_dirs.items():
                if name not in from_dirs:
                    result.append(
                        directory,
                        DecisionResultItem(
                            action=DecisionAction.DELETE,
                            dest_file_info=dest_dir.as_file_info(),
                        ),
                    )

        # Update
        for name, dest in to_files.items():
            src = from_files.get(name)
            if src is not None and self.is_changed(src, dest):
                result.append(
                    directory,
                    DecisionResultItem(
                        action=DecisionAction.UPDATE,
                        src_file_info=src,
                        dest_file_info=dest,
                    ),
                )

        if recursive:
            for name, src_dir in from_dirs.items():
                dest_dir = to_dirs.get(name)
                if dest_dir is not None:
                    result.merge(self.decide(src_dir, dest_dir))

        return result

    def _add_item(self, src: FileInfo, to_tree: DirectoryInfo) -> DecisionResultItem:
        """Build an ADD decision, placing the entry below the destination root."""
        dest_path = to_tree.root / src.relative_path
        dest = FileInfo(name=src.name, root=to_tree.root, absolute_dir=dest_path.parent)
        return DecisionResultItem(
            action=DecisionAction.ADD, src_file_info=src, dest_file_info=dest
        )

    def is_changed(self, src: FileInfo, dest: FileInfo) -> bool:
        """Check whether a file present on both sides needs updating.

        Modification times are compared first, but the byte comparison
        always runs and decides: files are unchanged only when their
        contents are identical.

        Args:
            src: Source file
            dest: Destination file

        Returns:
            True if the destination must be overwritten
        """
        same_mtime = src.stat().st_mtime_ns == dest.stat().st_mtime_ns
        same_content = self.operations.files_equal(src.path, dest.path)

        if same_content and not same_mtime:
            logger.debug("Timestamps differ but content matches: %s", dest.path)
        elif same_mtime and not same_content:
            logger.debug("Timestamps match but content differs: %s", dest.path)

        return not same_content
