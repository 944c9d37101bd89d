"""Core sync engine: loads both trees, decides and applies the decisions."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..exceptions import SyncCancelled
from ..output import OutputFormatter
from ..utils import LOADER_WORKERS, pluralize
from .comparator import (
    DecisionAction,
    DecisionResult,
    DecisionResultItem,
    TreeComparator,
)
from .context import Side, SyncContext
from .filter import PathFilter
from .operations import SyncOperations
from .progress import ProgressCounter
from .scanner import DirectoryInfo, DirectoryLoader

logger = logging.getLogger(__name__)

# Execution order: copy new and changed content before removing anything
EXECUTION_ORDER = (DecisionAction.ADD, DecisionAction.UPDATE, DecisionAction.DELETE)

# Display order for the sync plan
PLAN_ORDER = (DecisionAction.ADD, DecisionAction.DELETE, DecisionAction.UPDATE)

PLAN_SYMBOLS = {
    DecisionAction.ADD: "+",
    DecisionAction.DELETE: "-",
    DecisionAction.UPDATE: "~",
}


class SyncEngine:
    """Core sync engine that mirrors a source directory onto a destination."""

    def __init__(self, output: Optional[OutputFormatter] = None):
        """Initialize sync engine.

        Args:
            output: Output formatter for displaying progress/status
        """
        self.output = output or OutputFormatter()

    def sync(
        self,
        context: SyncContext,
        dry_run: bool = False,
        confirm: Optional[Callable[[DecisionResult], bool]] = None,
        max_workers: int = 1,
    ) -> dict:
        """Mirror the source side of a context onto its destination side.

        Args:
            context: Sync context
            dry_run: If True, only show what would be done
            confirm: Called with the pending decisions before anything is
                changed; returning False cancels the sync
            max_workers: Number of parallel workers per execution phase

        Returns:
            Dictionary with counts of added, updated and deleted entries

        Raises:
            SyncCancelled: If confirm returned False
            SSyncIOError: If a filesystem operation fails

        Examples:
            >>> engine = SyncEngine()
            >>> stats = engine.sync(context, dry_run=True)  # doctest: +SKIP
            >>> print(f"Would add {stats['adds']} entries")  # doctest: +SKIP
        """
        path_filter = PathFilter(context)
        operations = SyncOperations(path_filter)

        if not self.output.quiet:
            self.output.info(
                f"Syncing: {context.from_path.path} -> {context.to_path.path}"
            )
            self.output.info(f"Recursive: {'yes' if context.recursive else 'no'}")
            if dry_run:
                self.output.info("Dry run: No changes will be made")
            self.output.print("")

        # Step 1: Load both trees
        from_tree, to_tree = self.load_trees(context, path_filter)

        # Step 2: Decide
        decide_start = time.time()
        result = TreeComparator(context, operations).decide(from_tree, to_tree)
        logger.debug(
            "Decision took %.2fs (%d item(s))",
            time.time() - decide_start,
            result.total_count(),
        )
        stats = self._categorize_decisions(result)

        if result.is_empty():
            if not self.output.quiet:
                self.output.success("No changes needed - everything is in sync!")
            return stats

        # Step 3: Display plan
        self._display_sync_plan(result)

        if dry_run:
            return stats

        # Step 4: Confirm
        if confirm is not None and not confirm(result):
            raise SyncCancelled()

        # Step 5: Execute
        self.execute(result, operations, max_workers=max_workers)

        # Step 6: Display summary
        if not self.output.quiet:
            self._display_summary(stats)

        return stats

    def load_trees(
        self, context: SyncContext, path_filter: Optional[PathFilter] = None
    ) -> tuple[DirectoryInfo, DirectoryInfo]:
        """Load the source and destination trees concurrently.

        Both loads run on their own thread; this returns once both are done.

        Args:
            context: Sync context
            path_filter: Filter to apply (defaults to one built from context)

        Returns:
            Tuple of (source tree, destination tree)

        Raises:
            SSyncIOError: If either tree cannot be read
        """
        loader = DirectoryLoader(context, path_filter)
        scan_start = time.time()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.output.console,
            transient=True,
            disable=self.output.quiet,
        ) as progress:
            task = progress.add_task("Loading directories...", total=None)

            with ThreadPoolExecutor(max_workers=LOADER_WORKERS) as executor:
                from_future = executor.submit(loader.load_side, Side.SOURCE)
                to_future = executor.submit(loader.load_side, Side.DESTINATION)
                from_tree = from_future.result()
                to_tree = to_future.result()

            progress.update(
                task,
                description=(
                    f"Found {from_tree.count_files()} source and "
                    f"{to_tree.count_files()} destination file(s)"
                ),
            )

        logger.debug(
            "Loading took %.2fs (%d source, %d destination file(s))",
            time.time() - scan_start,
            from_tree.count_files(),
            to_tree.count_files(),
        )
        return from_tree, to_tree

    def execute(
        self,
        result: DecisionResult,
        operations: Optional[SyncOperations] = None,
        max_workers: int = 1,
    ) -> None:
        """Apply decisions to the filesystem.

        All additions run first, then all updates, then all deletions. The
        first failure aborts the run; operations already applied stay
        applied.

        Args:
            result: Decisions to apply
            operations: Filesystem operations (defaults to ones filtered by
                the source side of the context the result was decided under)
            max_workers: Number of parallel workers per phase

        Raises:
            SSyncIOError: If a filesystem operation fails
        """
        if operations is None:
            path_filter = None
            if result.context is not None:
                path_filter = PathFilter(result.context)
            operations = SyncOperations(path_filter)
        counter = ProgressCounter(result.total_count())

        for action in EXECUTION_ORDER:
            items = list(result.items(action))
            if not items:
                continue

            logger.debug("Executing %d %s item(s)", len(items), action.value)
            if max_workers > 1 and len(items) > 1:
                self._execute_parallel(items, operations, counter, max_workers)
            else:
                for item in items:
                    self._execute_item(item, operations, counter)

    def _execute_parallel(
        self,
        items: list[DecisionResultItem],
        operations: SyncOperations,
        counter: ProgressCounter,
        max_workers: int,
    ) -> None:
        """Execute one phase on a thread pool, stopping at the first failure."""
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(self._execute_item, item, operations, counter)
                for item in items
            ]
            try:
                for future in as_completed(futures):
                    future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _execute_item(
        self,
        item: DecisionResultItem,
        operations: SyncOperations,
        counter: ProgressCounter,
    ) -> None:
        """Execute a single decision, printing its status line first."""
        prefix = counter.prefix(counter.increment())
        dest = item.dest_file_info.path

        if item.action == DecisionAction.DELETE:
            self.output.progress_message(f"{prefix}  Delete - {dest}")
            operations.delete_path(dest)
            return

        if item.src_file_info is None:
            raise ValueError(f"{item.action.verb} decision without source: {dest}")

        src = item.src_file_info.path
        self.output.progress_message(f"{prefix}  {item.action.verb} - {src} to {dest}")
        operations.copy_path(
            src, dest, overwrite=item.action == DecisionAction.UPDATE
        )

    def _categorize_decisions(self, result: DecisionResult) -> dict:
        """Count decisions per action.

        Args:
            result: Decision result

        Returns:
            Dictionary with statistics
        """
        return {
            "adds": result.count(DecisionAction.ADD),
            "updates": result.count(DecisionAction.UPDATE),
            "deletes": result.count(DecisionAction.DELETE),
        }

    def _display_sync_plan(self, result: DecisionResult) -> None:
        """Display the pending decisions with their relative paths.

        Args:
            result: Decision result
        """
        if self.output.quiet:
            return

        self.output.info("Sync plan:")
        for action in PLAN_ORDER:
            count = result.count(action)
            if count == 0:
                continue
            symbol = PLAN_SYMBOLS[action]
            self.output.info(f"  {symbol} {action.verb}: {pluralize(count, 'entry')}")
            for item in result.items(action):
                self.output.info(f"      {item.relative_path}")

        self.output.print("")

    def _display_summary(self, stats: dict) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
        """
        self.output.print("")
        self.output.success("Sync complete!")

        total_actions = stats["adds"] + stats["updates"] + stats["deletes"]
        self.output.info(f"Total actions: {total_actions}")
        if stats["adds"] > 0:
            self.output.info(f"  Added: {stats['adds']}")
        if stats["updates"] > 0:
            self.output.info(f"  Updated: {stats['updates']}")
        if stats["deletes"] > 0:
            self.output.info(f"  Deleted: {stats['deletes']}")
