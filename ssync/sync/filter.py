"""Include/exclude filtering of absolute paths."""

import logging

from .context import Side, SyncContext

logger = logging.getLogger(__name__)


class PathFilter:
    """Decides whether an entry takes part in the sync.

    Each side has its own include and exclude lists. When a side's include
    list is non-empty, only paths matching one of its patterns are admitted
    and the exclude list is not consulted. Otherwise every path is admitted
    unless an exclude pattern matches. Patterns are searched for anywhere in
    the absolute path, they are not anchored.

    Examples:
        >>> path_filter = PathFilter(context)  # doctest: +SKIP
        >>> path_filter.admit("/data/notes.txt", Side.SOURCE)  # doctest: +SKIP
        True
    """

    def __init__(self, context: SyncContext):
        """Initialize path filter.

        Args:
            context: Sync context holding both sides' patterns
        """
        self.context = context

    def admit(self, absolute_path: str, side: Side) -> bool:
        """Check whether a path is part of the sync on the given side.

        Args:
            absolute_path: Absolute path of the entry
            side: Side whose patterns apply

        Returns:
            True if the entry takes part in the sync
        """
        sync_path = self.context.for_side(side)

        if sync_path.include:
            for pattern in sync_path.include:
                if pattern.search(absolute_path):
                    return True
            logger.debug("Not included (%s): %s", side.value, absolute_path)
            return False

        for pattern in sync_path.exclude:
            if pattern.search(absolute_path):
                logger.debug(
                    "Excluded by %r (%s): %s",
                    pattern.pattern,
                    side.value,
                    absolute_path,
                )
                return False
        return True
