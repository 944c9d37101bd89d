"""Progress accounting for applying sync decisions."""

import threading


class ProgressCounter:
    """Thread-safe, monotonically increasing counter of started operations.

    Examples:
        >>> counter = ProgressCounter(total=3)
        >>> counter.increment()
        1
        >>> counter.prefix(1)
        '1/3'
    """

    def __init__(self, total: int):
        """Initialize progress counter.

        Args:
            total: Number of operations that will be run
        """
        self.total = total
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        """Number of operations started so far."""
        with self._lock:
            return self._count

    def increment(self) -> int:
        """Count one more operation and return the new count."""
        with self._lock:
            self._count += 1
            return self._count

    def prefix(self, count: int) -> str:
        """Format the "<count>/<total>" status prefix."""
        return f"{count}/{self.total}"
