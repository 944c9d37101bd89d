"""Console output helpers built on Rich."""

from typing import Optional

from rich.console import Console


class OutputFormatter:
    """Formats user-facing messages.

    Regular messages go to stdout, errors to stderr. In quiet mode only
    errors are shown.
    """

    def __init__(self, quiet: bool = False, console: Optional[Console] = None):
        """Initialize output formatter.

        Args:
            quiet: Suppress everything except errors
            console: Console for regular output (defaults to stdout)
        """
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def _emit(self, message: str, style: Optional[str] = None) -> None:
        self.console.print(message, style=style, markup=False, soft_wrap=True)

    def print(self, message: str = "") -> None:
        """Print a plain line."""
        if not self.quiet:
            self._emit(message)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if not self.quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        """Print a success message."""
        if not self.quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Print a warning."""
        if not self.quiet:
            self._emit(message, style="yellow")

    def error(self, message: str) -> None:
        """Print an error (always shown, on stderr)."""
        self.err_console.print(
            f"Error: {message}", style="bold red", markup=False, soft_wrap=True
        )

    def progress_message(self, message: str) -> None:
        """Print a per-operation status line."""
        if not self.quiet:
            self._emit(message, style="cyan")
