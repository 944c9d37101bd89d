"""Utility functions for ssync."""

# =============================================================================
# Constants for file operations
# =============================================================================

# Read size for byte-by-byte file comparison (64 KB)
COMPARE_CHUNK_SIZE: int = 64 * 1024

# Threads used to load the source and destination trees
LOADER_WORKERS: int = 2


# =============================================================================
# Formatting utilities
# =============================================================================


def pluralize(count: int, noun: str) -> str:
    """Format a count with a noun, e.g. "1 file" or "3 files".

    Examples:
        >>> pluralize(1, "file")
        '1 file'
        >>> pluralize(3, "entry")
        '3 entries'
    """
    if count == 1:
        return f"{count} {noun}"
    if noun.endswith("y"):
        return f"{count} {noun[:-1]}ies"
    return f"{count} {noun}s"
