"""Exceptions raised by ssync."""

from typing import Optional


class SSyncError(Exception):
    """Base exception for all ssync errors."""


class SSyncConfigError(SSyncError):
    """Configuration is missing, malformed or contains an invalid pattern."""


class SSyncIOError(SSyncError):
    """A filesystem operation failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SyncCancelled(Exception):
    """The user declined to apply the pending changes."""
