"""ssync - simple one-way local directory mirroring."""

from .exceptions import SSyncConfigError, SSyncError, SSyncIOError, SyncCancelled
from .sync import SyncContext, SyncEngine, SyncPath, load_sync_context

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "SyncContext",
    "SyncPath",
    "load_sync_context",
    "SSyncError",
    "SSyncConfigError",
    "SSyncIOError",
    "SyncCancelled",
]
