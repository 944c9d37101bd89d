"""Sync engine for ssync - one-way mirroring of a directory tree."""

from .comparator import (
    DecisionAction,
    DecisionResult,
    DecisionResultItem,
    TreeComparator,
)
from .config import DEFAULT_CONFIG_FILE, load_sync_context
from .context import Side, SyncContext, SyncPath
from .engine import SyncEngine
from .filter import PathFilter
from .operations import SyncOperations
from .progress import ProgressCounter
from .scanner import DirectoryInfo, DirectoryLoader, FileInfo

__all__ = [
    "SyncEngine",
    "SyncContext",
    "SyncPath",
    "Side",
    "DEFAULT_CONFIG_FILE",
    "load_sync_context",
    "PathFilter",
    "DirectoryLoader",
    "DirectoryInfo",
    "FileInfo",
    "TreeComparator",
    "DecisionAction",
    "DecisionResult",
    "DecisionResultItem",
    "SyncOperations",
    "ProgressCounter",
]
