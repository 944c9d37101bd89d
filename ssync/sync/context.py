"""Sync context: the two sides of a sync and their filter patterns."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ..exceptions import SSyncConfigError


class Side(str, Enum):
    """Which half of the sync configuration an entry belongs to."""

    SOURCE = "from"
    """Directory being mirrored"""

    DESTINATION = "to"
    """Directory receiving the mirror"""


def _compile_patterns(value: Any, key: str) -> tuple[re.Pattern, ...]:
    """Compile a list of regular expression strings.

    Args:
        value: None, a single pattern string or a list of pattern strings
        key: Configuration key used in error messages (e.g. "from.include")

    Returns:
        Tuple of compiled patterns

    Raises:
        SSyncConfigError: If the value is not a list of strings or a
            pattern does not compile
    """
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise SSyncConfigError(f"'{key}' must be a list of patterns")

    patterns = []
    for item in value:
        if not isinstance(item, str):
            raise SSyncConfigError(f"'{key}' entries must be strings, got {item!r}")
        try:
            patterns.append(re.compile(item))
        except re.error as e:
            raise SSyncConfigError(f"Invalid pattern in '{key}': {item!r} ({e})") from e
    return tuple(patterns)


@dataclass(frozen=True)
class SyncPath:
    """One side of the sync configuration."""

    path: str
    """Directory path"""

    include: tuple[re.Pattern, ...] = field(default_factory=tuple)
    """Patterns an entry must match to take part (when non-empty)"""

    exclude: tuple[re.Pattern, ...] = field(default_factory=tuple)
    """Patterns that remove an entry (only used when include is empty)"""

    @classmethod
    def from_dict(
        cls, data: Any, side: Side, base_dir: Optional[Path] = None
    ) -> "SyncPath":
        """Create SyncPath from a configuration table.

        Args:
            data: Mapping with "path", "include" and "exclude" keys
            side: Side the table describes (used in error messages)
            base_dir: Directory relative paths are resolved against

        Returns:
            SyncPath instance

        Raises:
            SSyncConfigError: If the table or its "path" is missing or invalid
        """
        name = side.value
        if not isinstance(data, dict):
            raise SSyncConfigError(f"Missing '{name}' section")

        path = data.get("path")
        if path is None:
            raise SSyncConfigError(f"Missing '{name}.path'")
        if not isinstance(path, str) or not path.strip():
            raise SSyncConfigError(f"'{name}.path' must be a non-empty string")

        path = str(Path(path).expanduser())
        if base_dir is not None and not Path(path).is_absolute():
            path = str(base_dir / path)

        return cls(
            path=path,
            include=_compile_patterns(data.get("include"), f"{name}.include"),
            exclude=_compile_patterns(data.get("exclude"), f"{name}.exclude"),
        )


@dataclass(frozen=True)
class SyncContext:
    """Everything the loaders and the decision engine need to know.

    Examples:
        >>> context = SyncContext.from_dict(
        ...     {"from": {"path": "/data"}, "to": {"path": "/backup"}}
        ... )
        >>> context.recursive
        False
    """

    from_path: SyncPath
    """Source side"""

    to_path: SyncPath
    """Destination side"""

    recursive: bool = False
    """Whether subdirectories take part in the sync"""

    def for_side(self, side: Side) -> SyncPath:
        """Return the SyncPath for a side."""
        return self.from_path if side == Side.SOURCE else self.to_path

    @classmethod
    def from_dict(cls, data: Any, base_dir: Optional[Path] = None) -> "SyncContext":
        """Create SyncContext from a parsed configuration document.

        Args:
            data: Mapping with "from", "to" and optional "recursive" keys
            base_dir: Directory relative paths are resolved against

        Returns:
            SyncContext instance

        Raises:
            SSyncConfigError: If a required key is missing or malformed
        """
        if not isinstance(data, dict):
            raise SSyncConfigError("Configuration must be a mapping")

        recursive = data.get("recursive", False)
        if recursive is None:
            recursive = False
        if not isinstance(recursive, bool):
            raise SSyncConfigError("'recursive' must be true or false")

        return cls(
            from_path=SyncPath.from_dict(data.get("from"), Side.SOURCE, base_dir),
            to_path=SyncPath.from_dict(data.get("to"), Side.DESTINATION, base_dir),
            recursive=recursive,
        )
