"""Loading the sync context from a YAML configuration file."""

import logging
from pathlib import Path
from typing import Union

import yaml

from ..exceptions import SSyncConfigError
from .context import SyncContext

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "ssync.yml"


def load_sync_context(config_path: Union[str, Path]) -> SyncContext:
    """Load a SyncContext from a YAML file.

    Relative "path" values are resolved against the directory holding the
    configuration file.

    Args:
        config_path: Path to the configuration file

    Returns:
        SyncContext built from the file

    Raises:
        SSyncConfigError: If the file is missing, unreadable, not valid YAML
            or does not describe a valid context

    Examples:
        >>> context = load_sync_context("ssync.yml")  # doctest: +SKIP
        >>> context.from_path.path  # doctest: +SKIP
        '/data/photos'
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise SSyncConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SSyncConfigError(f"Cannot read configuration file: {e}") from e
    except yaml.YAMLError as e:
        raise SSyncConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        raise SSyncConfigError(f"Configuration file is empty: {config_path}")

    context = SyncContext.from_dict(data, base_dir=config_path.resolve().parent)
    logger.debug(
        "Loaded config from %s: %s -> %s (recursive=%s)",
        config_path,
        context.from_path.path,
        context.to_path.path,
        context.recursive,
    )
    return context
