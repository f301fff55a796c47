"""
LocalTable Configuration
========================
Environment-driven defaults used by the command-line front end.
The library itself takes all configuration through constructor arguments.

  LOCALTABLE_STORE       path of the JSON store file (default: ./localtable_data.json)
  LOCALTABLE_LOG_LEVEL   logging level name (default: WARNING)
"""

import logging
import os
from typing import Optional

DEFAULT_STORE_FILE = "localtable_data.json"
DEFAULT_LOG_LEVEL = "WARNING"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Fetch an environment variable, treating empty values as unset."""
    value = os.environ.get(name)
    if not value:
        return default
    return value


def store_path(override: Optional[str] = None) -> str:
    """Resolve the store file path: explicit override, then env, then cwd default."""
    if override:
        return os.path.abspath(override)
    path = _get_env("LOCALTABLE_STORE")
    if path is None:
        path = os.path.join(os.getcwd(), DEFAULT_STORE_FILE)
    return os.path.abspath(path)


def log_level(verbose: bool = False) -> int:
    """Resolve the logging level. --verbose always wins with DEBUG."""
    if verbose:
        return logging.DEBUG
    name = _get_env("LOCALTABLE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level
