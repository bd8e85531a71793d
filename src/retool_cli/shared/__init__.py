"""Shared modules for retool-cli.

This module provides functionality used across all commands:
- Paths (~/.retool-cli/ layout)
- Logging (structlog configuration)
- Detached background tasks
"""

from .logging import configure_logging, get_logger, level_for_verbosity
from .paths import (
    CREDENTIALS_ENV_VAR,
    get_config_path,
    get_credentials_path,
    get_retool_dir,
)
from .tasks import DetachedTasks

__all__ = [
    # Paths
    "CREDENTIALS_ENV_VAR",
    "get_retool_dir",
    "get_credentials_path",
    "get_config_path",
    # Logging
    "configure_logging",
    "get_logger",
    "level_for_verbosity",
    # Tasks
    "DetachedTasks",
]
