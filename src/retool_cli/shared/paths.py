"""Path management for retool-cli.

Manages the ~/.retool-cli/ directory that holds the credential record and
the CLI config file. Paths are resolved on each call so that HOME and the
override variable are honoured.
"""

import os
from pathlib import Path

RETOOL_DIR_NAME = ".retool-cli"

CREDENTIALS_FILE_NAME = "credentials.json"

CONFIG_FILE_NAME = "config.yaml"

# Overrides the credential record location
CREDENTIALS_ENV_VAR = "RETOOL_CLI_CREDENTIALS"


def get_retool_dir() -> Path:
    """Get the base directory for all retool-cli data (~/.retool-cli)."""
    return Path.home() / RETOOL_DIR_NAME


def get_credentials_path() -> Path:
    """Get path to the credential record.

    Returns:
        $RETOOL_CLI_CREDENTIALS if set, otherwise ~/.retool-cli/credentials.json
    """
    override = os.environ.get(CREDENTIALS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_retool_dir() / CREDENTIALS_FILE_NAME


def get_config_path() -> Path:
    """Get the CLI config file path (~/.retool-cli/config.yaml)."""
    return get_retool_dir() / CONFIG_FILE_NAME
