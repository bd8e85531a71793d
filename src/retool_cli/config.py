"""CLI configuration management.

Handles persistent CLI configuration stored in ~/.retool-cli/config.yaml.
Supports environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ValidationError
from .shared import paths
from .shared.tasks import DEFAULT_GRACE_PERIOD

# Default values
DEFAULT_TIMEOUT: float | None = None
DEFAULT_OUTPUT_FORMAT = "default"
DEFAULT_TELEMETRY = True
DEFAULT_REFRESH_DB_CREDENTIALS = False

OUTPUT_FORMATS = ("default", "json")

# Environment variable mappings
ENV_VARS = {
    "timeout": "RETOOL_CLI_TIMEOUT",
    "output_format": "RETOOL_CLI_OUTPUT_FORMAT",
    "telemetry": "RETOOL_CLI_TELEMETRY",
    "refresh_db_credentials": "RETOOL_CLI_REFRESH_DB_CREDENTIALS",
    "detached_grace": "RETOOL_CLI_DETACHED_GRACE",
}

CONFIG_KEYS = tuple(ENV_VARS)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class CLIConfig:
    """CLI configuration."""

    timeout: float | None = DEFAULT_TIMEOUT
    output_format: str = DEFAULT_OUTPUT_FORMAT
    telemetry: bool = DEFAULT_TELEMETRY
    refresh_db_credentials: bool = DEFAULT_REFRESH_DB_CREDENTIALS
    detached_grace: float = DEFAULT_GRACE_PERIOD

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def as_dict(self) -> dict[str, Any]:
        """Config values keyed by name (sources excluded)."""
        return {key: getattr(self, key) for key in CONFIG_KEYS}


def get_config_path() -> Path:
    """Get the CLI config file path.

    Returns:
        Path to ~/.retool-cli/config.yaml
    """
    return paths.get_config_path()


def parse_bool(value: Any) -> bool:
    """Parse a boolean from YAML or environment text."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def parse_timeout(value: Any) -> float | None:
    """Parse a timeout in seconds; empty, "none" and 0 mean no timeout."""
    if value is None or str(value).strip().lower() in ("", "none", "null"):
        return None
    seconds = float(value)
    return seconds if seconds > 0 else None


def parse_output_format(value: Any) -> str:
    """Parse an output format name."""
    text = str(value)
    if text not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {text}")
    return text


PARSERS = {
    "timeout": parse_timeout,
    "output_format": parse_output_format,
    "telemetry": parse_bool,
    "refresh_db_credentials": parse_bool,
    "detached_grace": float,
}


def coerce_value(key: str, value: Any) -> Any:
    """Convert a raw config value to its typed form.

    Raises:
        ValidationError: If the key is unknown or the value does not parse
    """
    if key not in PARSERS:
        raise ValidationError(f"Unknown config key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}")
    try:
        return PARSERS[key](value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid value for {key}: {e}")


def load_config() -> CLIConfig:
    """Load CLI configuration.

    Precedence (highest to lowest):
    1. Environment variables
    2. Config file (~/.retool-cli/config.yaml)
    3. Defaults

    Invalid values are ignored and the lower-precedence value is kept.

    Returns:
        CLIConfig with values and sources
    """
    config = CLIConfig()
    sources: dict[str, str] = {key: "default" for key in CONFIG_KEYS}

    # Load from config file
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            file_config = {}  # Ignore unreadable config file, use defaults

        if isinstance(file_config, dict):
            for key in CONFIG_KEYS:
                if key not in file_config:
                    continue
                try:
                    setattr(config, key, coerce_value(key, file_config[key]))
                    sources[key] = "config file"
                except ValidationError:
                    pass

    # Override with environment variables
    for key, env_var in ENV_VARS.items():
        if not os.environ.get(env_var):
            continue
        try:
            setattr(config, key, coerce_value(key, os.environ[env_var]))
            sources[key] = "environment"
        except ValidationError:
            pass

    config._sources = sources
    return config


def save_config(key: str, value: Any) -> None:
    """Save a config value to the config file.

    Args:
        key: Config key
        value: Raw value; stored in its typed form

    Raises:
        ValidationError: If the key is unknown or the value does not parse
    """
    typed = coerce_value(key, value)
    config_path = get_config_path()

    # Load existing config
    existing: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path) as f:
                existing = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            existing = {}

    existing[key] = typed

    config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)


def unset_config(key: str) -> bool:
    """Remove a config value from the config file.

    Args:
        key: Config key to remove

    Returns:
        True if key was removed, False if not found
    """
    config_path = get_config_path()
    if not config_path.exists():
        return False

    try:
        with open(config_path) as f:
            existing = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return False

    if key not in existing:
        return False

    del existing[key]

    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)

    return True
