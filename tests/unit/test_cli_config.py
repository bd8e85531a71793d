"""Unit tests for retool_cli.config."""

import pytest
import yaml

from retool_cli.config import (
    CLIConfig,
    coerce_value,
    get_config_path,
    load_config,
    save_config,
    unset_config,
)
from retool_cli.errors import ValidationError


@pytest.mark.cli_unit
class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults(self):
        config = load_config()

        assert config.timeout is None
        assert config.output_format == "default"
        assert config.telemetry is True
        assert config.refresh_db_credentials is False
        assert config.detached_grace == 10.0
        assert config.get_source("timeout") == "default"

    def test_config_file(self):
        save_config("timeout", "30")

        config = load_config()

        assert config.timeout == 30.0
        assert config.get_source("timeout") == "config file"

    def test_env_overrides_file(self, monkeypatch):
        save_config("telemetry", "true")
        monkeypatch.setenv("RETOOL_CLI_TELEMETRY", "off")

        config = load_config()

        assert config.telemetry is False
        assert config.get_source("telemetry") == "environment"

    def test_invalid_env_value_ignored(self, monkeypatch):
        monkeypatch.setenv("RETOOL_CLI_OUTPUT_FORMAT", "xml")

        config = load_config()

        assert config.output_format == "default"
        assert config.get_source("output_format") == "default"

    def test_unreadable_file_uses_defaults(self):
        path = get_config_path()
        path.parent.mkdir(parents=True)
        path.write_text("timeout: [unclosed")

        assert load_config().timeout is None

    def test_as_dict(self):
        assert set(CLIConfig().as_dict()) == {
            "timeout",
            "output_format",
            "telemetry",
            "refresh_db_credentials",
            "detached_grace",
        }


@pytest.mark.cli_unit
class TestSaveConfig:
    """Tests for save_config and unset_config."""

    def test_save_writes_typed_yaml(self, isolated_home):
        save_config("refresh_db_credentials", "yes")

        path = isolated_home / ".retool-cli" / "config.yaml"
        assert yaml.safe_load(path.read_text()) == {"refresh_db_credentials": True}

    def test_save_rejects_bad_value(self):
        with pytest.raises(ValidationError):
            save_config("telemetry", "maybe")

        assert not get_config_path().exists()

    def test_unset(self):
        save_config("timeout", "5")

        assert unset_config("timeout") is True
        assert unset_config("timeout") is False
        assert load_config().timeout is None

    def test_unset_without_file(self):
        assert unset_config("timeout") is False


class TestCoerceValue:
    @pytest.mark.parametrize("raw", ["0", "none", ""])
    def test_timeout_none(self, raw):
        assert coerce_value("timeout", raw) is None

    def test_unknown_key(self):
        with pytest.raises(ValidationError, match="Unknown config key"):
            coerce_value("color", "red")
