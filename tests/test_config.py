"""Tests for configuration management."""

import json
import tempfile
from pathlib import Path

import pytest

from offlinemode.core.config import Config
from offlinemode.core.errors import ConfigError
from offlinemode.core.types import TimerConfig


@pytest.fixture
def temp_config_file():
    """Path to a config file that does not exist yet."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        config_path = Path(f.name)
    config_path.unlink()
    yield config_path
    if config_path.exists():
        config_path.unlink()


def test_config_initialization(temp_config_file):
    """Test config initialization without touching the disk."""
    config = Config(temp_config_file)
    assert config.config_path == temp_config_file
    assert isinstance(config.config_data, dict)
    assert not temp_config_file.exists()


def test_config_default_values(temp_config_file):
    """Test default configuration values."""
    config = Config(temp_config_file)
    assert config.get("server_url") is None
    assert config.get("log_level") == "info"
    assert config.get("heartbeat_interval_ms") == 60000
    assert config.get("ping_timeout_ms") == 10000
    assert config.get("link_poll.enabled") is True


def test_config_get_set(temp_config_file):
    """Test getting and setting config values."""
    config = Config(temp_config_file)

    config.set("server_url", "http://srv")
    assert config.get("server_url") == "http://srv"

    config.set("nested.key", "nested_value")
    assert config.get("nested.key") == "nested_value"

    assert config.get("nonexistent_key", "default") == "default"
    assert config.get("server_url.deeper", "default") == "default"


def test_config_save_and_reload(temp_config_file):
    """Test saved values are read back and merged over defaults."""
    config = Config(temp_config_file)
    config.set("ping_timeout_ms", 5000)
    config.save()

    reloaded = Config(temp_config_file)
    assert reloaded.get("ping_timeout_ms") == 5000
    assert reloaded.get("heartbeat_interval_ms") == 60000


def test_config_corrupt_file_uses_defaults(temp_config_file):
    """Test an unreadable file falls back to defaults."""
    temp_config_file.write_text("{not json")
    config = Config(temp_config_file)
    assert config.get("ping_timeout_ms") == 10000


def test_timer_config(temp_config_file):
    """Test TimerConfig is built from the configured intervals."""
    config = Config(temp_config_file)
    config.set("heartbeat_interval_ms", 30000)
    assert config.timer_config() == TimerConfig(heartbeat_interval_ms=30000, ping_timeout_ms=10000)


@pytest.mark.parametrize("value", [0, -5, "10", 1.5, True])
def test_timer_config_rejects_invalid(temp_config_file, value):
    """Test invalid intervals raise ConfigError."""
    config = Config(temp_config_file)
    config.set("ping_timeout_ms", value)
    with pytest.raises(ConfigError):
        config.timer_config()


def test_import_export_yaml(temp_config_file, tmp_path):
    """Test YAML export and import."""
    config = Config(temp_config_file)
    config.set("server_url", "http://srv")
    export_file = tmp_path / "config.yaml"
    assert config.export_config(export_file, "yaml") is True

    other = Config(tmp_path / "other.json")
    assert other.import_config(export_file, "yaml") is True
    assert other.get("server_url") == "http://srv"


def test_import_rejects_non_mapping(temp_config_file, tmp_path):
    config = Config(temp_config_file)
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps([1, 2, 3]))
    assert config.import_config(bad) is False


def test_import_missing_file(temp_config_file, tmp_path):
    config = Config(temp_config_file)
    assert config.import_config(tmp_path / "missing.json") is False
