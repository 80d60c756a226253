"""Configuration management for offlinemode."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from offlinemode.core.constants import (
    CONFIG_DIR,
    HEARTBEAT_INTERVAL_MS,
    LINK_POLL_INTERVAL,
    PING_TIMEOUT_MS,
)
from offlinemode.core.errors import ConfigError
from offlinemode.core.types import TimerConfig


class Config:
    """Manages offlinemode configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses default path.
        """
        self.config_path = Path(config_path) if config_path else Path(CONFIG_DIR) / "config.json"
        self.config_data: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file, falling back to defaults."""
        self.config_data = self._get_default_config()
        if not self.config_path.exists():
            return
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"[Config] Error loading {self.config_path}: {e}. Using default configuration.")
            return
        if isinstance(data, dict):
            self.config_data.update(data)

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "server_url": None,
            "log_level": "info",
            "heartbeat_interval_ms": HEARTBEAT_INTERVAL_MS,
            "ping_timeout_ms": PING_TIMEOUT_MS,
            "link_poll": {
                "enabled": True,
                "interval": LINK_POLL_INTERVAL,
            },
        }

    def save(self) -> None:
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self.config_data, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key (supports dot notation, e.g., 'link_poll.interval')
            default: Default value if key doesn't exist

        Returns:
            Configuration value or default
        """
        value = self.config_data
        for k in key.split("."):
            if not isinstance(value, dict):
                return default
            value = value.get(k)
            if value is None:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value (dot notation supported)."""
        keys = key.split(".")
        data = self.config_data
        for k in keys[:-1]:
            if k not in data:
                data[k] = {}
            data = data[k]
        data[keys[-1]] = value

    def timer_config(self) -> TimerConfig:
        """
        Build the timer configuration.

        Raises:
            ConfigError: If an interval is not a positive integer
        """
        heartbeat = self.get("heartbeat_interval_ms", HEARTBEAT_INTERVAL_MS)
        ping_timeout = self.get("ping_timeout_ms", PING_TIMEOUT_MS)
        for name, value in (("heartbeat_interval_ms", heartbeat), ("ping_timeout_ms", ping_timeout)):
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        return TimerConfig(heartbeat_interval_ms=heartbeat, ping_timeout_ms=ping_timeout)

    def import_config(self, config_file: Path, file_format: str = "json") -> bool:
        """Merge settings from a JSON or YAML file.

        Returns:
            True if successful, False otherwise
        """
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                if file_format.lower() == "yaml":
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"[Config] Error importing config: {e}")
            return False

        if not isinstance(data, dict):
            logger.error(f"[Config] Ignoring {config_file}: top level is not a mapping")
            return False
        self.config_data.update(data)
        return True

    def export_config(self, output_file: Path, file_format: str = "json") -> bool:
        """Write the current settings as JSON or YAML.

        Returns:
            True if successful, False otherwise
        """
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                if file_format.lower() == "yaml":
                    yaml.dump(self.config_data, f, default_flow_style=False)
                else:
                    json.dump(self.config_data, f, indent=2)
            return True
        except OSError as e:
            logger.error(f"[Config] Error exporting config: {e}")
        return False
