"""Configuration management for reviewprompt."""

import copy
import logging
from pathlib import Path
from typing import Any, Optional

import pytz

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .rich_logger import get_logger, setup_logging

logger = get_logger(__name__)

CONFIG_FILE_NAME = ".reviewprompt.toml"
USER_CONFIG_PATH = Path.home() / ".config" / "reviewprompt" / "config.toml"

LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class ConfigManager:
    """Manage configuration for reviewprompt."""

    DEFAULT_CONFIG = {
        "defaults": {
            "mention": "[ai]",
        },
        "clipboard": {
            "timeout_seconds": 5.0,
        },
        "logging": {
            "level": "WARNING",
            "console_output": True,
            "file_output": False,
            "log_file": None,  # Default location if None
            "timezone": "UTC",
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize ConfigManager.

        Args:
            config_path: Explicit path to a TOML config file
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.config_path = self._find_config_file(config_path)

        if self.config_path and self.config_path.exists():
            self._load_config()

    def _find_config_file(self, config_path: Optional[str] = None) -> Optional[Path]:
        """
        Find configuration file.

        Args:
            config_path: Explicit config path

        Returns:
            Path object or None
        """
        if config_path:
            return Path(config_path).expanduser()

        # Check locations in order of precedence
        locations = [
            Path(CONFIG_FILE_NAME),  # Project-specific
            USER_CONFIG_PATH,
        ]

        for location in locations:
            if location.is_file():
                return location

        return None

    def _load_config(self) -> None:
        """Load configuration from file."""
        try:
            with open(self.config_path, "rb") as f:
                loaded_config = tomllib.load(f)

            self._merge_config(self.config, loaded_config)
        except (OSError, tomllib.TOMLDecodeError) as e:
            # Defaults stay in effect
            logger.debug("Failed to load config", path=self.config_path, error=str(e))

    def _merge_config(self, base: dict[str, Any], update: dict[str, Any]) -> None:
        """
        Recursively merge configuration dictionaries.

        Nested dictionaries are merged key by key; any other value in
        ``update`` replaces the one in ``base``.

        Args:
            base: Base configuration dictionary (modified in place)
            update: Update configuration dictionary (values to merge in)
        """
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key (dot-separated)
            default: Default value

        Returns:
            Configuration value
        """
        value = self.config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_logging_config(self) -> dict[str, Any]:
        """
        Get logging configuration.

        Returns:
            Dictionary containing logging configuration
        """
        return self.get("logging", self.DEFAULT_CONFIG["logging"])

    def setup_logging(self, verbose: bool = False) -> None:
        """
        Set up application logging from the configured settings.

        Args:
            verbose: Force DEBUG level regardless of configuration
        """
        log_config = self.get_logging_config()

        level = LEVEL_MAP.get(str(log_config.get("level", "WARNING")).upper(), logging.WARNING)
        if verbose:
            level = logging.DEBUG

        timezone_str = log_config.get("timezone", "UTC")
        try:
            timezone_obj = pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            timezone_obj = pytz.utc

        setup_logging(
            level=level,
            log_file=log_config.get("log_file"),
            console_output=log_config.get("console_output", True),
            file_output=log_config.get("file_output", False),
            timezone=timezone_obj,
        )
