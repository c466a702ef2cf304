"""
Configuration management system for Carousell Watch.
"""

import json
import os
from typing import Any, Mapping, Optional

import yaml

from ..models.alert import Alert
from ..models.config import BrowserSettings, Configuration, SmtpSettings, TelegramSettings
from ..models.rule import Rule
from ..utils.error_handling import ConfigurationError


class ConfigurationManager:
    """Manages loading and validation of system configuration."""

    DEFAULT_PATHS = [
        "config/config.json",
        "config/config.yaml",
        "config/config.yml",
        "config.json",
        "config.yaml",
        "config.yml",
    ]

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, uses default paths.
            environ: Environment mapping, defaults to os.environ
        """
        self.environ = os.environ if environ is None else environ
        self.config_path = config_path or self._find_config_file()

    def _find_config_file(self) -> str:
        """Find the configuration file in standard locations."""
        for path in self.DEFAULT_PATHS:
            if os.path.exists(path):
                return path

        raise ConfigurationError(
            "No configuration file found. Please create a configuration file "
            "at one of these locations: " + ", ".join(self.DEFAULT_PATHS)
        )

    def load_config(self) -> Configuration:
        """
        Load configuration from file.

        Returns:
            Configuration object with validated settings.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        if not os.path.exists(self.config_path):
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                if self.config_path.endswith(".json"):
                    raw_config = json.load(f)
                else:
                    raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration: {e}") from e

        raw_config = self._expand_env_vars(raw_config)
        config = self.parse_config(raw_config)

        try:
            config.validate()
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        return config

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand ${VAR_NAME} values from the environment."""
        if isinstance(obj, dict):
            return {key: self._expand_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._expand_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            if obj.startswith("${") and obj.endswith("}"):
                var_name = obj[2:-1]
                env_value = self.environ.get(var_name)
                if env_value is None:
                    raise ConfigurationError(f"Environment variable '{var_name}' not found")
                return env_value
            return obj
        else:
            return obj

    def parse_config(self, raw_config: Any) -> Configuration:
        """
        Parse a raw configuration mapping into a Configuration object.

        Raises:
            ConfigurationError: If required keys are missing or have the wrong type.
        """
        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        raw_alerts = raw_config.get("alerts")
        if not isinstance(raw_alerts, list):
            raise ConfigurationError("Configuration must contain an 'alerts' list")

        alerts = [self._parse_alert(raw, index) for index, raw in enumerate(raw_alerts)]

        browser_data = raw_config.get("browser") or {}
        if not isinstance(browser_data, dict):
            raise ConfigurationError("'browser' must be a mapping")
        defaults = BrowserSettings()
        browser = BrowserSettings(
            headless=browser_data.get("headless", defaults.headless),
            navigation_timeout_ms=browser_data.get("navigation_timeout_ms", defaults.navigation_timeout_ms),
            settle_ms=browser_data.get("settle_ms", defaults.settle_ms),
            user_agent=browser_data.get("user_agent", defaults.user_agent),
        )

        return Configuration(
            alerts=alerts,
            state_path=raw_config.get("state_path", "seen.json"),
            browser=browser,
            smtp=SmtpSettings.from_env(self.environ),
            telegram=TelegramSettings.from_env(self.environ),
        )

    def _parse_alert(self, raw: Any, index: int) -> Alert:
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Alert #{index} must be a mapping")

        for key in ("id", "sources"):
            if key not in raw:
                raise ConfigurationError(f"Alert #{index} is missing required key '{key}'")

        sources = raw["sources"]
        if not isinstance(sources, list) or not sources:
            raise ConfigurationError(f"Alert #{index} must have a non-empty 'sources' list")

        emails = raw.get("emails") or []
        if not isinstance(emails, list):
            raise ConfigurationError(f"Alert #{index} 'emails' must be a list")

        return Alert(
            id=raw["id"],
            sources=list(sources),
            match=Rule.from_config(raw.get("match")),
            emails=list(emails),
        )
