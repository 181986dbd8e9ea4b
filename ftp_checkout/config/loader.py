"""
Configuration loader for ftp_checkout.

This module handles loading configuration from configuration files and
environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigError
from .models import GlobalConfig


class ConfigLoader:
    """Configuration loader with support for multiple sources."""

    def __init__(self) -> None:
        """Initialize configuration loader."""
        self.config_paths = [
            Path("ftp_checkout.yaml"),
            Path("ftp_checkout.yml"),
            Path("ftp_checkout.json"),
            Path.home() / ".ftp_checkout" / "config.yaml",
            Path.home() / ".ftp_checkout" / "config.yml",
            Path.home() / ".ftp_checkout" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = "FTP_CHECKOUT_"

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
        """
        Load configuration from all available sources.

        File values override defaults; environment variables override both.

        Args:
            config_file: Specific config file to load

        Returns:
            GlobalConfig instance with merged configuration
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        try:
            return GlobalConfig(**config_data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
            return self._parse_config_file(config_path)

        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigError(f"Unsupported config file format: {config_path.suffix}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    return json.load(f) or {}
                return yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to parse config file {config_path}: {e}")

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            f"{self.env_prefix}STRUCTURED_LOGS": ("logging", "enable_structured"),
            # FTP
            f"{self.env_prefix}CONNECTION_TIMEOUT": ("ftp", "connection_timeout"),
            f"{self.env_prefix}SOCKET_TIMEOUT": ("ftp", "socket_timeout"),
            f"{self.env_prefix}TRANSFER_TIMEOUT": ("ftp", "transfer_timeout"),
            f"{self.env_prefix}CHUNK_SIZE": ("ftp", "chunk_size"),
            # Storage
            f"{self.env_prefix}PROFILES_FILE": ("storage", "profiles_file"),
            f"{self.env_prefix}CREDENTIALS_DIR": ("storage", "credentials_dir"),
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                converted_value = self._convert_env_value(value)

                current = config
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = converted_value

        # A log file given by environment implies file logging
        if "file_path" in config.get("logging", {}):
            config["logging"].setdefault("enable_file", True)

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
    """Load configuration with the default search path and environment."""
    return ConfigLoader().load_config(config_file)
