"""
Configuration management for ftp_checkout.

This module provides configuration loading from YAML/JSON files and
environment variables.
"""

from .loader import ConfigLoader, load_config
from .models import GlobalConfig, LoggingConfig, LogLevel, StorageConfig

__all__ = [
    "ConfigLoader",
    "load_config",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
    "StorageConfig",
]
