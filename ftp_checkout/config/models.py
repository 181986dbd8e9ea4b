"""
Configuration models for ftp_checkout.

This module defines all configuration data models with validation and defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.ftp import FTPConfig


DEFAULT_HOME = Path.home() / ".ftp_checkout"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )


class StorageConfig(BaseModel):
    """Where server profiles and credentials are kept."""

    profiles_file: Path = Field(
        default=DEFAULT_HOME / "servers.yaml",
        description="YAML or JSON file holding the server registry",
    )
    credentials_dir: Path = Field(
        default=DEFAULT_HOME / "credentials",
        description="Directory of the encrypted credential store",
    )

    @field_validator("profiles_file", "credentials_dir", mode="before")
    @classmethod
    def ensure_path(cls, v: Any) -> Path:
        """Ensure paths are Path objects with ~ expanded."""
        return Path(v).expanduser()


class GlobalConfig(BaseModel):
    """Global configuration container."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    ftp: FTPConfig = Field(default_factory=FTPConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")
