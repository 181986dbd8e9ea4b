"""
Data models for FTP checkout operations.

This module defines the server profile, credential, request and result
models, plus the connection settings used by the synchronization engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from ..utils.validation import validate_host, validate_name, validate_port


class FTPConfig(BaseModel):
    """Connection and transfer settings."""

    connection_timeout: float = Field(
        default=30.0, gt=0, description="Timeout for opening the control connection"
    )
    socket_timeout: float = Field(
        default=60.0, gt=0, description="Timeout for each socket read or write"
    )
    transfer_timeout: Optional[float] = Field(
        default=None, gt=0, description="Upper bound for a single file transfer"
    )
    chunk_size: int = Field(
        default=8192, ge=1024, le=1024 * 1024, description="Block size for downloads"
    )
    encoding: str = Field(default="utf-8", description="Control channel encoding")
    passive_commands: List[str] = Field(
        default_factory=lambda: ["pasv"],
        description="Passive mode commands to try, in order",
    )

    @field_validator("passive_commands")
    @classmethod
    def validate_passive_commands(cls, v: List[str]) -> List[str]:
        """Only PASV and EPSV open client-initiated data connections."""
        commands = [c.lower() for c in v]
        if not commands or any(c not in ("pasv", "epsv") for c in commands):
            raise ValueError("passive_commands must contain only 'pasv' or 'epsv'")
        return commands

    model_config = ConfigDict(validate_assignment=True)


class ServerProfile(BaseModel):
    """A named FTP server: host, port and a reference to its credentials."""

    name: str
    host: str = ""
    port: str = ""
    credential_id: str = ""

    model_config = ConfigDict(frozen=True)

    @field_validator("port", mode="before")
    @classmethod
    def port_as_text(cls, v: Any) -> Any:
        """Profile files may write the port as a bare number."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @classmethod
    def from_input(
        cls, name: str, host: str, port: str, credential_id: Optional[str] = None
    ) -> ServerProfile:
        """
        Build a profile from raw user input, validating every field.

        Raises:
            ValidationError: If name, host or port is malformed
        """
        for result in (validate_name(name), validate_host(host), validate_port(port)):
            result.raise_for_error()
        return cls(
            name=name.strip(),
            host=host.strip(),
            port=port.strip(),
            credential_id=(credential_id or "").strip(),
        )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class Credentials(BaseModel):
    """Username and secret used to log in."""

    username: str = ""
    secret: SecretStr = SecretStr("")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def anonymous(cls) -> Credentials:
        """Empty username and secret."""
        return cls()

    @property
    def is_anonymous(self) -> bool:
        return self.username == ""


class SyncRequest(BaseModel):
    """Parameters of one checkout."""

    server_name: str = Field(description="Name of the server profile to use")
    remote_path: str = Field(default="", description="Remote directory to enter")
    file_names: List[str] = Field(
        default_factory=list, description="Files to download, in order"
    )
    clean_workspace_first: bool = Field(
        default=False, description="Delete workspace contents before downloading"
    )

    @field_validator("file_names", mode="before")
    @classmethod
    def split_file_names(cls, v: Any) -> Any:
        """Accept the comma-separated form used in job configuration."""
        if v is None:
            return []
        if isinstance(v, str):
            return v.split(",")
        return v

    def entries(self) -> List[str]:
        """File names trimmed of whitespace, with empty entries dropped."""
        return [name.strip() for name in self.file_names if name.strip()]


@dataclass
class SyncResult:
    """Result of a completed synchronization."""

    server_name: str
    remote_path: str
    workspace: Path
    downloaded: List[Path] = field(default_factory=list)
    bytes_transferred: int = 0
    response_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def file_count(self) -> int:
        return len(self.downloaded)

    @property
    def transfer_rate_mbps(self) -> float:
        """Calculate transfer rate in MB/s."""
        if self.response_time <= 0:
            return 0.0
        return (self.bytes_transferred / (1024 * 1024)) / self.response_time
