"""
Checkout of build inputs from FTP servers.

This package downloads a named list of files from a directory on a registered
FTP server into a local workspace, the way a build's source checkout step
would.

Features:
- Registry of named server profiles with validated host and port
- Credentials kept apart from profiles in an encrypted store
- Binary, passive-mode downloads over a single scoped session
- Progress lines streamed to the caller's build log
- YAML/JSON configuration with environment overrides
"""

from .changelog import EMPTY_CHANGELOG, create_empty_changelog
from .convenience import build_registry, build_resolver, checkout
from .exceptions import (
    ConfigError,
    ConnectionFailedError,
    CredentialStoreError,
    DownloadFailedError,
    FTPAuthenticationError,
    FTPCheckoutError,
    FTPConnectionError,
    FTPNetworkError,
    InvalidPortError,
    ProfileStoreError,
    RemoteDirectoryError,
    ServerNotFoundError,
    SyncError,
    ValidationError,
)
from .auth import (
    CredentialResolver,
    EncryptedFileStore,
    InMemoryStore,
    StoreCredentialResolver,
)
from .config import GlobalConfig, load_config
from .ftp import ConnectionEstablisher, SynchronizationEngine
from .models import Credentials, FTPConfig, ServerProfile, SyncRequest, SyncResult
from .registry import FileProfileStore, InMemoryProfileStore, ServerRegistry
from .utils import ValidationResult, validate_host, validate_name, validate_port
from .workspace import Workspace

__version__ = "0.1.0"

__all__ = [
    # Operations
    "checkout",
    "build_registry",
    "build_resolver",
    "create_empty_changelog",
    "EMPTY_CHANGELOG",
    # Components
    "SynchronizationEngine",
    "ConnectionEstablisher",
    "ServerRegistry",
    "FileProfileStore",
    "InMemoryProfileStore",
    "CredentialResolver",
    "StoreCredentialResolver",
    "EncryptedFileStore",
    "InMemoryStore",
    "Workspace",
    # Models
    "Credentials",
    "FTPConfig",
    "GlobalConfig",
    "ServerProfile",
    "SyncRequest",
    "SyncResult",
    "ValidationResult",
    # Validation
    "validate_host",
    "validate_name",
    "validate_port",
    "load_config",
    # Exceptions
    "FTPCheckoutError",
    "ValidationError",
    "ConfigError",
    "ProfileStoreError",
    "CredentialStoreError",
    "FTPConnectionError",
    "FTPNetworkError",
    "FTPAuthenticationError",
    "InvalidPortError",
    "SyncError",
    "ServerNotFoundError",
    "ConnectionFailedError",
    "RemoteDirectoryError",
    "DownloadFailedError",
]
