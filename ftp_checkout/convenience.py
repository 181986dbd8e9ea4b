"""
Convenience functions wiring configuration to the checkout components.

This module builds the registry, credential resolver and engine from a
GlobalConfig so that a checkout can be run with a single call.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from .auth.credential_store import EncryptedFileStore
from .auth.resolver import CredentialResolver, StoreCredentialResolver
from .changelog import create_empty_changelog
from .config.models import GlobalConfig
from .ftp.sync import LogSink, SynchronizationEngine
from .models.ftp import SyncRequest, SyncResult
from .registry.registry import ServerRegistry
from .registry.store import FileProfileStore


def build_registry(config: GlobalConfig) -> ServerRegistry:
    """Registry persisted to config.storage.profiles_file."""
    return ServerRegistry(FileProfileStore(config.storage.profiles_file))


def build_resolver(
    config: GlobalConfig, master_key: Optional[str] = None
) -> StoreCredentialResolver:
    """Resolver over the encrypted store in config.storage.credentials_dir."""
    return StoreCredentialResolver(
        EncryptedFileStore(config.storage.credentials_dir, master_key)
    )


async def checkout(
    server_name: str,
    remote_path: str,
    file_names: Union[str, Sequence[str]],
    workspace: Union[str, Path],
    clean_workspace_first: bool = False,
    changelog_file: Optional[Union[str, Path]] = None,
    config: Optional[GlobalConfig] = None,
    registry: Optional[ServerRegistry] = None,
    resolver: Optional[CredentialResolver] = None,
    listener: Optional[LogSink] = None,
) -> SyncResult:
    """
    Run one checkout.

    Args:
        server_name: Name of the server profile
        remote_path: Remote directory holding the files
        file_names: File names, as a list or a comma-separated string
        workspace: Local destination directory
        clean_workspace_first: Delete workspace contents before downloading
        changelog_file: If given, an empty changelog is written there first
        config: Configuration; defaults are used if None
        registry: Server registry; built from config if None
        resolver: Credential resolver; built from config if None
        listener: Callable receiving each progress line

    Returns:
        SyncResult of the synchronization
    """
    config = config or GlobalConfig()

    if changelog_file is not None:
        create_empty_changelog(changelog_file)

    request = SyncRequest(
        server_name=server_name,
        remote_path=remote_path,
        file_names=file_names,
        clean_workspace_first=clean_workspace_first,
    )
    engine = SynchronizationEngine(
        registry if registry is not None else build_registry(config),
        resolver if resolver is not None else build_resolver(config),
        config.ftp,
    )
    return await engine.synchronize(request, workspace, listener)
