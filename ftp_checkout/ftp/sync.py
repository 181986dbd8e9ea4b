"""
Synchronization engine: download a named file set into a workspace.

One call to SynchronizationEngine.synchronize resolves the server profile and
its credentials, opens a session, optionally cleans the workspace, enters the
remote directory and retrieves every requested file in order. The session is
closed on every exit path once it has been opened.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Optional, Tuple, Union

import aiofiles
import aioftp

from ..auth.resolver import CredentialResolver
from ..exceptions import (
    ConnectionFailedError,
    DownloadFailedError,
    FTPConnectionError,
    RemoteDirectoryError,
    ServerNotFoundError,
    SyncError,
    ValidationError,
)
from ..models.ftp import Credentials, FTPConfig, ServerProfile, SyncRequest, SyncResult
from ..registry.registry import ServerRegistry
from ..utils.validation import validate_host, validate_port
from ..workspace import Workspace
from .connection import NETWORK_ERRORS, ConnectionEstablisher


logger = logging.getLogger(__name__)

LogSink = Callable[[str], None]


class _ProgressLog:
    """Sends progress lines to the module logger and an optional build log."""

    def __init__(self, listener: Optional[LogSink] = None):
        self.listener = listener

    def __call__(self, line: str, level: int = logging.INFO) -> None:
        logger.log(level, line)
        if self.listener is not None:
            self.listener(line)


class SynchronizationEngine:
    """
    Retrieves files for a checkout.

    Example:
        ```python
        engine = SynchronizationEngine(registry, resolver)
        request = SyncRequest(server_name="builds", remote_path="/pub",
                              file_names=["app.tar.gz", "app.sha256"])
        result = await engine.synchronize(request, "/var/build/workspace")
        ```
    """

    def __init__(
        self,
        registry: ServerRegistry,
        resolver: CredentialResolver,
        config: Optional[FTPConfig] = None,
        establisher: Optional[ConnectionEstablisher] = None,
    ):
        """
        Initialize the engine.

        Args:
            registry: Server profiles to resolve request.server_name against
            resolver: Credential lookup for the profile's credential id
            config: Connection and transfer settings
            establisher: Session factory; built from config when omitted
        """
        self.registry = registry
        self.resolver = resolver
        self.config = config or FTPConfig()
        self.establisher = establisher or ConnectionEstablisher(self.config)

    async def synchronize(
        self,
        request: SyncRequest,
        workspace: Union[str, Path, Workspace],
        listener: Optional[LogSink] = None,
    ) -> SyncResult:
        """
        Download request.file_names from the named server into workspace.

        Args:
            request: Server name, remote path, file list and clean flag
            workspace: Local destination directory
            listener: Callable receiving each progress line, in order

        Returns:
            SyncResult describing the downloaded files

        Raises:
            ServerNotFoundError: If no profile has request.server_name
            ConnectionFailedError: If the profile's host or port is malformed, or
                the session cannot be opened
            RemoteDirectoryError: If the server refuses request.remote_path
            DownloadFailedError: If any single file cannot be retrieved
        """
        start_time = time.time()
        log = _ProgressLog(listener)
        if not isinstance(workspace, Workspace):
            workspace = Workspace(workspace)

        log("File list of current workspace:")
        try:
            names = workspace.list_names()
        except OSError as e:
            raise SyncError(f"Failed listing the workspace: {e}", cause=e) from e
        for name in names:
            log(name)

        profile = self.registry.find_by_name(request.server_name)
        if profile is None:
            log(f"No available ftpServer: {request.server_name}", logging.ERROR)
            raise ServerNotFoundError(request.server_name)

        for check in (validate_host(profile.host), validate_port(profile.port)):
            if not check.ok:
                log(f"Server '{profile.name}': {check.message}", logging.ERROR)
                raise ConnectionFailedError(
                    check.message,
                    cause=ValidationError(check.message, field=check.field),
                    server_name=profile.name,
                )

        credentials = await self.resolver.resolve_or_anonymous(profile.credential_id)

        async with self._session(profile, credentials, log) as client:
            if request.clean_workspace_first:
                log("Start cleaning the workspace...")
                try:
                    workspace.delete_contents()
                except OSError as e:
                    raise SyncError(f"Failed cleaning the workspace: {e}", cause=e) from e
            try:
                workspace.ensure()
            except OSError as e:
                raise SyncError(f"Failed creating the workspace: {e}", cause=e) from e

            await self._change_directory(client, request.remote_path, log)

            result = SyncResult(
                server_name=profile.name,
                remote_path=request.remote_path,
                workspace=workspace.path,
            )
            for file_name in request.entries():
                local_path, size = await self._download(client, file_name, workspace, log)
                result.downloaded.append(local_path)
                result.bytes_transferred += size

        result.response_time = time.time() - start_time
        return result

    @asynccontextmanager
    async def _session(
        self, profile: ServerProfile, credentials: Credentials, log: _ProgressLog
    ) -> AsyncIterator[aioftp.Client]:
        log("Start connecting ftp server..")
        try:
            client = await self.establisher.connect(
                profile.host,
                profile.port,
                credentials.username,
                credentials.secret.get_secret_value(),
            )
        except FTPConnectionError as e:
            log(f"Can't connect to the ftpServer: {profile.address}", logging.ERROR)
            raise ConnectionFailedError(
                e.message, cause=e, server_name=profile.name
            ) from e
        log("Connect success")

        try:
            yield client
        finally:
            await self.establisher.release(client)

    async def _change_directory(
        self, client: aioftp.Client, remote_path: str, log: _ProgressLog
    ) -> None:
        if not remote_path.strip():
            return
        try:
            await client.change_directory(remote_path)
        except NETWORK_ERRORS as e:
            log(f"Failed change directory: {remote_path}", logging.ERROR)
            raise RemoteDirectoryError(remote_path, cause=e) from e

    async def _download(
        self,
        client: aioftp.Client,
        file_name: str,
        workspace: Workspace,
        log: _ProgressLog,
    ) -> Tuple[Path, int]:
        log(f"Start downloading file: {file_name}")
        try:
            local_path = workspace.path_for(file_name)
            transfer = self._retrieve(client, file_name, local_path)
            if self.config.transfer_timeout:
                size = await asyncio.wait_for(transfer, self.config.transfer_timeout)
            else:
                size = await transfer
        except NETWORK_ERRORS as e:
            log(f"Failed download file: {file_name}", logging.ERROR)
            raise DownloadFailedError(file_name, cause=e) from e

        log(f"Successfully download file: {file_name}")
        return local_path, size

    async def _retrieve(
        self, client: aioftp.Client, file_name: str, local_path: Path
    ) -> int:
        """RETR file_name into local_path; a partial file is removed on failure."""
        size = 0
        opened = False
        try:
            async with aiofiles.open(local_path, "wb") as local_file:
                opened = True
                async with client.download_stream(file_name) as stream:
                    async for block in stream.iter_by_block(self.config.chunk_size):
                        await local_file.write(block)
                        size += len(block)
        except BaseException:
            if opened:
                local_path.unlink(missing_ok=True)
            raise
        return size
