"""
Tests for the synchronization engine with an in-memory FTP client.
"""

from unittest.mock import patch

import pytest

from ftp_checkout.exceptions import (
    AUTHENTICATION_MESSAGE,
    ConnectionFailedError,
    DownloadFailedError,
    FTPAuthenticationError,
    RemoteDirectoryError,
    ServerNotFoundError,
    SyncError,
    ValidationError,
)
from ftp_checkout.ftp.sync import SynchronizationEngine
from ftp_checkout.models import FTPConfig, ServerProfile, SyncRequest
from ftp_checkout.registry import ServerRegistry
from ftp_checkout.workspace import Workspace


@pytest.fixture
def engine(registry, resolver, ftp_config, establisher) -> SynchronizationEngine:
    return SynchronizationEngine(registry, resolver, ftp_config, establisher=establisher)


def request(*file_names: str, remote_path: str = "/pub", clean: bool = False) -> SyncRequest:
    return SyncRequest(
        server_name="builds",
        remote_path=remote_path,
        file_names=list(file_names),
        clean_workspace_first=clean,
    )


class TestSynchronize:
    """Test successful synchronizations."""

    @pytest.mark.asyncio
    async def test_downloads_trimmed_entries(self, engine, establisher, fake_client, workspace_dir):
        result = await engine.synchronize(request("a.txt", " b.txt ", ""), workspace_dir)

        assert sorted(p.name for p in workspace_dir.iterdir()) == ["a.txt", "b.txt"]
        assert (workspace_dir / "a.txt").read_bytes() == b"alpha"
        assert (workspace_dir / "b.txt").read_bytes() == b"bravo" * 1000
        assert result.file_count == 2
        assert result.bytes_transferred == 5 + 5000
        assert result.server_name == "builds"
        assert fake_client.cwd == "/pub"
        assert fake_client.requested == ["a.txt", "b.txt"]
        establisher.release.assert_awaited_once_with(fake_client)

    @pytest.mark.asyncio
    async def test_progress_lines_in_order(self, engine, workspace_dir):
        lines = []
        (workspace_dir / "old.log").write_text("x")

        await engine.synchronize(request("a.txt"), workspace_dir, listener=lines.append)

        assert lines == [
            "File list of current workspace:",
            "old.log",
            "Start connecting ftp server..",
            "Connect success",
            "Start downloading file: a.txt",
            "Successfully download file: a.txt",
        ]

    @pytest.mark.asyncio
    async def test_logs_with_credentials(self, engine, establisher, workspace_dir):
        await engine.synchronize(request("a.txt"), workspace_dir)
        establisher.connect.assert_awaited_once_with("10.0.0.5", "21", "builder", "s3cret")

    @pytest.mark.asyncio
    async def test_unknown_credentials_log_in_anonymously(
        self, resolver, ftp_config, establisher, workspace_dir
    ):
        registry = ServerRegistry(
            profiles=[ServerProfile(name="builds", host="10.0.0.5", port="21", credential_id="gone")]
        )
        engine = SynchronizationEngine(registry, resolver, ftp_config, establisher=establisher)

        await engine.synchronize(request("a.txt"), workspace_dir)

        establisher.connect.assert_awaited_once_with("10.0.0.5", "21", "", "")

    @pytest.mark.asyncio
    async def test_blank_remote_path_stays_in_login_directory(
        self, engine, fake_client, workspace_dir
    ):
        await engine.synchronize(request("a.txt", remote_path="  "), workspace_dir)
        assert fake_client.cwd is None
        assert (workspace_dir / "a.txt").exists()

    @pytest.mark.asyncio
    async def test_creates_missing_workspace(self, engine, temp_dir):
        target = temp_dir / "new" / "ws"
        await engine.synchronize(request("a.txt"), Workspace(target))
        assert (target / "a.txt").exists()

    @pytest.mark.asyncio
    async def test_empty_file_list(self, engine, establisher, fake_client, workspace_dir):
        result = await engine.synchronize(request(""), workspace_dir)

        assert result.file_count == 0
        assert fake_client.requested == []
        establisher.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transfer_timeout(self, registry, resolver, establisher, workspace_dir):
        config = FTPConfig(transfer_timeout=5.0)
        engine = SynchronizationEngine(registry, resolver, config, establisher=establisher)

        result = await engine.synchronize(request("a.txt"), workspace_dir)

        assert result.file_count == 1


class TestCleanWorkspace:
    """Test the clean-first option."""

    @pytest.mark.asyncio
    async def test_clean_first_removes_existing(self, engine, workspace_dir):
        (workspace_dir / "stale.txt").write_text("old")
        (workspace_dir / "build").mkdir()
        (workspace_dir / "build" / "out.o").write_text("old")
        lines = []

        await engine.synchronize(
            request("a.txt", clean=True), workspace_dir, listener=lines.append
        )

        assert [p.name for p in workspace_dir.iterdir()] == ["a.txt"]
        assert "Start cleaning the workspace..." in lines

    @pytest.mark.asyncio
    async def test_without_clean_existing_files_stay(self, engine, workspace_dir):
        (workspace_dir / "stale.txt").write_text("old")

        await engine.synchronize(request("a.txt"), workspace_dir)

        assert sorted(p.name for p in workspace_dir.iterdir()) == ["a.txt", "stale.txt"]

    @pytest.mark.asyncio
    async def test_clean_failure(self, engine, establisher, workspace_dir):
        with patch.object(Workspace, "delete_contents", side_effect=PermissionError("denied")):
            with pytest.raises(SyncError, match="Failed cleaning the workspace"):
                await engine.synchronize(request("a.txt", clean=True), workspace_dir)

        establisher.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_clean_first_then_failed_download(
        self, engine, establisher, fake_client, workspace_dir
    ):
        """Cleaning is not undone when a later download fails."""
        (workspace_dir / "stale.txt").write_text("old")
        (workspace_dir / "build").mkdir()

        with pytest.raises(DownloadFailedError):
            await engine.synchronize(request("a.txt", "missing.txt", clean=True), workspace_dir)

        assert [p.name for p in workspace_dir.iterdir()] == ["a.txt"]
        establisher.release.assert_awaited_once_with(fake_client)

    @pytest.mark.asyncio
    async def test_clean_first_then_failed_directory_change(
        self, engine, establisher, fake_client, workspace_dir
    ):
        (workspace_dir / "stale.txt").write_text("old")

        with pytest.raises(RemoteDirectoryError):
            await engine.synchronize(
                request("a.txt", remote_path="/nope", clean=True), workspace_dir
            )

        assert list(workspace_dir.iterdir()) == []
        establisher.release.assert_awaited_once_with(fake_client)


class TestSynchronizeFailures:
    """Test failure paths."""

    @pytest.mark.asyncio
    async def test_unknown_server(self, engine, establisher, workspace_dir):
        lines = []
        with pytest.raises(ServerNotFoundError) as exc_info:
            await engine.synchronize(
                SyncRequest(server_name="nope", file_names=["a.txt"]),
                workspace_dir,
                listener=lines.append,
            )

        assert exc_info.value.message == "No available ftpServer"
        assert exc_info.value.server_name == "nope"
        assert "No available ftpServer: nope" in lines
        establisher.connect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_profile_host(self, resolver, ftp_config, establisher, workspace_dir):
        registry = ServerRegistry(
            profiles=[ServerProfile(name="builds", host="ftp.example.com", port="21")]
        )
        engine = SynchronizationEngine(registry, resolver, ftp_config, establisher=establisher)

        with pytest.raises(ConnectionFailedError, match="host invalid") as exc_info:
            await engine.synchronize(request("a.txt"), workspace_dir)

        assert isinstance(exc_info.value.cause, ValidationError)
        assert exc_info.value.cause.field == "host"

        establisher.connect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connection_rejected(self, engine, establisher, workspace_dir):
        establisher.connect.side_effect = FTPAuthenticationError(
            AUTHENTICATION_MESSAGE, host="10.0.0.5", port="21"
        )
        lines = []

        with pytest.raises(ConnectionFailedError) as exc_info:
            await engine.synchronize(request("a.txt"), workspace_dir, listener=lines.append)

        assert exc_info.value.message == AUTHENTICATION_MESSAGE
        assert isinstance(exc_info.value.cause, FTPAuthenticationError)
        assert "Can't connect to the ftpServer: 10.0.0.5:21" in lines
        assert "Connect success" not in lines
        establisher.release.assert_not_awaited()
        assert list(workspace_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_remote_directory_missing(self, engine, establisher, fake_client, workspace_dir):
        with pytest.raises(RemoteDirectoryError) as exc_info:
            await engine.synchronize(request("a.txt", remote_path="/nope"), workspace_dir)

        assert exc_info.value.remote_path == "/nope"
        assert fake_client.requested == []
        establisher.release.assert_awaited_once_with(fake_client)

    @pytest.mark.asyncio
    async def test_failed_download_stops_and_keeps_earlier_files(
        self, engine, establisher, fake_client, workspace_dir
    ):
        lines = []

        with pytest.raises(DownloadFailedError) as exc_info:
            await engine.synchronize(
                request("a.txt", "missing.txt", "b.txt"), workspace_dir, listener=lines.append
            )

        assert exc_info.value.file_name == "missing.txt"
        assert [p.name for p in workspace_dir.iterdir()] == ["a.txt"]
        assert fake_client.requested == ["a.txt", "missing.txt"]
        assert lines[-2:] == [
            "Start downloading file: missing.txt",
            "Failed download file: missing.txt",
        ]
        establisher.release.assert_awaited_once_with(fake_client)

    @pytest.mark.asyncio
    async def test_file_name_outside_workspace(self, engine, fake_client, workspace_dir):
        with pytest.raises(DownloadFailedError):
            await engine.synchronize(request("../escape.txt"), workspace_dir)

        assert fake_client.requested == []
        assert not (workspace_dir.parent / "escape.txt").exists()

    @pytest.mark.asyncio
    async def test_workspace_path_is_a_file(self, engine, establisher, temp_dir):
        target = temp_dir / "not_a_dir"
        target.write_text("x")

        with pytest.raises(SyncError, match="Failed creating the workspace") as exc_info:
            await engine.synchronize(request("a.txt"), target)

        assert isinstance(exc_info.value.cause, OSError)
        assert target.read_text() == "x"
        establisher.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreadable_workspace(self, engine, establisher, workspace_dir):
        with patch.object(Workspace, "list_names", side_effect=PermissionError("denied")):
            with pytest.raises(SyncError, match="Failed listing the workspace"):
                await engine.synchronize(request("a.txt"), workspace_dir)

        establisher.connect.assert_not_awaited()
