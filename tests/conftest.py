"""
Shared test fixtures and configuration for the ftp_checkout test suite.
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator, Dict, Generator, Iterable, Optional
from unittest.mock import AsyncMock, MagicMock

import aioftp
import pytest

from ftp_checkout.auth import InMemoryStore, StoreCredentialResolver
from ftp_checkout.models import FTPConfig, ServerProfile
from ftp_checkout.registry import InMemoryProfileStore, ServerRegistry


FTP_USER = "builder"
FTP_PASSWORD = "s3cret"


def status_error(*received: str, info: str = "") -> aioftp.StatusCodeError:
    """A StatusCodeError as raised by aioftp for an unexpected reply."""
    return aioftp.StatusCodeError(("2xx",), received, info)


class FakeStream:
    """Stand-in for an aioftp download stream."""

    def __init__(self, data: bytes, error: Optional[BaseException] = None):
        self.data = data
        self.error = error

    async def __aenter__(self) -> "FakeStream":
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    async def iter_by_block(self, count: int):
        for start in range(0, len(self.data), count):
            yield self.data[start:start + count]


class FakeClient:
    """
    In-memory FTP client serving a fixed set of files.

    Only the calls made by the synchronization engine are implemented.
    """

    def __init__(
        self,
        files: Optional[Dict[str, bytes]] = None,
        directories: Iterable[str] = ("/",),
    ):
        self.files = files or {}
        self.directories = set(directories)
        self.cwd: Optional[str] = None
        self.requested = []

    async def change_directory(self, path: str) -> None:
        if path not in self.directories:
            raise status_error("550", info="No such directory")
        self.cwd = path

    def download_stream(self, name: str) -> FakeStream:
        self.requested.append(name)
        if name not in self.files:
            return FakeStream(b"", error=status_error("550", info="No such file"))
        return FakeStream(self.files[name])


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def workspace_dir(temp_dir: Path) -> Path:
    """Workspace directory for downloads."""
    workspace = temp_dir / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def ftp_config() -> FTPConfig:
    """Short timeouts and small blocks for tests."""
    return FTPConfig(connection_timeout=5.0, socket_timeout=5.0, chunk_size=1024)


@pytest.fixture
def sample_profile() -> ServerProfile:
    return ServerProfile(
        name="builds", host="10.0.0.5", port="21", credential_id="deploy"
    )


@pytest.fixture
def registry(sample_profile: ServerProfile) -> ServerRegistry:
    """Registry holding sample_profile."""
    return ServerRegistry(InMemoryProfileStore([sample_profile]))


@pytest.fixture
async def resolver() -> StoreCredentialResolver:
    """Resolver knowing the "deploy" credential."""
    resolver = StoreCredentialResolver(InMemoryStore())
    await resolver.add("deploy", FTP_USER, FTP_PASSWORD)
    return resolver


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient(
        files={"a.txt": b"alpha", "b.txt": b"bravo" * 1000},
        directories=("/pub",),
    )


@pytest.fixture
def establisher(fake_client: FakeClient) -> MagicMock:
    """Connection establisher handing out fake_client."""
    establisher = MagicMock()
    establisher.connect = AsyncMock(return_value=fake_client)
    establisher.release = AsyncMock()
    return establisher


@pytest.fixture
def server_root(temp_dir: Path) -> Path:
    """Directory tree served by the local FTP server."""
    root = temp_dir / "ftp_root"
    (root / "pub").mkdir(parents=True)
    (root / "pub" / "a.txt").write_bytes(b"alpha\n")
    (root / "pub" / "b.txt").write_bytes(b"bravo\n" * 4096)
    return root


@pytest.fixture
async def ftp_server(server_root: Path) -> AsyncGenerator[aioftp.Server, None]:
    """Local FTP server accepting FTP_USER / FTP_PASSWORD."""
    server = aioftp.Server(
        [aioftp.User(FTP_USER, FTP_PASSWORD, base_path=server_root, home_path="/")]
    )
    await server.start("127.0.0.1", 0)
    try:
        yield server
    finally:
        await server.close()


@pytest.fixture
def ftp_port(ftp_server: aioftp.Server) -> str:
    """Port of the local FTP server, as a profile would store it."""
    return str(ftp_server.address[1])
