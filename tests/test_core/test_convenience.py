"""
Tests for the convenience wiring functions.
"""

from unittest.mock import AsyncMock, patch

import pytest

from ftp_checkout import build_registry, build_resolver, checkout
from ftp_checkout.config import GlobalConfig
from ftp_checkout.exceptions import ServerNotFoundError
from ftp_checkout.models import ServerProfile, SyncRequest
from ftp_checkout.registry import FileProfileStore


@pytest.fixture
def config(temp_dir) -> GlobalConfig:
    return GlobalConfig(
        storage={
            "profiles_file": str(temp_dir / "servers.json"),
            "credentials_dir": str(temp_dir / "credentials"),
        }
    )


class TestBuilders:
    """Test building components from configuration."""

    def test_build_registry(self, config):
        FileProfileStore(config.storage.profiles_file).save(
            [ServerProfile(name="builds", host="10.0.0.5", port="21")]
        )
        registry = build_registry(config)
        assert registry.names() == ("builds",)

    @pytest.mark.asyncio
    async def test_build_resolver(self, config):
        resolver = build_resolver(config, master_key="master")
        await resolver.add("deploy", "builder", "s3cret")

        reopened = build_resolver(config, master_key="master")
        creds = await reopened.resolve("deploy")
        assert creds.username == "builder"


class TestCheckout:
    """Test the one-call checkout."""

    @pytest.mark.asyncio
    async def test_changelog_written_before_sync(self, config, temp_dir, registry, resolver):
        changelog = temp_dir / "changelog.xml"

        with pytest.raises(ServerNotFoundError):
            await checkout(
                "unknown", "/pub", "a.txt", temp_dir / "ws",
                changelog_file=changelog, config=config, registry=registry, resolver=resolver,
            )

        assert changelog.read_text(encoding="utf-8") == "<log/>"

    @pytest.mark.asyncio
    async def test_request_built_from_arguments(self, config, temp_dir, registry, resolver):
        with patch(
            "ftp_checkout.convenience.SynchronizationEngine.synchronize", new=AsyncMock()
        ) as synchronize:
            await checkout(
                "builds", "/pub", "a.txt, b.txt", temp_dir / "ws",
                clean_workspace_first=True, config=config, registry=registry, resolver=resolver,
            )

        request, workspace, listener = synchronize.call_args.args
        assert isinstance(request, SyncRequest)
        assert request.entries() == ["a.txt", "b.txt"]
        assert request.clean_workspace_first is True
        assert workspace == temp_dir / "ws"
        assert listener is None
