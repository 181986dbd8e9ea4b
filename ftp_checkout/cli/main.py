"""
Command-line interface for ftp_checkout.

Provides the checkout command used by builds plus commands for managing the
server registry and the credential store.
"""

import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import click

from ..auth.resolver import StoreCredentialResolver
from ..config.loader import ConfigLoader
from ..config.models import GlobalConfig, LogLevel
from ..convenience import build_registry, build_resolver, checkout
from ..exceptions import FTPCheckoutError
from ..ftp.connection import ConnectionEstablisher
from ..logging import setup_logging
from ..models.ftp import ServerProfile
from ..registry.registry import ServerRegistry
from .formatting import (
    console,
    names_table,
    print_error,
    print_line,
    print_success,
    profiles_table,
)


class CLIContext:
    """Objects shared by all commands of one invocation."""

    def __init__(self, config: GlobalConfig):
        self.config = config
        self._registry: Optional[ServerRegistry] = None
        self._resolver: Optional[StoreCredentialResolver] = None

    @property
    def registry(self) -> ServerRegistry:
        if self._registry is None:
            try:
                self._registry = build_registry(self.config)
            except FTPCheckoutError as e:
                _fail(e)
        return self._registry

    @property
    def resolver(self) -> StoreCredentialResolver:
        if self._resolver is None:
            try:
                self._resolver = build_resolver(self.config)
            except FTPCheckoutError as e:
                _fail(e)
        return self._resolver


pass_context = click.make_pass_decorator(CLIContext)


def _fail(error: Exception) -> NoReturn:
    print_error(str(error))
    sys.exit(1)


@click.group()
@click.option("--config", "-c", "config_file", type=click.Path(dir_okay=False),
              help="Configuration file (YAML or JSON)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="ftp-checkout")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], verbose: bool) -> None:
    """Fetch build inputs from FTP servers."""
    try:
        config = ConfigLoader().load_config(config_file)
    except FTPCheckoutError as e:
        _fail(e)

    if verbose:
        config.logging.level = LogLevel.DEBUG
    setup_logging(config.logging)
    ctx.obj = CLIContext(config)


@cli.command("checkout")
@click.argument("server")
@click.argument("remote_path")
@click.argument("files", nargs=-1, required=True)
@click.option("--workspace", "-w", type=click.Path(file_okay=False), default=".",
              show_default=True, help="Local directory to download into")
@click.option("--clean", is_flag=True, help="Delete workspace contents first")
@click.option("--changelog", type=click.Path(dir_okay=False),
              help="Write an empty changelog to this file")
@pass_context
def checkout_command(
    obj: CLIContext,
    server: str,
    remote_path: str,
    files: Tuple[str, ...],
    workspace: str,
    clean: bool,
    changelog: Optional[str],
) -> None:
    """Download FILES from REMOTE_PATH on SERVER.

    FILES may also be given as one comma-separated argument.
    """
    file_names = [name for arg in files for name in arg.split(",")]
    try:
        result = asyncio.run(
            checkout(
                server,
                remote_path,
                file_names,
                Path(workspace),
                clean_workspace_first=clean,
                changelog_file=changelog,
                config=obj.config,
                registry=obj.registry,
                resolver=obj.resolver,
                listener=print_line,
            )
        )
    except FTPCheckoutError as e:
        _fail(e)

    print_success(
        f"Downloaded {result.file_count} files ({result.bytes_transferred} bytes) "
        f"to {result.workspace}"
    )


@cli.command("test-connection")
@click.option("--host", required=True, help="Server address")
@click.option("--port", default="21", show_default=True, help="Server port")
@click.option("--credentials-id", default="", help="Credential id to log in with")
@pass_context
def test_connection(obj: CLIContext, host: str, port: str, credentials_id: str) -> None:
    """Check that a server accepts a login."""

    async def run():
        credentials = await obj.resolver.resolve_or_anonymous(credentials_id)
        establisher = ConnectionEstablisher(obj.config.ftp)
        return await establisher.test_connection(
            host, port, credentials.username, credentials.secret.get_secret_value()
        )

    try:
        result = asyncio.run(run())
    except FTPCheckoutError as e:
        _fail(e)
    if not result.ok:
        _fail(FTPCheckoutError(result.message or "Connection failed"))
    print_success(result.message or "Connection success")


@cli.group()
def servers() -> None:
    """Manage the FTP server registry."""


@servers.command("list")
@pass_context
def servers_list(obj: CLIContext) -> None:
    """List registered servers."""
    console.print(profiles_table(obj.registry.list_profiles()))


@servers.command("add")
@click.argument("name")
@click.argument("host")
@click.argument("port", default="21")
@click.option("--credentials-id", default="", help="Credential id to log in with")
@pass_context
def servers_add(
    obj: CLIContext, name: str, host: str, port: str, credentials_id: str
) -> None:
    """Register a server profile."""
    try:
        profile = ServerProfile.from_input(name, host, port, credentials_id)
        if profile.credential_id and not asyncio.run(
            obj.resolver.exists(profile.credential_id)
        ):
            _fail(FTPCheckoutError("credentialId does not exists"))
        obj.registry.replace_all([*obj.registry.list_profiles(), profile])
    except FTPCheckoutError as e:
        _fail(e)
    print_success(f"Added server '{profile.name}' ({profile.address})")


@servers.command("remove")
@click.argument("name")
@pass_context
def servers_remove(obj: CLIContext, name: str) -> None:
    """Remove every server profile called NAME."""
    profiles = obj.registry.list_profiles()
    remaining = [p for p in profiles if p.name != name]
    if len(remaining) == len(profiles):
        _fail(FTPCheckoutError(f"No available ftpServer: {name}"))
    try:
        obj.registry.replace_all(remaining)
    except FTPCheckoutError as e:
        _fail(e)
    print_success(f"Removed server '{name}'")


@cli.group()
def credentials() -> None:
    """Manage stored login credentials."""


@credentials.command("add")
@click.argument("credential_id")
@click.argument("username")
@click.password_option(help="Password (prompted if omitted)")
@pass_context
def credentials_add(
    obj: CLIContext, credential_id: str, username: str, password: str
) -> None:
    """Store a username/password credential under CREDENTIAL_ID."""
    try:
        asyncio.run(obj.resolver.add(credential_id, username, password))
    except FTPCheckoutError as e:
        _fail(e)
    print_success(f"Stored credential '{credential_id}'")


@credentials.command("list")
@pass_context
def credentials_list(obj: CLIContext) -> None:
    """List credential ids usable by server profiles."""
    console.print(names_table("Credentials", asyncio.run(obj.resolver.list_ids())))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
