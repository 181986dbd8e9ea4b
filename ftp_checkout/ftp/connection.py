"""
FTP session establishment.

This module opens an authenticated control connection to an FTP server and
configures it for checkout downloads: UTF-8 control encoding, binary transfer
type and passive data connections.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aioftp

from ..exceptions import (
    ErrorHandler,
    FTPConnectionError,
    InvalidPortError,
    ValidationError,
)
from ..models.ftp import FTPConfig
from ..utils.validation import ValidationResult, parse_port, validate_host, validate_port


logger = logging.getLogger(__name__)

# Failures that can surface while talking to the server
NETWORK_ERRORS = (
    aioftp.StatusCodeError,
    asyncio.TimeoutError,
    OSError,
    OverflowError,
    ValueError,
)


class ConnectionEstablisher:
    """
    Opens configured FTP sessions.

    Passive mode is always used: the client opens every data connection, so
    downloads work when the server cannot reach back through NAT or a
    firewall.
    """

    def __init__(self, config: Optional[FTPConfig] = None):
        self.config = config or FTPConfig()

    def _create_client(self) -> aioftp.Client:
        return aioftp.Client(
            socket_timeout=self.config.socket_timeout,
            connection_timeout=self.config.connection_timeout,
            encoding=self.config.encoding,
            passive_commands=tuple(self.config.passive_commands),
        )

    async def connect(
        self, host: str, port: str, username: str = "", secret: str = ""
    ) -> aioftp.Client:
        """
        Open, authenticate and configure a session.

        Args:
            host: Server address
            port: Server port as entered in the profile
            username: Login name; empty means anonymous
            secret: Password for username

        Returns:
            aioftp.Client: Logged-in client in binary, passive mode

        Raises:
            InvalidPortError: If port is not an integer
            FTPNetworkError: If the server cannot be reached
            FTPAuthenticationError: If login or session setup is refused
        """
        try:
            port_number = parse_port(port)
        except ValidationError as e:
            raise InvalidPortError(f"Invalid port: {port}", host=host, port=port) from e

        client = self._create_client()

        try:
            await client.connect(host, port_number)
        except NETWORK_ERRORS as e:
            client.close()
            raise ErrorHandler.handle_ftp_error(e, host, port) from e

        try:
            if username:
                await client.login(username, secret)
            else:
                await client.login()
            await client.command("TYPE I", "200")
        except NETWORK_ERRORS as e:
            # The control connection is open at this point; never leak it
            client.close()
            error = ErrorHandler.handle_ftp_error(e, host, port, authenticating=True)
            logger.error(error.message)
            raise error from e

        logger.debug(f"Connected to {host}:{port} as {username or 'anonymous'}")
        return client

    @staticmethod
    async def release(client: aioftp.Client) -> None:
        """Log out and disconnect. Safe to call on a broken session."""
        try:
            await client.quit()
        except NETWORK_ERRORS as e:
            logger.debug(f"QUIT failed, dropping connection: {e}")
        finally:
            client.close()

    @asynccontextmanager
    async def open_session(
        self, host: str, port: str, username: str = "", secret: str = ""
    ) -> AsyncIterator[aioftp.Client]:
        """
        Connect, and release the session when the block exits.

        Yields:
            aioftp.Client: Configured FTP client
        """
        client = await self.connect(host, port, username, secret)
        try:
            yield client
        finally:
            await self.release(client)

    async def test_connection(
        self, host: str, port: str, username: str = "", secret: str = ""
    ) -> ValidationResult:
        """
        Validate host and port, then try to open and close a session.

        Returns:
            ValidationResult with "Connection success" or the failure message
        """
        for result in (validate_host(host), validate_port(port)):
            if not result.ok:
                return result

        try:
            async with self.open_session(host, port, username, secret):
                pass
        except FTPConnectionError as e:
            return ValidationResult.error(e.message)

        return ValidationResult.success("Connection success")
