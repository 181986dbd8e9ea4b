"""
Exception hierarchy for the ftp_checkout package.

This module provides custom exceptions and error handling utilities for
validation failures, FTP connection problems, and synchronization errors.
"""

from __future__ import annotations

import asyncio
import socket
from typing import Any, List, Optional

import aioftp


class FTPCheckoutError(Exception):
    """
    Base exception for all checkout operations.

    All other custom exceptions inherit from this class.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


class ValidationError(FTPCheckoutError):
    """
    Raised when a name, host or port string is malformed.

    Attributes:
        field: Name of the offending field
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, field=field)
        self.field = field


class ConfigError(FTPCheckoutError):
    """Raised when configuration cannot be loaded or parsed."""

    pass


class ProfileStoreError(FTPCheckoutError):
    """Raised when server profiles cannot be loaded or saved."""

    pass


class CredentialStoreError(FTPCheckoutError):
    """Base exception for credential store operations."""

    pass


class CredentialEncryptionError(CredentialStoreError):
    """Raised when credential encryption/decryption fails."""

    pass


# FTP connection exceptions


class FTPConnectionError(FTPCheckoutError):
    """Base exception for failures while establishing a session."""

    def __init__(
        self,
        message: str,
        host: Optional[str] = None,
        port: Optional[str] = None,
        ftp_code: Optional[str] = None,
    ) -> None:
        super().__init__(message, host=host, port=port, ftp_code=ftp_code)
        self.host = host
        self.port = port
        self.ftp_code = ftp_code


class InvalidPortError(FTPConnectionError):
    """Raised when the port string is not an integer."""

    pass


class FTPNetworkError(FTPConnectionError):
    """
    Raised for socket-level failures.

    Covers refused connections, unreachable hosts, DNS resolution failures
    and timeouts.
    """

    pass


class FTPAuthenticationError(FTPConnectionError):
    """Raised when the server does not accept the login or session setup."""

    pass


# Synchronization exceptions


class SyncError(FTPCheckoutError):
    """
    Raised when a synchronization does not complete.

    Attributes:
        cause: Underlying exception, if any
    """

    def __init__(
        self, message: str, cause: Optional[BaseException] = None, **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.cause = cause


class ServerNotFoundError(SyncError):
    """Raised when the named server profile is not in the registry."""

    def __init__(self, server_name: str) -> None:
        super().__init__("No available ftpServer", server_name=server_name)
        self.server_name = server_name


class ConnectionFailedError(SyncError):
    """Raised when the session to the profile's server cannot be opened."""

    pass


class RemoteDirectoryError(SyncError):
    """Raised when the server refuses to change into the remote path."""

    def __init__(
        self, remote_path: str, cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(
            f"Failed change directory: {remote_path}",
            cause=cause,
            remote_path=remote_path,
        )
        self.remote_path = remote_path


class DownloadFailedError(SyncError):
    """Raised when a single file of the request cannot be retrieved."""

    def __init__(self, file_name: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"Failed download file: {file_name}", cause=cause, file_name=file_name
        )
        self.file_name = file_name


AUTHENTICATION_MESSAGE = "Connection is failed,wrong username or password"


class ErrorHandler:
    """
    Utility class for converting library exceptions into checkout errors.
    """

    @staticmethod
    def reply_codes(error: aioftp.StatusCodeError) -> List[str]:
        """Return the received reply codes of an aioftp status error as strings."""
        return sorted(str(code) for code in getattr(error, "received_codes", ()))

    @staticmethod
    def handle_ftp_error(
        error: Exception,
        host: Optional[str] = None,
        port: Optional[str] = None,
        authenticating: bool = False,
    ) -> FTPConnectionError:
        """
        Convert an exception raised while opening a session.

        Any unexpected reply received once the control connection is up
        (login and transfer-mode setup) counts as a rejected login.

        Args:
            error: The original exception
            host: Server host being contacted
            port: Server port being contacted
            authenticating: Whether the greeting was already accepted

        Returns:
            Appropriate FTPConnectionError subclass
        """
        if isinstance(error, FTPConnectionError):
            return error

        if isinstance(error, aioftp.StatusCodeError):
            code = ",".join(ErrorHandler.reply_codes(error)) or None
            if authenticating:
                return FTPAuthenticationError(
                    AUTHENTICATION_MESSAGE, host=host, port=port, ftp_code=code
                )
            return FTPNetworkError(
                f"FTP server refused the connection: {error}",
                host=host,
                port=port,
                ftp_code=code,
            )

        if isinstance(error, (asyncio.TimeoutError, socket.timeout)):
            return FTPNetworkError(
                f"FTP connection timed out: {host}:{port}", host=host, port=port
            )

        if isinstance(error, socket.gaierror):
            return FTPNetworkError(
                f"Unknown host {host}: {error}", host=host, port=port
            )

        if isinstance(error, (OSError, ConnectionError)):
            return FTPNetworkError(
                f"FTP connection error: {error}", host=host, port=port
            )

        return FTPNetworkError(f"Unexpected FTP error: {error}", host=host, port=port)
