"""
Data models for ftp_checkout.
"""

from .ftp import Credentials, FTPConfig, ServerProfile, SyncRequest, SyncResult

__all__ = [
    "Credentials",
    "FTPConfig",
    "ServerProfile",
    "SyncRequest",
    "SyncResult",
]
