"""
Credential storage and resolution for ftp_checkout.
"""

from .credential_store import CredentialStore, EncryptedFileStore, InMemoryStore
from .resolver import (
    SYSTEM_SCOPE,
    USERNAME_PASSWORD_KIND,
    CredentialResolver,
    StoreCredentialResolver,
)

__all__ = [
    "CredentialStore",
    "EncryptedFileStore",
    "InMemoryStore",
    "CredentialResolver",
    "StoreCredentialResolver",
    "SYSTEM_SCOPE",
    "USERNAME_PASSWORD_KIND",
]
