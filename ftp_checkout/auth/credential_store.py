"""
Secure credential storage.

This module provides storage backends for the credentials referenced by
server profiles: an encrypted file store for real use and an in-memory store
for testing.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import os
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..exceptions import CredentialEncryptionError, CredentialStoreError


logger = logging.getLogger(__name__)

MASTER_KEY_ENV = "FTP_CHECKOUT_MASTER_KEY"


class CredentialStore(ABC):
    """Abstract base class for credential storage backends."""

    @abstractmethod
    async def store_credential(
        self, key: str, value: str, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Store a credential securely."""
        pass

    @abstractmethod
    async def retrieve_credential(self, key: str) -> Optional[str]:
        """Retrieve a credential, or None if the key is unknown."""
        pass

    @abstractmethod
    async def get_metadata(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the metadata stored alongside a credential."""
        pass

    @abstractmethod
    async def delete_credential(self, key: str) -> bool:
        """Delete a credential."""
        pass

    @abstractmethod
    async def list_credentials(self) -> List[str]:
        """List all stored credential keys."""
        pass


class EncryptedFileStore(CredentialStore):
    """File-based credential store with Fernet encryption."""

    def __init__(self, storage_path: Path, master_key: Optional[str] = None):
        """
        Initialize encrypted file store.

        Args:
            storage_path: Directory holding the encrypted credentials
            master_key: Master key for encryption (if None, read from
                FTP_CHECKOUT_MASTER_KEY)
        """
        self.storage_path = Path(storage_path)
        self.storage_path.mkdir(parents=True, exist_ok=True)

        self._fernet = self._initialize_encryption(master_key)

        self.metadata_file = self.storage_path / "metadata.json"
        self._metadata: Dict[str, Dict[str, Any]] = {}
        self._load_metadata()

    def _salt(self) -> bytes:
        """Per-store random salt, created on first use."""
        salt_file = self.storage_path / "salt"
        if salt_file.exists():
            return salt_file.read_bytes()
        salt = os.urandom(16)
        salt_file.write_bytes(salt)
        return salt

    def _initialize_encryption(self, master_key: Optional[str] = None) -> Fernet:
        """Initialize encryption with master key."""
        if master_key is None:
            master_key = os.getenv(MASTER_KEY_ENV)
            if not master_key:
                logger.warning(
                    "No master key provided. Generated new key. "
                    f"Set {MASTER_KEY_ENV} to persist credentials across sessions."
                )
                return Fernet(Fernet.generate_key())

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self._salt(),
            iterations=100000,
        )
        key = base64.urlsafe_b64encode(kdf.derive(master_key.encode()))
        return Fernet(key)

    def _load_metadata(self) -> None:
        """Load metadata from file."""
        if not self.metadata_file.exists():
            return
        try:
            with open(self.metadata_file, "r", encoding="utf-8") as f:
                self._metadata = json.load(f)
        except (OSError, ValueError) as e:
            raise CredentialStoreError(f"Failed to load credential metadata: {e}")

    def _save_metadata(self) -> None:
        """Save metadata to file."""
        try:
            with open(self.metadata_file, "w", encoding="utf-8") as f:
                json.dump(self._metadata, f, indent=2)
        except OSError as e:
            raise CredentialStoreError(f"Failed to save credential metadata: {e}")

    def _get_credential_file(self, key: str) -> Path:
        """Get file path for a credential."""
        # Hash the key to avoid filesystem issues
        key_hash = hashlib.sha256(key.encode()).hexdigest()
        return self.storage_path / f"{key_hash}.cred"

    async def store_credential(
        self, key: str, value: str, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Store a credential securely."""
        try:
            encrypted_value = self._fernet.encrypt(value.encode())

            credential_file = self._get_credential_file(key)
            with open(credential_file, "wb") as f:
                f.write(encrypted_value)
        except OSError as e:
            raise CredentialStoreError(f"Failed to store credential '{key}': {e}")

        now = time.time()
        self._metadata[key] = {
            "created_at": self._metadata.get(key, {}).get("created_at", now),
            "updated_at": now,
            **(metadata or {}),
        }
        self._save_metadata()

        logger.debug(f"Stored credential: {key}")

    async def retrieve_credential(self, key: str) -> Optional[str]:
        """Retrieve a credential."""
        credential_file = self._get_credential_file(key)
        if not credential_file.exists():
            return None

        try:
            with open(credential_file, "rb") as f:
                encrypted_value = f.read()
        except OSError as e:
            raise CredentialStoreError(f"Failed to read credential '{key}': {e}")

        try:
            return self._fernet.decrypt(encrypted_value).decode()
        except InvalidToken:
            raise CredentialEncryptionError(
                f"Failed to decrypt credential '{key}': wrong master key?"
            )

    async def get_metadata(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the metadata stored alongside a credential."""
        metadata = self._metadata.get(key)
        return dict(metadata) if metadata is not None else None

    async def delete_credential(self, key: str) -> bool:
        """Delete a credential."""
        credential_file = self._get_credential_file(key)
        existed = key in self._metadata or credential_file.exists()
        if credential_file.exists():
            credential_file.unlink()

        if key in self._metadata:
            del self._metadata[key]
            self._save_metadata()

        logger.debug(f"Deleted credential: {key}")
        return existed

    async def list_credentials(self) -> List[str]:
        """List all stored credential keys."""
        return list(self._metadata.keys())


class InMemoryStore(CredentialStore):
    """In-memory credential store (for testing/development)."""

    def __init__(self) -> None:
        """Initialize in-memory store."""
        self._credentials: Dict[str, str] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    async def store_credential(
        self, key: str, value: str, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Store a credential in memory."""
        self._credentials[key] = value
        self._metadata[key] = {
            "created_at": time.time(),
            "updated_at": time.time(),
            **(metadata or {}),
        }

    async def retrieve_credential(self, key: str) -> Optional[str]:
        """Retrieve a credential from memory."""
        return self._credentials.get(key)

    async def get_metadata(self, key: str) -> Optional[Dict[str, Any]]:
        metadata = self._metadata.get(key)
        return dict(metadata) if metadata is not None else None

    async def delete_credential(self, key: str) -> bool:
        """Delete a credential from memory."""
        if key in self._credentials:
            del self._credentials[key]
            self._metadata.pop(key, None)
            return True
        return False

    async def list_credentials(self) -> List[str]:
        """List all stored credential keys."""
        return list(self._credentials.keys())
