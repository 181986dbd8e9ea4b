"""
Credential resolution for server profiles.

A server profile only carries an opaque credential id. The resolver turns
that id into a username and secret, or into nothing at all, in which case the
caller logs in anonymously.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import SecretStr

from ..models.ftp import Credentials
from .credential_store import CredentialStore


logger = logging.getLogger(__name__)

USERNAME_PASSWORD_KIND = "username_password"
SYSTEM_SCOPE = "system"


class CredentialResolver(ABC):
    """Looks up credentials by id."""

    @abstractmethod
    async def resolve(self, credential_id: Optional[str]) -> Optional[Credentials]:
        """
        Return the credentials with the given id.

        Returns None both for an empty id and for an unknown one; callers
        must treat either as anonymous login.
        """
        pass

    async def resolve_or_anonymous(self, credential_id: Optional[str]) -> Credentials:
        """Resolve, falling back to empty username and secret."""
        credentials = await self.resolve(credential_id)
        return credentials if credentials is not None else Credentials.anonymous()


class StoreCredentialResolver(CredentialResolver):
    """
    Resolver backed by a CredentialStore.

    Only system-scoped username/password records are visible. Records are
    stored as JSON objects with "username" and "password" keys.
    """

    def __init__(self, store: CredentialStore, scope: str = SYSTEM_SCOPE):
        self.store = store
        self.scope = scope

    def _matches(self, metadata: Optional[Dict[str, Any]]) -> bool:
        if metadata is None:
            return False
        return (
            metadata.get("kind") == USERNAME_PASSWORD_KIND
            and metadata.get("scope", SYSTEM_SCOPE) == self.scope
        )

    async def resolve(self, credential_id: Optional[str]) -> Optional[Credentials]:
        if credential_id is None or credential_id.strip() == "":
            return None

        if not self._matches(await self.store.get_metadata(credential_id)):
            return None

        raw = await self.store.retrieve_credential(credential_id)
        if raw is None:
            return None

        try:
            record = json.loads(raw)
            return Credentials(
                username=record["username"], secret=SecretStr(record["password"])
            )
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Credential '{credential_id}' is not a username/password record")
            return None

    async def add(
        self, credential_id: str, username: str, password: str
    ) -> None:
        """Store a username/password credential in this resolver's scope."""
        await self.store.store_credential(
            credential_id,
            json.dumps({"username": username, "password": password}),
            {"kind": USERNAME_PASSWORD_KIND, "scope": self.scope},
        )

    async def list_ids(self) -> List[str]:
        """Ids of all credentials this resolver can return."""
        ids = []
        for key in await self.store.list_credentials():
            if self._matches(await self.store.get_metadata(key)):
                ids.append(key)
        return ids

    async def exists(self, credential_id: str) -> bool:
        return credential_id in await self.list_ids()
