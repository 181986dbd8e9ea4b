"""
Registry of named FTP server profiles.

The registry holds an immutable tuple of profiles. Readers take the current
tuple without locking; replace_all builds a new tuple and swaps the reference,
so a read running alongside a replace sees either the old or the new
contents, never a mix.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Iterator, Optional, Tuple

from ..models.ftp import ServerProfile
from .store import ProfileStore


logger = logging.getLogger(__name__)


class ServerRegistry:
    """Ordered collection of server profiles, looked up by name."""

    def __init__(
        self,
        store: Optional[ProfileStore] = None,
        profiles: Iterable[ServerProfile] = (),
    ) -> None:
        """
        Initialize the registry.

        Args:
            store: Persistence collaborator; profiles are loaded from it now
                and saved to it after every replace_all
            profiles: Initial contents used when no store is given
        """
        self._store = store
        self._lock = threading.Lock()
        initial = store.load() if store is not None else profiles
        self._profiles: Tuple[ServerProfile, ...] = tuple(initial)

    def list_profiles(self) -> Tuple[ServerProfile, ...]:
        """Snapshot of all profiles, in registration order."""
        return self._profiles

    def names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self._profiles)

    def find_by_name(self, name: str) -> Optional[ServerProfile]:
        """
        Return the first profile with exactly this name.

        Names are not enforced to be unique; with duplicates the earliest
        registered profile wins.
        """
        for profile in self._profiles:
            if profile.name == name:
                return profile
        return None

    def replace_all(self, candidates: Iterable[ServerProfile]) -> None:
        """
        Replace the registry contents.

        Profiles with a blank name are dropped; the rest keep their order.
        The new contents are then persisted.
        """
        kept = tuple(p for p in candidates if p.name and p.name.strip())
        with self._lock:
            self._profiles = kept
            if self._store is not None:
                self._store.save(kept)
        logger.info(f"Server registry updated: {len(kept)} profiles")

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[ServerProfile]:
        return iter(self._profiles)
