"""
Persistence for the server registry.

Profiles are kept in a YAML or JSON file with a single top-level "servers"
list. The format is picked from the file suffix.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ProfileStoreError
from ..models.ftp import ServerProfile


logger = logging.getLogger(__name__)


class ProfileStore(ABC):
    """Loads and saves the full list of server profiles."""

    @abstractmethod
    def load(self) -> List[ServerProfile]:
        """Return the saved profiles, in order."""
        pass

    @abstractmethod
    def save(self, profiles: Sequence[ServerProfile]) -> None:
        """Replace the saved profiles."""
        pass


class InMemoryProfileStore(ProfileStore):
    """Profile store without durable storage (for testing/development)."""

    def __init__(self, profiles: Sequence[ServerProfile] = ()) -> None:
        self._profiles: List[ServerProfile] = list(profiles)
        self.save_count = 0

    def load(self) -> List[ServerProfile]:
        return list(self._profiles)

    def save(self, profiles: Sequence[ServerProfile]) -> None:
        self._profiles = list(profiles)
        self.save_count += 1


class FileProfileStore(ProfileStore):
    """Profile store backed by a YAML or JSON file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    @property
    def is_yaml(self) -> bool:
        return self.path.suffix.lower() in (".yaml", ".yml")

    def load(self) -> List[ServerProfile]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) if self.is_yaml else json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ProfileStoreError(f"Failed to read server profiles from {self.path}: {e}")

        entries = (data or {}).get("servers") or []
        try:
            profiles = [ServerProfile(**entry) for entry in entries]
        except (PydanticValidationError, TypeError) as e:
            raise ProfileStoreError(f"Invalid server profile in {self.path}: {e}")

        logger.debug(f"Loaded {len(profiles)} server profiles from {self.path}")
        return profiles

    def save(self, profiles: Sequence[ServerProfile]) -> None:
        data: Dict[str, Any] = {"servers": [p.model_dump() for p in profiles]}
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write next to the target and rename so readers never see a partial file
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                if self.is_yaml:
                    yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
                else:
                    json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise ProfileStoreError(f"Failed to save server profiles to {self.path}: {e}")

        logger.debug(f"Saved {len(profiles)} server profiles to {self.path}")
