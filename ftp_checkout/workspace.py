"""
Local workspace directory handling.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Union


logger = logging.getLogger(__name__)


class Workspace:
    """The local directory a checkout downloads into."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def ensure(self) -> None:
        """Create the directory (and parents) if missing."""
        self.path.mkdir(parents=True, exist_ok=True)

    def list_names(self) -> List[str]:
        """Names of the entries currently in the workspace."""
        if not self.path.is_dir():
            return []
        return sorted(entry.name for entry in self.path.iterdir())

    def delete_contents(self) -> None:
        """Remove everything inside the workspace, keeping the directory."""
        if not self.path.is_dir():
            return
        for entry in self.path.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        logger.debug(f"Cleaned workspace {self.path}")

    def path_for(self, file_name: str) -> Path:
        """
        Local path for a downloaded file.

        Raises:
            ValueError: If the name would place the file outside the workspace
        """
        target = (self.path / file_name).resolve()
        root = self.path.resolve()
        if target == root or root not in target.parents:
            raise ValueError(f"File name escapes the workspace: {file_name}")
        return self.path / file_name

    def __str__(self) -> str:
        return str(self.path)
