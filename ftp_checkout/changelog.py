"""
Changelog placeholder for build integration.

FTP sources carry no revision history, so every checkout records an empty
changelog.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

EMPTY_CHANGELOG = "<log/>"


def create_empty_changelog(path: Union[str, Path]) -> Path:
    """Write an empty changelog document to path and return it."""
    changelog = Path(path)
    changelog.parent.mkdir(parents=True, exist_ok=True)
    changelog.write_text(EMPTY_CHANGELOG, encoding="utf-8")
    return changelog
