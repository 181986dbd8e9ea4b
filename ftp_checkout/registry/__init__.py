"""
Server profile registry and its persistence.
"""

from .registry import ServerRegistry
from .store import FileProfileStore, InMemoryProfileStore, ProfileStore

__all__ = [
    "ServerRegistry",
    "ProfileStore",
    "InMemoryProfileStore",
    "FileProfileStore",
]
