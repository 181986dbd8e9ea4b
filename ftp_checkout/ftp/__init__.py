"""
FTP session handling and the checkout synchronization engine.
"""

from .connection import ConnectionEstablisher
from .sync import LogSink, SynchronizationEngine

__all__ = [
    "ConnectionEstablisher",
    "LogSink",
    "SynchronizationEngine",
]
