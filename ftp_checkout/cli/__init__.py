"""
Command-line interface for ftp_checkout.
"""

from .main import cli, main

__all__ = ["cli", "main"]
