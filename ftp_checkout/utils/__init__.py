"""
Utility helpers for ftp_checkout.
"""

from .validation import (
    ProfileValidator,
    ValidationResult,
    parse_port,
    validate_host,
    validate_name,
    validate_port,
)

__all__ = [
    "ProfileValidator",
    "ValidationResult",
    "parse_port",
    "validate_host",
    "validate_name",
    "validate_port",
]
