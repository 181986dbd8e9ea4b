"""
Input validation for server profile fields.

This module checks the name, host and port strings entered for a server
profile before they are used to open a connection.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..exceptions import ValidationError


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single field check."""

    ok: bool
    message: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def success(cls, message: Optional[str] = None) -> ValidationResult:
        return cls(ok=True, message=message)

    @classmethod
    def error(cls, message: str, field: Optional[str] = None) -> ValidationResult:
        return cls(ok=False, message=message, field=field)

    def raise_for_error(self) -> None:
        """Raise ValidationError if the check failed."""
        if not self.ok:
            raise ValidationError(self.message or "invalid value", field=self.field)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


class ProfileValidator:
    """Field checks for server profiles."""

    # Accepts 0-299 per group, so e.g. "299.299.299.299" is a valid host here.
    HOST_PATTERN = re.compile(r"(2\d{2}|[01]?\d{1,2})(\.(2\d{2}|[01]?\d{1,2})){3}")
    PORT_PATTERN = re.compile(r"[+-]?\d+")

    @classmethod
    def validate_name(cls, value: Optional[str]) -> ValidationResult:
        """
        Check that a profile name is present.

        Args:
            value: Name to check

        Returns:
            ValidationResult, failing with "name required" when blank
        """
        if _is_blank(value):
            return ValidationResult.error("name required", field="name")
        return ValidationResult.success()

    @classmethod
    def validate_host(cls, value: Optional[str]) -> ValidationResult:
        """
        Check that a host looks like a dotted-quad IPv4 address.

        Args:
            value: Host to check

        Returns:
            ValidationResult, failing with "host required" or "host invalid"
        """
        if _is_blank(value):
            return ValidationResult.error("host required", field="host")
        if not cls.HOST_PATTERN.fullmatch(value):
            return ValidationResult.error("host invalid", field="host")
        return ValidationResult.success()

    @classmethod
    def validate_port(cls, value: Optional[str]) -> ValidationResult:
        """
        Check that a port parses as an integer.

        No range check is made; out-of-range ports fail at connect time.

        Args:
            value: Port to check

        Returns:
            ValidationResult, failing with "port required" or "port invalid"
        """
        if _is_blank(value):
            return ValidationResult.error("port required", field="port")
        if not cls.PORT_PATTERN.fullmatch(value):
            return ValidationResult.error("port invalid", field="port")
        return ValidationResult.success()


validate_name = ProfileValidator.validate_name
validate_host = ProfileValidator.validate_host
validate_port = ProfileValidator.validate_port


def parse_port(value: str) -> int:
    """Return the integer value of a port string that passed validate_port."""
    validate_port(value).raise_for_error()
    return int(value)
