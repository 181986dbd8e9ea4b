"""
Custom logging filters for ftp_checkout.
"""

import logging
import re
from typing import List, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask passwords and URL credentials in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.rules: List[Tuple[Pattern[str], str]] = [
            # Passwords and secrets
            (
                re.compile(
                    r'(password|passwd|pwd|secret)(["\s]*[:=]["\s]*)([^\s"\',]+)',
                    re.IGNORECASE,
                ),
                r"\1\2***MASKED***",
            ),
            # URLs with credentials
            (
                re.compile(r"((?:s?ftps?|https?)://[^:/@\s]+):([^@\s]+)@", re.IGNORECASE),
                r"\1:***MASKED***@",
            ),
            # PASS command echoed from the control channel
            (re.compile(r"\b(PASS\s+)(\S+)"), r"\1***MASKED***"),
        ]

    def mask(self, message: str) -> str:
        for pattern, replacement in self.rules:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        message = record.getMessage()
        masked = self.mask(message)
        if masked != message:
            record.msg = masked
            record.args = ()
        return True
