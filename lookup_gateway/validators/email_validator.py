from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Union


# Local part: letters, numbers, and . _ % + -
# Domain: letters, numbers, . and -, TLD of at least 2 letters
DEFAULT_EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
DEFAULT_EMAIL_ERROR = "Invalid Email Address"


@dataclass
class EmailValidationResult:
    """Result of email validation."""

    valid: bool
    email: str
    error: Optional[str] = None


class EmailValidator:
    """Syntax-only email validator for the reserved email lookup path."""

    def __init__(
        self,
        pattern: Union[str, Pattern[str]] = DEFAULT_EMAIL_PATTERN,
        error: str = DEFAULT_EMAIL_ERROR,
    ) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.error = error

    def validate(self, email: Optional[str]) -> EmailValidationResult:
        """Check email syntax.

        Args:
            email: Raw value from the query string.

        Returns:
            EmailValidationResult; ``error`` carries the configured message when invalid.
        """
        value = (email or "").strip()
        if not value or not self.pattern.match(value):
            return EmailValidationResult(valid=False, email=value, error=self.error)
        return EmailValidationResult(valid=True, email=value)
