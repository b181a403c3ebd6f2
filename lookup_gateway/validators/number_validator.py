"""Indian mobile number cleaner and validator."""

from __future__ import annotations

import re
from typing import Optional, Pattern, Union

DEFAULT_MOBILE_PATTERN = r"^[6-9]\d{9}$"
DEFAULT_MOBILE_ERROR = "Invalid Indian Mobile Number"

COUNTRY_CODE = "91"
LOCAL_LENGTH = 10


def clean_number(number: Optional[object]) -> Optional[str]:
    """Strip the country code and every non-digit character.

    ``+91`` is always removed from the front. A bare ``91`` is removed only
    when it is followed by exactly ten more characters, so a ten digit local
    number that happens to start with 91 is left alone.

    Args:
        number: Raw value from the query string (may be None).

    Returns:
        Digit-only string, or None if the input was empty.
    """
    if number is None:
        return None
    cleaned = str(number).strip()
    if not cleaned:
        return None

    if cleaned.startswith("+" + COUNTRY_CODE):
        cleaned = cleaned[len(COUNTRY_CODE) + 1:]
    if cleaned.startswith(COUNTRY_CODE) and len(cleaned) == LOCAL_LENGTH + len(COUNTRY_CODE):
        cleaned = cleaned[len(COUNTRY_CODE):]

    return re.sub(r"\D", "", cleaned)


class MobileNumberValidator:
    """Validator for 10-digit Indian mobile numbers (leading digit 6-9)."""

    def __init__(
        self,
        pattern: Union[str, Pattern[str]] = DEFAULT_MOBILE_PATTERN,
        error: str = DEFAULT_MOBILE_ERROR,
    ) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.error = error

    def validate(self, number: Optional[object]) -> Optional[str]:
        """Return the cleaned number if valid, otherwise None.

        Invalid input is an expected outcome, so nothing is raised.
        """
        cleaned = clean_number(number)
        if not cleaned or not self.pattern.match(cleaned):
            return None
        return cleaned


_default_validator = MobileNumberValidator()


def validate_mobile(number: Optional[object]) -> Optional[str]:
    """Validate with the default Indian mobile pattern."""
    return _default_validator.validate(number)
