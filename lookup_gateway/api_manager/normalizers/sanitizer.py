from __future__ import annotations

import re
from typing import Any, Iterable, Pattern, Sequence, Tuple, Union


DEFAULT_FORBIDDEN_KEYS: Tuple[str, ...] = ("credit", "credits", "source")

# Vendor name plus an optional attribution word in front of it, whole words only
DEFAULT_VENDOR_PATTERNS: Tuple[str, ...] = (
    r"(?<!\w)(?:(?:powered\s+by|via|by|from)\s+)?@?AnshAPI\b",
)


def compile_patterns(patterns: Iterable[Union[str, Pattern[str]]]) -> Tuple[Pattern[str], ...]:
    """Compile vendor patterns case-insensitively. Compiled patterns are kept as-is."""
    compiled = []
    for p in patterns:
        if isinstance(p, str):
            compiled.append(re.compile(p, re.IGNORECASE))
        else:
            compiled.append(p)
    return tuple(compiled)


class Sanitizer:
    """Removes source-attribution from an upstream body.

    The walk is recursive and shape-agnostic: mapping keys listed in
    ``forbidden_keys`` are dropped at any depth, and every string leaf has
    the vendor patterns removed and is trimmed. Numbers, booleans and None
    pass through untouched. The input is never mutated.
    """

    def __init__(
        self,
        forbidden_keys: Sequence[str] = DEFAULT_FORBIDDEN_KEYS,
        vendor_patterns: Iterable[Union[str, Pattern[str]]] = DEFAULT_VENDOR_PATTERNS,
    ) -> None:
        self.forbidden_keys = frozenset(forbidden_keys)
        self.vendor_patterns = compile_patterns(vendor_patterns)

    def sanitize(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: self.sanitize(v)
                for k, v in value.items()
                if k not in self.forbidden_keys
            }
        if isinstance(value, list):
            return [self.sanitize(v) for v in value]
        if isinstance(value, str):
            return self.clean_text(value)
        return value

    def clean_text(self, text: str) -> str:
        for pattern in self.vendor_patterns:
            text = pattern.sub("", text)
        return text.strip()


def sanitize(
    value: Any,
    forbidden_keys: Sequence[str] = DEFAULT_FORBIDDEN_KEYS,
    vendor_patterns: Iterable[Union[str, Pattern[str]]] = DEFAULT_VENDOR_PATTERNS,
) -> Any:
    """Functional shortcut for ``Sanitizer(...).sanitize(value)``."""
    return Sanitizer(forbidden_keys, vendor_patterns).sanitize(value)
