from __future__ import annotations

from typing import Any, List, Optional

from .sanitizer import Sanitizer
from .shapes import extract_items


class ResponseNormalizer:
    """Sanitize an upstream body, then map it to the common result list.

    Sanitization runs first so that attribution never survives in any
    shape, including ones the source tag does not list.
    """

    def __init__(self, sanitizer: Optional[Sanitizer] = None) -> None:
        self.sanitizer = sanitizer or Sanitizer()

    def normalize(self, raw: Any, shape_tag: str) -> List[Any]:
        """Return normalized records, or an empty list if no shape matches.

        Raises:
            ValueError: If ``shape_tag`` is unknown.
        """
        clean = self.sanitizer.sanitize(raw)
        return extract_items(clean, shape_tag)
