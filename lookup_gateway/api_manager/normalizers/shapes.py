from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple


@dataclass(frozen=True)
class ShapeMatcher:
    """One accepted upstream JSON nesting.

    ``predicate`` says whether a body has this shape; ``extractor`` pulls the
    result list out of a body for which the predicate holds. Both are pure.
    """

    name: str
    predicate: Callable[[Any], bool]
    extractor: Callable[[Any], List[Any]]

    def match(self, body: Any) -> bool:
        return self.predicate(body)

    def extract(self, body: Any) -> List[Any]:
        return list(self.extractor(body))


def _is_data_result(body: Any) -> bool:
    return (
        isinstance(body, dict)
        and isinstance(body.get("data"), dict)
        and isinstance(body["data"].get("result"), list)
    )


def _is_result(body: Any) -> bool:
    return isinstance(body, dict) and isinstance(body.get("result"), list)


def _is_data(body: Any) -> bool:
    return isinstance(body, dict) and isinstance(body.get("data"), list)


def _is_bare(body: Any) -> bool:
    return isinstance(body, list)


DATA_RESULT = ShapeMatcher("data_result", _is_data_result, lambda b: b["data"]["result"])
RESULT = ShapeMatcher("result", _is_result, lambda b: b["result"])
DATA = ShapeMatcher("data", _is_data, lambda b: b["data"])
BARE = ShapeMatcher("bare", _is_bare, lambda b: b)

# Shape tag -> matchers tried in priority order
SHAPES_BY_TAG: Dict[str, Tuple[ShapeMatcher, ...]] = {
    "nested_result": (DATA_RESULT, RESULT),
    "generic": (DATA_RESULT, RESULT, DATA, BARE),
    "data": (DATA,),
    "bare": (BARE,),
}


def matchers_for(shape_tag: str) -> Tuple[ShapeMatcher, ...]:
    """Return the ordered matchers for a shape tag.

    Raises:
        ValueError: If the tag is unknown.
    """
    try:
        return SHAPES_BY_TAG[shape_tag]
    except KeyError:
        raise ValueError(f"Unknown response shape: {shape_tag!r}") from None


def extract_items(body: Any, shape_tag: str) -> List[Any]:
    """Return the first matching shape's list, or an empty list."""
    for matcher in matchers_for(shape_tag):
        if matcher.match(body):
            return matcher.extract(body)
    return []
