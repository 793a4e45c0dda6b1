# jsontree/services/navigator.py
from typing import Any, Dict, List, Optional, Sequence, Union

from jsontree.errors import KeyNotFoundError

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]
JsonObject = Dict[str, JsonValue]


def navigate(document: JsonValue, key_path: Sequence[str], path: Optional[str] = None) -> JsonValue:
    """
    Walk `document` through `key_path`, one object field per segment.
    Arrays and scalars are not indexable: a segment that lands on one fails.
    """
    current = document
    for depth, key in enumerate(key_path):
        if not isinstance(current, dict) or key not in current:
            raise KeyNotFoundError(key, depth, path)
        current = current[key]
    return current
