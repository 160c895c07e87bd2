"""Dataset path resolution and path-key decoding.

Conditions address dataset fields by dot-separated paths ("person.age") or by
an explicit segment list written as a bracketed literal
("['company', 'person.name']") when a key itself contains dots.
All reads go through find_path(), which never creates missing keys.
"""

import json
from collections.abc import Mapping
from typing import Any, List, Sequence, Union


class _NotFound:
    """Marker for a path that does not resolve. Distinct from None (JSON null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def own_item(container: Any, segment: Any) -> Any:
    """Look up one segment as an own key of a mapping or an index of a list."""
    if isinstance(container, Mapping):
        try:
            if segment in container:
                return container[segment]
        except TypeError:
            # Unhashable segment
            return NOT_FOUND
        if isinstance(segment, int) and not isinstance(segment, bool):
            key = str(segment)
            if key in container:
                return container[key]
        return NOT_FOUND

    if isinstance(container, (list, tuple)):
        index = as_index(segment)
        if index is not None and index < len(container):
            return container[index]

    return NOT_FOUND


def as_index(segment: Any) -> Union[int, None]:
    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        return segment if segment >= 0 else None
    if isinstance(segment, str) and segment.isdigit() and segment.isascii():
        # Canonical form only: "01" is a key, not an index
        if segment == "0" or not segment.startswith("0"):
            return int(segment)
    return None


def split_path(path: str) -> List[str]:
    return path.split(".")


def find_path(obj: Any, path: Any) -> Any:
    """Read the value at `path` inside `obj`.

    Args:
        obj: Nested dict (lists are walked by decimal index)
        path: Dot-separated string or a list/tuple of segments

    Returns:
        The value, or NOT_FOUND if any segment is missing or the
        path is neither a string nor a sequence of segments
    """
    if isinstance(path, str):
        # Fast path: plain key, no traversal
        if "." not in path and isinstance(obj, Mapping) and path in obj:
            return obj[path]
        segments: Sequence[Any] = split_path(path)
    elif isinstance(path, (list, tuple)):
        segments = path
    else:
        return NOT_FOUND

    current = obj
    for segment in segments:
        current = own_item(current, segment)
        if current is NOT_FOUND:
            return NOT_FOUND

    return current


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_key(raw: Any) -> Any:
    """Decode a condition key into a path.

    Single quotes are rewritten to double quotes and the result parsed as
    JSON, so "['a', 'b.c']" yields ["a", "b.c"]. Anything that does not
    parse is returned unchanged and treated as a dot path.
    """
    try:
        return json.loads(raw.replace("'", '"'), parse_constant=_reject_constant)
    except (ValueError, TypeError, AttributeError, RecursionError):
        return raw
