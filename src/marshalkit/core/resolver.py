"""
Attribute Resolver - Locate a field's value on a source object.

Each path segment is tried as an item first (``obj[segment]``) and then as an
attribute (``getattr(obj, segment)``), so one field specification works for
dict-like and object-like sources alike, and for any mix of the two when
traversing a dotted path.

Resolution never raises for a missing value: it reports Absent (or returns
the caller's default) and leaves it to the field handler to decide whether
absence is an error.

The resolver itself never writes to the source, but item access goes through
the source's own ``__getitem__``. A ``collections.defaultdict`` therefore
inserts and returns its default for an absent key, so the field is Found.
"""

from __future__ import annotations

from typing import Any

from marshalkit.core.domain.keys import DEFAULT_SEPARATOR, IndexKey, PathKey, parse_key
from marshalkit.core.domain.resolution import Absent, Found, Resolution


__all__ = ["lookup", "resolve"]


def _get_segment(current: Any, segment: str) -> Resolution:
    try:
        return Found(current[segment])
    except Exception:
        pass
    try:
        return Found(getattr(current, segment))
    except Exception:
        return Absent(segment)


def lookup(key: Any, obj: Any, separator: str = DEFAULT_SEPARATOR) -> Resolution:
    """
    Resolve ``key`` against ``obj``.

    Args:
        key: An int, a str path, or an already parsed LookupKey
        obj: The source object; it is only read
        separator: Path separator for string keys

    Returns:
        Found(value) on success, Absent(segment) otherwise

    Raises:
        InvalidKeyTypeError: If the key is not a valid LookupKey
    """
    parsed = parse_key(key, separator)

    if isinstance(parsed, IndexKey):
        try:
            return Found(obj[parsed.index])
        except Exception:
            return Absent(parsed.index)

    if isinstance(parsed, PathKey):
        current = obj
        for segment in parsed.segments:
            outcome = _get_segment(current, segment)
            if isinstance(outcome, Absent):
                return outcome
            current = outcome.value
        return Found(current)

    # parse_key only ever returns the two variants above
    raise AssertionError(f"Unhandled lookup key variant: {parsed!r}")


def resolve(key: Any, obj: Any, default: Any, separator: str = DEFAULT_SEPARATOR) -> Any:
    """Resolve ``key`` against ``obj``, returning ``default`` if it is absent."""
    return lookup(key, obj, separator).unwrap_or(default)
