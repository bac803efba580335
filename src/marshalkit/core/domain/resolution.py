"""
Resolution outcomes - Found / Absent, and the per-call missing sentinel.

The sentinel is what a field handler sees when a value could not be resolved.
It is never ``None`` and never equal to any user value: compare with ``is``
or test the type with :func:`is_missing`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


class Missing:
    """
    Marker for "attribute absent".

    A fresh instance is created for every ``marshal_one`` call, so identity
    comparison against it can never collide with a value owned by the source
    object.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


def is_missing(value: Any) -> bool:
    """Return True if ``value`` is a missing sentinel from any call."""
    return isinstance(value, Missing)


@dataclass(frozen=True)
class Found:
    """A value was resolved."""

    value: Any

    def is_found(self) -> bool:
        return True

    def unwrap_or(self, default: Any) -> Any:
        return self.value


@dataclass(frozen=True)
class Absent:
    """Resolution failed; ``segment`` is where traversal stopped."""

    segment: Any = None

    def is_found(self) -> bool:
        return False

    def unwrap_or(self, default: Any) -> Any:
        return default


Resolution = Union[Found, Absent]
