"""
Lookup Keys - How a field locates its value on a source object.

A lookup key is a tagged variant with two cases:

- IndexKey: an integer, resolved with a single indexed access
- PathKey: one or more string segments, resolved segment by segment
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from marshalkit.core.exceptions import InvalidKeyTypeError


DEFAULT_SEPARATOR = "."


@dataclass(frozen=True)
class IndexKey:
    """Integer key; indexed access is the only strategy."""

    index: int

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class PathKey:
    """Dotted string path, already split into segments."""

    segments: tuple[str, ...]
    separator: str = DEFAULT_SEPARATOR

    def __post_init__(self) -> None:
        if not self.segments or any(not segment for segment in self.segments):
            raise InvalidKeyTypeError(
                f"Lookup path must not be empty or contain empty segments: {str(self)!r}",
                key=str(self),
            )

    @classmethod
    def from_string(cls, path: str, separator: str = DEFAULT_SEPARATOR) -> PathKey:
        return cls(tuple(path.split(separator)), separator)

    def __str__(self) -> str:
        return self.separator.join(self.segments)


LookupKey = Union[IndexKey, PathKey]


def parse_key(raw: Any, separator: str = DEFAULT_SEPARATOR) -> LookupKey:
    """
    Build a LookupKey from a raw field key.

    Already-parsed keys are returned unchanged. ``bool`` is rejected even
    though it is an ``int`` subclass, since ``obj[True]`` is never what a
    field declaration means.

    Raises:
        InvalidKeyTypeError: If ``raw`` is neither an int nor a non-empty str.
    """
    if isinstance(raw, (IndexKey, PathKey)):
        return raw
    if isinstance(raw, bool):
        raise InvalidKeyTypeError(f"Lookup key must be int or str, not bool: {raw!r}", key=raw)
    if isinstance(raw, int):
        return IndexKey(raw)
    if isinstance(raw, str):
        return PathKey.from_string(raw, separator)
    raise InvalidKeyTypeError(
        f"Lookup key must be int or str, not {type(raw).__name__}: {raw!r}",
        key=raw,
    )
