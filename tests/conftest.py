"""
Shared pytest fixtures for the marshalkit test suite.

Fixture Categories:
- Sources: dict-like, object-like and mixed source objects
- Handlers: small FieldHandler implementations used across modules
- Marshaller: a default Marshaller instance
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

from marshalkit import Marshaller, ValidationError, is_missing


# =============================================================================
# Sources
# =============================================================================


@dataclass
class Address:
    """Object-style nested source."""

    city: str
    country: str = "UK"


@dataclass
class Person:
    """Object-style source."""

    name: str
    age: int | None = None
    address: Address | None = None
    tags: list[str] = field(default_factory=list)


@pytest.fixture
def person() -> Person:
    return Person(name="ada", age=36, address=Address(city="London"), tags=["math", "poetry"])


@pytest.fixture
def person_dict() -> dict[str, Any]:
    return {"name": "ada", "age": 36, "address": {"city": "London", "country": "UK"}}


@pytest.fixture
def mixed_source() -> dict[str, Any]:
    """A dict holding an object holding a dict."""
    return {"owner": Person(name="ada", address={"city": "London"})}  # type: ignore[arg-type]


# =============================================================================
# Handlers
# =============================================================================


class IdentityHandler:
    """Return the resolved value as-is (including the missing sentinel)."""

    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        return value


class UpperHandler:
    """Upper-case strings."""

    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        return value.upper()


class RequiredHandler:
    """Reject missing values with a ValidationError, otherwise pass through."""

    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        if is_missing(value):
            raise ValidationError("Missing data for required field.", field_name=field_name)
        return value


class ExplodingHandler:
    """Fail with an error that is not a validation error."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RuntimeError("handler is broken")

    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        raise self.error


class RecordingHandler:
    """Remember every call; returns the value."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any, Any]] = []

    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        self.calls.append((value, field_name, source_object))
        return value


@pytest.fixture
def identity_handler() -> IdentityHandler:
    return IdentityHandler()


@pytest.fixture
def upper_handler() -> UpperHandler:
    return UpperHandler()


@pytest.fixture
def required_handler() -> RequiredHandler:
    return RequiredHandler()


@pytest.fixture
def exploding_handler() -> ExplodingHandler:
    return ExplodingHandler()


@pytest.fixture
def recording_handler() -> RecordingHandler:
    return RecordingHandler()


# =============================================================================
# Marshaller
# =============================================================================


@pytest.fixture
def marshaller() -> Marshaller:
    return Marshaller()


@pytest.fixture(autouse=True)
def reset_root_logging():
    """Drop root handlers added by a test and restore the root level."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
