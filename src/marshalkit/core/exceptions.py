"""
Exceptions - Centralized exception hierarchy for marshalkit.

All errors raised by the library derive from MarshalError so callers can
catch everything with a single except clause, while still being able to
distinguish recoverable per-field failures from fatal ones:

- ValidationError: recoverable, recorded per field in the error collection
- FieldSerializationError: fatal, aborts the whole marshal call
- InvalidKeyTypeError: a field's lookup key cannot be resolved at all
- InvalidCollectionError: many mode was given something that is not a collection
- ConfigError: configuration could not be loaded or is invalid
"""

from __future__ import annotations

from typing import Any


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "FieldSerializationError",
    "InvalidCollectionError",
    "InvalidKeyTypeError",
    "MarshalError",
    "ValidationError",
]


class MarshalError(Exception):
    """Base class for all marshalkit errors."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message


# =============================================================================
# Key / Input Errors
# =============================================================================


class InvalidKeyTypeError(MarshalError, TypeError):
    """
    A lookup key is neither an integer index nor a non-empty string path.

    Raised before any object is processed, so no partial result exists.
    """

    def __init__(self, message: str, key: Any = None, cause: BaseException | None = None) -> None:
        super().__init__(message, cause=cause)
        self.key = key


class InvalidCollectionError(MarshalError, TypeError):
    """Many mode was requested for an input that is not a collection of objects."""

    def __init__(
        self,
        message: str,
        value_type: type | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.value_type = value_type


# =============================================================================
# Field Errors
# =============================================================================


class ValidationError(MarshalError):
    """
    Recoverable failure raised by a field handler.

    The marshaller records ``messages`` under the field name and carries on
    with the remaining fields and objects.

    Args:
        messages: A single message, a list of messages, or a mapping of
            nested errors (as produced by a nested marshal call).
        field_name: Name of the field that failed, if known.
        field_value: The offending value, if useful for reporting.
    """

    def __init__(
        self,
        messages: str | list[str] | dict[Any, Any],
        field_name: str | None = None,
        field_value: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        if isinstance(messages, str):
            message = messages
            messages = [messages]
        elif isinstance(messages, dict):
            message = "Nested validation failed"
        else:
            messages = list(messages)
            message = "; ".join(str(m) for m in messages)
        super().__init__(message, cause=cause)
        self.messages = messages
        self.field_name = field_name
        self.field_value = field_value


class FieldSerializationError(MarshalError):
    """
    Fatal failure raised while serializing a field.

    Wraps any exception from a handler that is not a recognized validation
    error. The original exception is kept as ``cause`` and ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        field_name: Any = None,
        index: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.field_name = field_name
        self.index = index


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(MarshalError):
    """Configuration could not be loaded."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.config_path = config_path


class ConfigValidationError(ConfigError):
    """A configuration value is invalid."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        field_value: Any = None,
        config_path: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, config_path=config_path, cause=cause)
        self.field_name = field_name
        self.field_value = field_value
