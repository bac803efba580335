"""
Field Handler Port - Abstract interface for per-field serialization.

The marshaller never looks inside a handler. It only needs:

- serialize(value, field_name, source_object): required
- attribute: optional lookup key overriding the field name
- check_attribute: optional, False skips resolution entirely

Any object with a compatible ``serialize`` method works; subclassing
FieldHandlerPort is a convenience, not a requirement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


__all__ = ["FieldHandlerPort", "get_check_attribute", "get_lookup_attribute"]


class FieldHandlerPort(ABC):
    """
    Abstract interface for field handlers.

    Handlers turn a resolved raw value into its serialized form. A handler
    signals a recoverable problem by raising the marshaller's validation
    error type (``marshalkit.ValidationError`` by default); anything else it
    raises aborts the marshal call.
    """

    #: Alternate lookup key; None means "use the field name".
    attribute: Any = None

    #: When False the value is not resolved and the handler gets the sentinel.
    check_attribute: bool = True

    @abstractmethod
    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        """
        Serialize one resolved value.

        Args:
            value: The resolved value, or a Missing sentinel if absent
            field_name: Output key of the field being serialized
            source_object: The object being marshalled (read-only)

        Returns:
            The serialized value

        Raises:
            ValidationError: If the value is not acceptable
        """
        ...


def get_lookup_attribute(handler: Any, field_name: Any) -> Any:
    """Return the key used to resolve ``handler``'s value."""
    attribute = getattr(handler, "attribute", None)
    return field_name if attribute is None else attribute


def get_check_attribute(handler: Any) -> bool:
    """Return whether the marshaller should resolve a value for ``handler``."""
    return bool(getattr(handler, "check_attribute", True))
