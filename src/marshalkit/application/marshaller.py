"""
Marshaller - Turn source objects into ordered mappings.

For every field in a field specification the marshaller resolves the field's
value on the source object, hands it to the field's handler and stores the
handler's result under the field name.

Error policy:
- A recognized validation error from a handler is recorded under the field
  name; the key is left out of the output and the remaining fields (and
  objects, in many mode) are still processed.
- Any other exception from a handler aborts the whole call with a
  FieldSerializationError chained to the original exception. No partial
  result is returned.
- Invalid lookup keys are rejected before the first object is touched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Set
from dataclasses import dataclass
from typing import Any

from marshalkit.core.domain.keys import DEFAULT_SEPARATOR, LookupKey, parse_key
from marshalkit.core.domain.resolution import Missing
from marshalkit.core.exceptions import (
    ConfigValidationError,
    FieldSerializationError,
    InvalidCollectionError,
    ValidationError,
)
from marshalkit.core.ports.config_provider import MarshalConfig
from marshalkit.core.ports.field_handler import get_check_attribute, get_lookup_attribute
from marshalkit.core.resolver import lookup
from marshalkit.logging import get_logger


__all__ = ["BoundField", "Marshaller", "marshal", "marshal_one"]


ErrorDetail = Any
ObjectErrors = dict[Any, ErrorDetail]


@dataclass(frozen=True)
class BoundField:
    """A field spec entry with its lookup key parsed."""

    name: Any
    handler: Any
    key: LookupKey | None  # None when the handler skips resolution


def error_detail(error: BaseException) -> ErrorDetail:
    """Return what gets recorded for a validation failure."""
    messages = getattr(error, "messages", None)
    if messages is not None:
        return messages
    return [str(error)]


def recognized_errors(
    validation_error: type[BaseException] | tuple[type[BaseException], ...],
) -> tuple[type[BaseException], ...]:
    """Return the exception types recorded as field errors, ValidationError included."""
    types = validation_error if isinstance(validation_error, tuple) else (validation_error,)
    if any(issubclass(ValidationError, error_type) for error_type in types):
        return types
    return (*types, ValidationError)


class Marshaller:
    """
    Marshal objects according to a field specification.

    A Marshaller only holds immutable settings, so one instance can be shared
    between threads as long as the objects and field specs passed to it are
    not mutated concurrently.

    Example:
        >>> marshaller = Marshaller()
        >>> result, errors = marshaller.marshal({"name": "ada"}, {"name": Raw()})
        >>> result
        {'name': 'ada'}
    """

    def __init__(
        self,
        separator: str = DEFAULT_SEPARATOR,
        validation_error: type[BaseException] | tuple[type[BaseException], ...] = ValidationError,
    ) -> None:
        """
        Initialize the marshaller.

        Args:
            separator: Separator between segments of string lookup paths
            validation_error: Exception type(s) treated as recoverable
                per-field failures; lets handlers from another field library
                report validation errors in their own type. marshalkit's own
                ValidationError (raised by Nested, among others) is always
                recognized as well.

        Raises:
            ConfigValidationError: If the separator is empty
        """
        if not separator:
            raise ConfigValidationError(
                "path_separator must not be empty",
                field_name="path_separator",
                field_value=separator,
            )
        self.separator = separator
        self.validation_error = validation_error
        self.recognized_errors = recognized_errors(validation_error)
        self.logger = get_logger("Marshaller")

    @classmethod
    def from_config(cls, config: MarshalConfig, **kwargs: Any) -> Marshaller:
        """Create a marshaller from a MarshalConfig."""
        return cls(separator=config.path_separator, **kwargs)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def bind_fields(self, fields: Mapping[Any, Any]) -> list[BoundField]:
        """
        Parse every field's lookup key up front.

        Raises:
            InvalidKeyTypeError: If any field's lookup key is invalid
        """
        bound = []
        for name, handler in fields.items():
            key = None
            if get_check_attribute(handler):
                key = parse_key(get_lookup_attribute(handler, name), self.separator)
            bound.append(BoundField(name, handler, key))
        return bound

    def marshal_one(self, obj: Any, fields: Mapping[Any, Any]) -> tuple[dict[Any, Any], ObjectErrors]:
        """
        Marshal a single object.

        Returns:
            (output mapping, per-field errors)

        Raises:
            InvalidKeyTypeError: If a field's lookup key is invalid
            FieldSerializationError: If a handler fails unexpectedly
        """
        return self._marshal_bound(obj, self.bind_fields(fields))

    def marshal(
        self,
        obj: Any,
        fields: Mapping[Any, Any],
        many: bool = False,
    ) -> tuple[Any, dict[Any, Any]]:
        """
        Marshal one object, or each object of a collection.

        Args:
            obj: The source object, or a collection of them when ``many``
            fields: Mapping of field name to handler, in output order
            many: Treat ``obj`` as an ordered collection of source objects

        Returns:
            (result, errors). With ``many`` the result is a list with one
            mapping per input object, in input order, and errors maps the
            index of each failing object to its per-field errors.

        Raises:
            InvalidKeyTypeError: If a field's lookup key is invalid
            InvalidCollectionError: If ``many`` is set and ``obj`` is not a collection
            FieldSerializationError: If a handler fails unexpectedly
        """
        bound = self.bind_fields(fields)

        if not many:
            return self._marshal_bound(obj, bound)

        items = self._as_collection(obj)
        results: list[dict[Any, Any]] = []
        errors: dict[int, ObjectErrors] = {}

        for index, item in enumerate(items):
            result, item_errors = self._marshal_bound(item, bound, index=index)
            results.append(result)
            if item_errors:
                errors[index] = item_errors

        if errors:
            self.logger.debug(
                "Marshalled %d objects, %d with field errors",
                len(results),
                len(errors),
            )
        return results, errors

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _as_collection(self, obj: Any) -> list[Any]:
        # sets are rejected: their order is arbitrary
        if isinstance(obj, (str, bytes, bytearray, Mapping, Set)) or not isinstance(obj, Iterable):
            raise InvalidCollectionError(
                f"many=True requires an ordered collection of objects, got {type(obj).__name__}",
                value_type=type(obj),
            )
        return list(obj)

    def _marshal_bound(
        self,
        obj: Any,
        bound: list[BoundField],
        index: int | None = None,
    ) -> tuple[dict[Any, Any], ObjectErrors]:
        missing = Missing()
        result: dict[Any, Any] = {}
        errors: ObjectErrors = {}

        for field in bound:
            value = missing
            if field.key is not None:
                value = lookup(field.key, obj, self.separator).unwrap_or(missing)

            try:
                serialized = field.handler.serialize(value, field.name, obj)
            except self.recognized_errors as e:
                errors[field.name] = error_detail(e)
                self.logger.debug(
                    "Validation failed for field %r: %s",
                    field.name,
                    e,
                    extra={"field": str(field.name), "index": index},
                )
                continue
            except Exception as e:
                location = f"field {field.name!r}" if index is None else f"field {field.name!r} of item {index}"
                self.logger.error(
                    "Unexpected failure serializing %s: %s",
                    location,
                    e,
                    extra={"field": str(field.name), "index": index},
                )
                raise FieldSerializationError(
                    f"Failed to serialize {location}",
                    field_name=field.name,
                    index=index,
                    cause=e,
                ) from e

            result[field.name] = serialized

        return result, errors


def marshal(
    obj: Any,
    fields: Mapping[Any, Any],
    many: bool = False,
    validation_error: type[BaseException] | tuple[type[BaseException], ...] = ValidationError,
) -> tuple[Any, dict[Any, Any]]:
    """Marshal with a default Marshaller. See Marshaller.marshal."""
    return Marshaller(validation_error=validation_error).marshal(obj, fields, many=many)


def marshal_one(
    obj: Any,
    fields: Mapping[Any, Any],
    validation_error: type[BaseException] | tuple[type[BaseException], ...] = ValidationError,
) -> tuple[dict[Any, Any], ObjectErrors]:
    """Marshal a single object with a default Marshaller. See Marshaller.marshal_one."""
    return Marshaller(validation_error=validation_error).marshal_one(obj, fields)
