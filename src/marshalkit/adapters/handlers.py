"""
Reference Handlers - Small FieldHandlerPort implementations.

These cover the common cases of passing a value through, computing it with a
function and marshalling a nested object. Real field libraries plug in their
own handlers; the marshaller does not depend on anything here.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from marshalkit.core.domain.resolution import is_missing
from marshalkit.core.exceptions import ValidationError
from marshalkit.core.ports.field_handler import FieldHandlerPort


if TYPE_CHECKING:
    from marshalkit.application.marshaller import Marshaller


__all__ = ["Field", "Function", "Nested", "Raw"]


class _NoDefault:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<no default>"


NO_DEFAULT = _NoDefault()


class Field(FieldHandlerPort):
    """
    Base handler with a missing-value policy.

    When the resolved value is missing, ``default`` is returned if one was
    given (callables are called), a ValidationError is raised if the field is
    ``required``, and None is returned otherwise. Present values go through
    :meth:`_format`.
    """

    default_error_messages = {
        "required": "Missing data for required field.",
    }

    def __init__(
        self,
        attribute: Any = None,
        required: bool = False,
        default: Any = NO_DEFAULT,
    ) -> None:
        self.attribute = attribute
        self.required = required
        self.default = default

    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        if is_missing(value):
            if self.default is not NO_DEFAULT:
                return self.default() if callable(self.default) else self.default
            if self.required:
                raise ValidationError(self.default_error_messages["required"], field_name=field_name)
            return None
        return self._format(value, field_name, source_object)

    def _format(self, value: Any, field_name: Any, source_object: Any) -> Any:
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(attribute={self.attribute!r}, required={self.required})>"


class Raw(Field):
    """Pass the resolved value through unchanged."""


class Function(Field):
    """
    Serialize with a plain function.

    With ``check_attribute=False`` nothing is resolved and ``func`` receives
    the whole source object, which makes computed fields possible. Exceptions
    raised by ``func`` are not caught here; anything other than a
    ValidationError aborts the marshal call.
    """

    def __init__(
        self,
        func: Callable[[Any], Any],
        attribute: Any = None,
        check_attribute: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(attribute=attribute, **kwargs)
        self.func = func
        self.check_attribute = check_attribute

    def serialize(self, value: Any, field_name: Any, source_object: Any) -> Any:
        if not self.check_attribute:
            return self.func(source_object)
        return super().serialize(value, field_name, source_object)

    def _format(self, value: Any, field_name: Any, source_object: Any) -> Any:
        return self.func(value)


class Nested(Field):
    """
    Marshal the resolved value with its own field specification.

    Errors from the nested call are re-raised as a single ValidationError
    whose ``messages`` is the nested error collection, so they show up under
    this field's name in the parent's errors.
    """

    def __init__(
        self,
        fields: Mapping[Any, Any],
        many: bool = False,
        marshaller: Marshaller | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.fields = fields
        self.many = many
        self.marshaller = marshaller

    def _get_marshaller(self) -> Marshaller:
        if self.marshaller is None:
            from marshalkit.application.marshaller import Marshaller

            self.marshaller = Marshaller()
        return self.marshaller

    def _format(self, value: Any, field_name: Any, source_object: Any) -> Any:
        if value is None:
            return None
        result, errors = self._get_marshaller().marshal(value, self.fields, many=self.many)
        if errors:
            raise ValidationError(errors, field_name=field_name, field_value=value)
        return result
