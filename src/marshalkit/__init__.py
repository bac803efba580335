"""
marshalkit - Marshal objects into ordered mappings.

Given a source object and a field specification (field name -> handler),
marshalkit resolves each field's value by item or attribute lookup, lets the
field's handler serialize it and collects validation errors per field
instead of failing the whole object.

Example:
    >>> from marshalkit import Function, Raw, marshal
    >>> fields = {"name": Function(str.upper), "age": Raw(required=True)}
    >>> marshal({"name": "ada"}, fields)
    ({'name': 'ADA'}, {'age': ['Missing data for required field.']})

Architecture:
- core/: Lookup keys, the attribute resolver, ports and exceptions
- application/: The Marshaller
- adapters/: Reference field handlers and configuration providers
"""

__version__ = "0.1.0"

from .adapters import EnvironmentConfigProvider, Field, FileConfigProvider, Function, Nested, Raw
from .application import Marshaller, marshal, marshal_one
from .core import (
    ConfigError,
    ConfigValidationError,
    FieldHandlerPort,
    FieldSerializationError,
    InvalidCollectionError,
    InvalidKeyTypeError,
    MarshalConfig,
    MarshalError,
    Missing,
    ValidationError,
    is_missing,
    lookup,
    resolve,
)


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EnvironmentConfigProvider",
    "Field",
    "FieldHandlerPort",
    "FieldSerializationError",
    "FileConfigProvider",
    "Function",
    "InvalidCollectionError",
    "InvalidKeyTypeError",
    "MarshalConfig",
    "MarshalError",
    "Marshaller",
    "Missing",
    "Nested",
    "Raw",
    "ValidationError",
    "__version__",
    "is_missing",
    "lookup",
    "marshal",
    "marshal_one",
    "resolve",
]
