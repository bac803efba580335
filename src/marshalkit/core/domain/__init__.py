"""
Domain - Lookup keys and resolution outcomes.
"""

from .keys import DEFAULT_SEPARATOR, IndexKey, LookupKey, PathKey, parse_key
from .resolution import Absent, Found, Missing, Resolution, is_missing


__all__ = [
    "DEFAULT_SEPARATOR",
    "Absent",
    "Found",
    "IndexKey",
    "LookupKey",
    "Missing",
    "PathKey",
    "Resolution",
    "is_missing",
    "parse_key",
]
