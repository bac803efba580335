"""
Adapters - Concrete implementations of the core ports.

- handlers: reference field handlers (Raw, Function, Nested)
- config: environment and file configuration providers
"""

from .config import EnvironmentConfigProvider, FileConfigProvider
from .handlers import Field, Function, Nested, Raw


__all__ = [
    "EnvironmentConfigProvider",
    "Field",
    "FileConfigProvider",
    "Function",
    "Nested",
    "Raw",
]
