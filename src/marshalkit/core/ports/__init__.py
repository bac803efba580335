"""
Ports - Abstract interfaces for external collaborators.

Ports define the contracts that field handlers and configuration sources
must satisfy.
"""

from .config_provider import LOG_FORMATS, LOG_LEVELS, ConfigProviderPort, MarshalConfig
from .field_handler import FieldHandlerPort, get_check_attribute, get_lookup_attribute


__all__ = [
    "LOG_FORMATS",
    "LOG_LEVELS",
    "ConfigProviderPort",
    "FieldHandlerPort",
    "MarshalConfig",
    "get_check_attribute",
    "get_lookup_attribute",
]
