"""
Core module - Pure marshalling logic with no external dependencies.

This module contains:
- domain/: Lookup keys and resolution outcomes
- ports/: Abstract interfaces that handlers and config sources implement
- resolver: The attribute resolver
- exceptions: Centralized exception hierarchy
"""

from .domain import *
from .exceptions import *
from .ports import *
from .resolver import lookup, resolve
