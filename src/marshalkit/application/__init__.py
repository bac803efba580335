"""
Application layer - Marshalling use cases built on the core.
"""

from .marshaller import BoundField, Marshaller, marshal, marshal_one


__all__ = [
    "BoundField",
    "Marshaller",
    "marshal",
    "marshal_one",
]
