"""Ports - interfaces/protocols for external dependencies."""

from .backend import BackendAdapter

__all__ = [
    "BackendAdapter",
]
