"""Adapters - I/O implementations of ports."""

from .local_store import LocalBackend
from .google_drive import GoogleDriveBackend

__all__ = [
    "LocalBackend",
    "GoogleDriveBackend",
]
