"""Adapters - I/O implementations of ports."""

from .memory_repo import InMemoryActivityRepository
from .json_file_repo import JsonFileActivityRepository
from .static_identity import StaticIdentity

__all__ = [
    "InMemoryActivityRepository",
    "JsonFileActivityRepository",
    "StaticIdentity",
]
