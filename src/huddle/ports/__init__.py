"""Ports - interfaces/protocols for external dependencies."""

from .activity_repo import ActivityNotFoundError, ActivityRepository
from .identity import IdentityProvider

__all__ = [
    "ActivityNotFoundError",
    "ActivityRepository",
    "IdentityProvider",
]
