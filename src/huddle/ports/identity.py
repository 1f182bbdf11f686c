"""Current-user identity interface."""

from typing import Protocol


class IdentityProvider(Protocol):
    """Interface for finding out who is acting."""

    def current_user_id(self) -> str | None:
        """Identifier of the signed-in user, or None if nobody is signed in."""
        ...
