"""Pure membership rules for capacity-bounded, owned activities - no I/O."""

from dataclasses import replace
from enum import Enum
from typing import TypeVar

from .activities import Event, Series

Entity = TypeVar("Entity", Event, Series)


class Role(Enum):
    """A user's relationship to an event or series."""

    OWNER = "owner"
    MEMBER = "member"
    NON_MEMBER = "non_member"


def entity_kind(entity: Event | Series) -> str:
    return "series" if isinstance(entity, Series) else "event"


def role_of(entity: Event | Series, user_id: str) -> Role:
    """Ownership wins over list containment."""
    if user_id == entity.owner_id:
        return Role.OWNER
    if user_id in entity.participants:
        return Role.MEMBER
    return Role.NON_MEMBER


def is_full(entity: Event | Series) -> bool:
    return len(entity.participants) >= entity.max_participants


class MembershipError(Exception):
    """Base class for rejected join/quit transitions."""

    def __init__(self, kind: str, entity_id: str, user_id: str):
        self.kind = kind
        self.entity_id = entity_id
        self.user_id = user_id
        super().__init__(f"{self.__class__.__name__}: user {user_id!r} on {kind} {entity_id!r}")

    @property
    def user_message(self) -> str:
        """Text shown to the user."""
        raise NotImplementedError


class CapacityExceededError(MembershipError):
    @property
    def user_message(self) -> str:
        return f"{self.kind.capitalize()} is full. Cannot join."


class AlreadyMemberError(MembershipError):
    @property
    def user_message(self) -> str:
        return f"You already joined this {self.kind}"


class NotAMemberError(MembershipError):
    @property
    def user_message(self) -> str:
        return f"You are not a participant of this {self.kind}"


class OwnerCannotQuitError(MembershipError):
    @property
    def user_message(self) -> str:
        return f"Owners cannot quit the {self.kind}"


def join_entity(entity: Entity, user_id: str) -> Entity:
    """
    Return a copy of the entity with user_id appended to its participants.

    Only a non-member may join, and only while the entity has room. The input
    entity is never modified.

    Raises:
        AlreadyMemberError: user is the owner or already a participant.
        CapacityExceededError: participants already at max_participants.
    """
    kind = entity_kind(entity)
    if role_of(entity, user_id) is not Role.NON_MEMBER:
        raise AlreadyMemberError(kind, entity.id, user_id)
    if is_full(entity):
        raise CapacityExceededError(kind, entity.id, user_id)
    return replace(entity, participants=[*entity.participants, user_id])


def quit_entity(entity: Entity, user_id: str) -> Entity:
    """
    Return a copy of the entity without user_id in its participants.

    Raises:
        OwnerCannotQuitError: user owns the entity.
        NotAMemberError: user is not a participant.
    """
    kind = entity_kind(entity)
    role = role_of(entity, user_id)
    if role is Role.OWNER:
        raise OwnerCannotQuitError(kind, entity.id, user_id)
    if role is Role.NON_MEMBER:
        raise NotAMemberError(kind, entity.id, user_id)
    return replace(entity, participants=[p for p in entity.participants if p != user_id])
