"""Membership controller - serialized join/quit against an activity repository."""

import logging
import threading
import weakref
from collections.abc import Callable
from dataclasses import dataclass

from .core.activities import Event, Series
from .core.membership import MembershipError, entity_kind, join_entity, quit_entity
from .ports.activity_repo import ActivityRepository

logger = logging.getLogger(__name__)


@dataclass
class MembershipResult:
    """Outcome of a join or quit.

    On success `entity` is the saved entity. On rejection `error` says why and
    `entity` is the unchanged stored entity.
    """

    entity: Event | Series
    error: MembershipError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MembershipController:
    """
    Applies join/quit transitions and persists them.

    Writes are serialized per entity: the stored entity is re-read, checked and
    saved while holding that entity's lock, so concurrent joins can never push
    participants past max_participants. Different entities never block each
    other. A lock lives only while some caller holds it.
    """

    def __init__(self, repository: ActivityRepository):
        self.repository = repository
        self._locks: weakref.WeakValueDictionary[tuple[str, str], threading.Lock] = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    def _lock_for(self, entity: Event | Series) -> threading.Lock:
        key = (entity_kind(entity), entity.id)
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _load(self, entity: Event | Series) -> Event | Series:
        if isinstance(entity, Series):
            return self.repository.get_series(entity.id)
        return self.repository.get_event(entity.id)

    def _save(self, entity: Event | Series) -> None:
        if isinstance(entity, Series):
            self.repository.save_series(entity)
        else:
            self.repository.save_event(entity)

    def _apply(
        self,
        entity: Event | Series,
        user_id: str,
        transition: Callable[[Event | Series, str], Event | Series],
    ) -> MembershipResult:
        with self._lock_for(entity):
            current = self._load(entity)
            try:
                updated = transition(current, user_id)
            except MembershipError as e:
                logger.info(f"Rejected {transition.__name__} on {e.kind} {e.entity_id}: {type(e).__name__}")
                return MembershipResult(entity=current, error=e)
            self._save(updated)

        logger.info(
            f"{transition.__name__}: user {user_id} on {entity_kind(updated)} {updated.id} "
            f"({len(updated.participants)}/{updated.max_participants})"
        )
        return MembershipResult(entity=updated)

    def join(self, entity: Event | Series, user_id: str) -> MembershipResult:
        """Add user_id to the entity's participants if it is not a member and there is room."""
        return self._apply(entity, user_id, join_entity)

    def quit(self, entity: Event | Series, user_id: str) -> MembershipResult:
        """Remove user_id from the entity's participants. Owners cannot quit."""
        return self._apply(entity, user_id, quit_entity)
