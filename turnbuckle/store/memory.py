"""In-memory repository with optimistic version checks."""

import copy
import logging
import threading
from collections import defaultdict
from typing import Iterable
from uuid import UUID

from turnbuckle.errors import ConcurrentModification, NotFound
from turnbuckle.store.base import E, Versioned

logger = logging.getLogger(__name__)


class InMemoryRepository:
    """
    Dictionary-backed store keyed by entity type and id.

    Every get() hands out a copy, so two callers editing the same
    aggregate really do race; the loser's save() raises
    ConcurrentModification instead of silently overwriting.
    """

    def __init__(self) -> None:
        self._entities: dict[type, dict[UUID, Versioned]] = defaultdict(dict)
        self._lock = threading.Lock()

    def add(self, entity: Versioned) -> None:
        with self._lock:
            self._entities[type(entity)][entity.id] = copy.deepcopy(entity)

    def get(self, kind: type[E], entity_id: UUID) -> E:
        with self._lock:
            try:
                return copy.deepcopy(self._entities[kind][entity_id])
            except KeyError:
                raise NotFound(kind.__name__, entity_id) from None

    def _check(self, entity: Versioned, expected_version: int) -> None:
        kind = type(entity)
        stored = self._entities[kind].get(entity.id)
        if stored is None:
            raise NotFound(kind.__name__, entity.id)
        if stored.version != expected_version:
            logger.warning(
                f"Stale save of {kind.__name__} {entity.id}: "
                f"expected v{expected_version}, stored v{stored.version}"
            )
            raise ConcurrentModification(kind.__name__, entity.id, expected_version, stored.version)

    def _write(self, entity: Versioned, expected_version: int) -> None:
        entity.version = expected_version + 1
        self._entities[type(entity)][entity.id] = copy.deepcopy(entity)

    def save(self, entity: Versioned, expected_version: int) -> None:
        """
        Store an entity if nobody else saved it since it was loaded.

        On success the entity's version is bumped.

        Raises:
            NotFound: If the entity was never added
            ConcurrentModification: If the stored version moved on
        """
        with self._lock:
            self._check(entity, expected_version)
            self._write(entity, expected_version)

    def save_all(self, entities: Iterable[Versioned]) -> None:
        """
        Store a batch of loaded entities, all or nothing.

        Each entity's own version is the expected one. Every version is
        checked before anything is written, so one stale entity leaves
        the whole batch (and the store) untouched.
        """
        entities = list(entities)
        with self._lock:
            for entity in entities:
                self._check(entity, entity.version)
            for entity in entities:
                self._write(entity, entity.version)

    def all(self, kind: type[E]) -> Iterable[E]:
        with self._lock:
            return [copy.deepcopy(e) for e in self._entities[kind].values()]

    def count(self, kind: type) -> int:
        return len(self._entities[kind])
