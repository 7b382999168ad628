"""Persistence collaborator interface."""

from typing import Iterable, Protocol, TypeVar, runtime_checkable
from uuid import UUID


class Versioned(Protocol):
    """Anything the store can hold: an id and a version counter."""

    id: UUID
    version: int


E = TypeVar("E", bound=Versioned)


@runtime_checkable
class Repository(Protocol):
    """
    Load and save booking aggregates by id.

    Implementations enforce optimistic concurrency: save() must refuse an
    entity whose expected version no longer matches the stored one.
    """

    def add(self, entity: Versioned) -> None:
        ...

    def get(self, kind: type[E], entity_id: UUID) -> E:
        ...

    def save(self, entity: Versioned, expected_version: int) -> None:
        ...

    def save_all(self, entities: Iterable[Versioned]) -> None:
        ...

    def all(self, kind: type[E]) -> Iterable[E]:
        ...
