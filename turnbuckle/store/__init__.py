"""Persistence collaborators."""

from turnbuckle.store.base import Repository, Versioned
from turnbuckle.store.memory import InMemoryRepository

__all__ = ["InMemoryRepository", "Repository", "Versioned"]
