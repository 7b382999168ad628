"""Error types raised by the booking engine.

Every failure a caller can act on has its own class so the presentation
layer can map it to a response without parsing messages.
"""

from typing import Any, Optional


class BookingError(Exception):
    """Base exception for booking engine errors."""
    pass


class InvalidTeamComposition(BookingError):
    """Raised when a match team is empty or overlaps the other side."""
    pass


class NotFound(BookingError):
    """Raised when an entity id does not resolve."""

    def __init__(self, entity: str, entity_id: Any = None, message: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} not found: {entity_id}")


class IneligibleChallenger(BookingError):
    """Raised when a wrestler lacks the fans a title requires."""
    pass


class InsufficientFunds(BookingError):
    """Base for balance shortfalls."""

    def __init__(self, message: str, required: int = 0, available: int = 0):
        super().__init__(message)
        self.required = required
        self.available = available


class InsufficientFans(InsufficientFunds):
    """Raised when a wrestler cannot pay a fan cost."""
    pass


class InsufficientSkillTokens(InsufficientFunds):
    """Raised when a campaign cannot pay a skill token cost."""
    pass


class InvalidStateTransition(BookingError):
    """Raised when an aggregate is asked to move to a state it cannot reach."""
    pass


class AlreadyOwnedUpgrade(BookingError):
    """Raised when a campaign already owns an upgrade (or its type)."""
    pass


class ConcurrentModification(BookingError):
    """Raised when a save is based on a stale version."""

    def __init__(self, entity: str, entity_id: Any, expected: int, actual: int):
        self.entity = entity
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{entity} {entity_id} was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
