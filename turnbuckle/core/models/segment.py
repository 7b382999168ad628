"""Show segments and their referee-awareness state."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from turnbuckle.core.tables import STANDARD_MATCH, Stipulation

MAX_AWARENESS = 100


@dataclass
class AwarenessChange:
    """Record of one awareness increase."""

    old_level: int
    new_level: int
    cause: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class InterferenceState:
    """
    Referee awareness within one segment.

    The level only ever rises and is capped at 100; once there it stays.
    """

    level: int = 0
    history: list[AwarenessChange] = field(default_factory=list)

    @property
    def is_maxed(self) -> bool:
        return self.level >= MAX_AWARENESS

    def raise_to(self, new_level: int, cause: str = "") -> int:
        """Raise the level. Lower values are ignored. Returns the level after."""
        target = min(MAX_AWARENESS, max(self.level, new_level))
        if target != self.level:
            self.history.append(AwarenessChange(self.level, target, cause))
            self.level = target
        return self.level


@dataclass
class Segment:
    """A match segment on a show card."""

    name: str = "Match"
    id: UUID = field(default_factory=uuid4)
    referee_id: Optional[UUID] = None
    stipulation: Stipulation = STANDARD_MATCH
    is_resolved: bool = False
    interference: InterferenceState = field(default_factory=InterferenceState)
    match_id: Optional[UUID] = None
    version: int = 0

    @property
    def referee_awareness(self) -> int:
        return self.interference.level

    @property
    def is_no_dq(self) -> bool:
        return self.stipulation.no_dq

    def resolve(self, match_id: Optional[UUID] = None) -> None:
        """Close the segment; its interference state is no longer needed."""
        self.is_resolved = True
        self.match_id = match_id
