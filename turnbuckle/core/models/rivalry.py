"""Rivalry model and heat history."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from turnbuckle.core.enums import RivalryIntensity
from turnbuckle.core.models.wrestler import Wrestler

MATCH_REQUIRED_HEAT = 10
RESOLUTION_HEAT = 20
STIPULATION_REQUIRED_HEAT = 30
RESOLUTION_ROLL_TARGET = 30  # total of two d20 must beat this


@dataclass
class HeatEvent:
    """One entry in a rivalry's heat history."""

    heat_change: int  # change actually applied
    reason: str
    heat_after_event: int
    timestamp: datetime = field(default_factory=datetime.now)
    requested_change: Optional[int] = None  # differs from heat_change when floored

    def __post_init__(self):
        if self.requested_change is None:
            self.requested_change = self.heat_change

    @property
    def was_floored(self) -> bool:
        return self.requested_change != self.heat_change


@dataclass
class Rivalry:
    """
    A feud between two wrestlers.

    Heat only moves through apply_heat, and every change lands in the
    history, so heat always equals the sum of applied changes.
    """

    wrestler1: Wrestler
    wrestler2: Wrestler
    heat: int = 0
    is_active: bool = True
    storyline_notes: str = ""
    id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(default_factory=datetime.now)
    ended_at: Optional[datetime] = None
    heat_events: list[HeatEvent] = field(default_factory=list)
    version: int = 0

    # Derived booking state

    @property
    def intensity(self) -> RivalryIntensity:
        return RivalryIntensity.from_heat(self.heat)

    @property
    def requires_match(self) -> bool:
        return self.is_active and self.heat >= MATCH_REQUIRED_HEAT

    @property
    def eligible_for_resolution(self) -> bool:
        return self.is_active and self.heat >= RESOLUTION_HEAT

    @property
    def requires_stipulation_match(self) -> bool:
        return self.is_active and self.heat >= STIPULATION_REQUIRED_HEAT

    # Participants

    def involves(self, wrestler: Wrestler) -> bool:
        return wrestler.id in (self.wrestler1.id, self.wrestler2.id)

    def is_between(self, a: Wrestler, b: Wrestler) -> bool:
        return {a.id, b.id} == {self.wrestler1.id, self.wrestler2.id}

    def opponent_of(self, wrestler: Wrestler) -> Wrestler:
        if wrestler.id == self.wrestler1.id:
            return self.wrestler2
        if wrestler.id == self.wrestler2.id:
            return self.wrestler1
        raise ValueError("Wrestler is not part of this rivalry")

    # Mutation

    def apply_heat(
        self,
        delta: int,
        reason: str,
        at: Optional[datetime] = None,
        floor: Optional[int] = 0,
    ) -> HeatEvent:
        """Apply a heat change and record it. Returns the recorded event."""
        target = self.heat + delta
        if floor is not None:
            target = max(floor, target)
        event = HeatEvent(
            heat_change=target - self.heat,
            requested_change=delta,
            reason=reason,
            heat_after_event=target,
            timestamp=at or datetime.now(),
        )
        self.heat = target
        self.heat_events.append(event)
        return event

    def end(self, reason: str, at: Optional[datetime] = None) -> HeatEvent:
        """End the rivalry, recording the reason in the history."""
        at = at or datetime.now()
        self.is_active = False
        self.ended_at = at
        event = HeatEvent(0, f"Rivalry ended: {reason}", self.heat, at)
        self.heat_events.append(event)
        return event

    def duration_days(self, now: Optional[datetime] = None) -> int:
        end = self.ended_at or now or datetime.now()
        return (end - self.started_at).days

    @property
    def display_name(self) -> str:
        return (
            f"{self.wrestler1.name} vs {self.wrestler2.name} "
            f"({self.heat} heat - {self.intensity.display_name})"
        )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "wrestler1_id": str(self.wrestler1.id),
            "wrestler2_id": str(self.wrestler2.id),
            "heat": self.heat,
            "intensity": self.intensity.name,
            "is_active": self.is_active,
            "requires_match": self.requires_match,
            "eligible_for_resolution": self.eligible_for_resolution,
            "requires_stipulation_match": self.requires_stipulation_match,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "storyline_notes": self.storyline_notes,
            "heat_events": [
                {
                    "heat_change": e.heat_change,
                    "requested_change": e.requested_change,
                    "reason": e.reason,
                    "heat_after_event": e.heat_after_event,
                    "timestamp": e.timestamp.isoformat(),
                }
                for e in self.heat_events
            ],
        }
