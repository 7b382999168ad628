"""Domain events emitted by the booking engine.

Engines return these as plain values. Nothing here dispatches itself;
the caller hands them to an EventBus once its own work is committed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class DomainEvent:
    """Base class for all domain events."""

    timestamp: datetime = field(default_factory=datetime.now)
    match_id: Optional[UUID] = None

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        data = {"event_type": self.event_type}
        for key, value in self.__dict__.items():
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, list):
                value = [str(v) if isinstance(v, UUID) else v for v in value]
            data[key] = value
        return data


@dataclass
class FanAwardedEvent(DomainEvent):
    """Fired when a wrestler gains (or loses) fans."""

    wrestler_id: UUID = None
    wrestler_name: str = ""
    amount: int = 0  # negative for a loss
    reason: str = ""


@dataclass
class HeatChangeEvent(DomainEvent):
    """Fired when a rivalry's heat moves."""

    rivalry_id: UUID = None
    wrestler_ids: list[UUID] = field(default_factory=list)
    delta: int = 0
    heat_before: int = 0
    heat_after: int = 0
    reason: str = ""


@dataclass
class WrestlerBumpEvent(DomainEvent):
    """Fired when a stipulation gives a wrestler a bump."""

    wrestler_id: UUID = None
    wrestler_name: str = ""


@dataclass
class WrestlerInjuryEvent(DomainEvent):
    """Fired when a wrestler's bumps turn into an injury."""

    wrestler_id: UUID = None
    wrestler_name: str = ""
    severity: str = ""
    injury_name: str = ""
    health_penalty: int = 0


@dataclass
class TitleChangeEvent(DomainEvent):
    """Fired when a title changes hands or is vacated."""

    title_id: UUID = None
    title_name: str = ""
    new_champion_id: Optional[UUID] = None  # None when vacated
    previous_champion_id: Optional[UUID] = None
    reign_number: int = 0


@dataclass
class InterferenceEvent(DomainEvent):
    """Fired when someone interferes in a segment."""

    segment_id: UUID = None
    interferer_id: UUID = None
    beneficiary_id: UUID = None
    interference_type: str = ""
    success: bool = False
    ejected: bool = False
    disqualified: bool = False
    awareness_after: int = 0
    message: str = ""


@dataclass
class InboxItemEvent(DomainEvent):
    """Fired when something should land in the booker's inbox."""

    category: str = ""  # "RIVALRY", "TITLE", "CAMPAIGN", "INJURY", ...
    title: str = ""
    message: str = ""
    wrestler_ids: list[UUID] = field(default_factory=list)


@dataclass
class AlignmentShiftEvent(DomainEvent):
    """Fired when a campaign wrestler's alignment track moves."""

    campaign_id: UUID = None
    wrestler_id: UUID = None
    alignment_before: str = ""
    alignment_after: str = ""
    level_before: int = 0
    level_after: int = 0
    reason: str = ""

    @property
    def turned(self) -> bool:
        return self.alignment_before != self.alignment_after
