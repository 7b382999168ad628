"""Domain events and dispatch."""

from turnbuckle.events.bus import EventBus
from turnbuckle.events.types import (
    AlignmentShiftEvent,
    DomainEvent,
    FanAwardedEvent,
    HeatChangeEvent,
    InboxItemEvent,
    InterferenceEvent,
    TitleChangeEvent,
    WrestlerBumpEvent,
    WrestlerInjuryEvent,
)

__all__ = [
    "AlignmentShiftEvent",
    "DomainEvent",
    "EventBus",
    "FanAwardedEvent",
    "HeatChangeEvent",
    "InboxItemEvent",
    "InterferenceEvent",
    "TitleChangeEvent",
    "WrestlerBumpEvent",
    "WrestlerInjuryEvent",
]
