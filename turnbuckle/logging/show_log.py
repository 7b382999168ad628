"""In-memory show log built from dispatched domain events."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID

from turnbuckle.events import (
    AlignmentShiftEvent,
    DomainEvent,
    EventBus,
    FanAwardedEvent,
    HeatChangeEvent,
    InboxItemEvent,
    InterferenceEvent,
    TitleChangeEvent,
    WrestlerInjuryEvent,
)


@dataclass
class LogEntry:
    """Single entry in the show log."""

    timestamp: datetime
    event_type: str  # "FANS", "HEAT", "INJURY", "TITLE", "INTERFERENCE", "ALIGNMENT", "INBOX"
    description: str
    match_id: Optional[UUID] = None


@dataclass
class ShowLog:
    """
    Accumulates a readable record of a show.

    Subscribe it to an EventBus with attach(); every event the booking
    service dispatches then lands here as a LogEntry. Fan totals are kept
    per wrestler for the end-of-show summary.
    """

    name: str = "Show"
    entries: list[LogEntry] = field(default_factory=list)
    fan_totals: dict[UUID, int] = field(default_factory=dict)
    wrestler_names: dict[UUID, str] = field(default_factory=dict)

    def attach(self, bus: EventBus) -> None:
        bus.subscribe_all(self.on_event)

    def detach(self, bus: EventBus) -> None:
        bus.unsubscribe_all(self.on_event)

    def on_event(self, event: DomainEvent) -> None:
        if isinstance(event, FanAwardedEvent):
            self.fan_totals[event.wrestler_id] = self.fan_totals.get(event.wrestler_id, 0) + event.amount
            self.wrestler_names[event.wrestler_id] = event.wrestler_name
            self._add(event, "FANS", f"{event.wrestler_name} {event.amount:+,} fans ({event.reason})")
        elif isinstance(event, HeatChangeEvent):
            self._add(event, "HEAT", f"Heat {event.delta:+d} -> {event.heat_after}: {event.reason}")
        elif isinstance(event, WrestlerInjuryEvent):
            self._add(event, "INJURY", f"{event.wrestler_name} injured: {event.injury_name} ({event.severity})")
        elif isinstance(event, TitleChangeEvent):
            self._add(event, "TITLE", f"{event.title_name} changed hands")
        elif isinstance(event, InterferenceEvent):
            self._add(event, "INTERFERENCE", event.message)
        elif isinstance(event, AlignmentShiftEvent):
            self._add(
                event, "ALIGNMENT",
                f"{event.alignment_before} {event.level_before} -> {event.alignment_after} {event.level_after}",
            )
        elif isinstance(event, InboxItemEvent):
            self._add(event, "INBOX", f"{event.title}: {event.message}")

    def _add(self, event: DomainEvent, event_type: str, description: str) -> None:
        self.entries.append(LogEntry(
            timestamp=event.timestamp,
            event_type=event_type,
            description=description,
            match_id=event.match_id,
        ))

    def entries_of(self, event_type: str) -> list[LogEntry]:
        return [e for e in self.entries if e.event_type == event_type]

    def summary(self) -> str:
        lines = [f"=== {self.name} ==="]
        lines.extend(f"[{e.event_type}] {e.description}" for e in self.entries)
        if self.fan_totals:
            lines.append("--- Fan totals ---")
            for wrestler_id, total in sorted(self.fan_totals.items(), key=lambda kv: -kv[1]):
                lines.append(f"{self.wrestler_names[wrestler_id]}: {total:+,}")
        return "\n".join(lines)
