"""Tests for the ShowLog subscriber."""

import uuid

import pytest

from turnbuckle.events import (
    AlignmentShiftEvent,
    EventBus,
    FanAwardedEvent,
    HeatChangeEvent,
    InterferenceEvent,
    TitleChangeEvent,
)
from turnbuckle.logging import ShowLog


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


class TestShowLog:
    def test_records_dispatched_events(self, bus):
        log = ShowLog(name="Saturday Night")
        log.attach(bus)
        edge = uuid.uuid4()

        bus.dispatch([
            FanAwardedEvent(wrestler_id=edge, wrestler_name="Edge", amount=7_000, reason="Win"),
            HeatChangeEvent(rivalry_id=uuid.uuid4(), delta=2, heat_after=12, reason="Faced off"),
            TitleChangeEvent(title_id=uuid.uuid4(), title_name="World Championship"),
            InterferenceEvent(message="The weapon slide was successful!"),
        ])

        assert [e.event_type for e in log.entries] == ["FANS", "HEAT", "TITLE", "INTERFERENCE"]
        assert log.entries[0].description == "Edge +7,000 fans (Win)"
        assert log.fan_totals == {edge: 7_000}

    def test_fan_totals_accumulate(self):
        log = ShowLog()
        edge = uuid.uuid4()
        log.on_event(FanAwardedEvent(wrestler_id=edge, wrestler_name="Edge", amount=7_000))
        log.on_event(FanAwardedEvent(wrestler_id=edge, wrestler_name="Edge", amount=-2_000))
        assert log.fan_totals[edge] == 5_000
        assert "Edge: +5,000" in log.summary()

    def test_detach(self, bus):
        log = ShowLog()
        log.attach(bus)
        log.detach(bus)
        bus.emit(FanAwardedEvent(wrestler_id=uuid.uuid4(), amount=1))
        assert log.entries == []

    def test_alignment_shift(self):
        log = ShowLog()
        log.on_event(AlignmentShiftEvent(
            alignment_before="NEUTRAL", alignment_after="FACE", level_before=0, level_after=1,
        ))
        assert log.entries_of("ALIGNMENT")[0].description == "NEUTRAL 0 -> FACE 1"

    def test_summary_header(self):
        assert ShowLog(name="Raw").summary().startswith("=== Raw ===")
