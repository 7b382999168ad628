"""Tests for the Rivalry model and intensity bands."""

from datetime import datetime, timedelta

import pytest

from turnbuckle.core.enums import RivalryIntensity
from turnbuckle.core.models import Rivalry, Wrestler


class TestRivalryIntensity:
    @pytest.mark.parametrize("heat,intensity", [
        (0, RivalryIntensity.SIMMERING),
        (9, RivalryIntensity.SIMMERING),
        (10, RivalryIntensity.HEATED),
        (19, RivalryIntensity.HEATED),
        (20, RivalryIntensity.INTENSE),
        (29, RivalryIntensity.INTENSE),
        (30, RivalryIntensity.EXPLOSIVE),
        (100, RivalryIntensity.EXPLOSIVE),
        (-5, RivalryIntensity.SIMMERING),
    ])
    def test_from_heat(self, heat, intensity):
        assert RivalryIntensity.from_heat(heat) == intensity

    def test_display(self):
        assert RivalryIntensity.HEATED.display_name == "Heated"
        assert RivalryIntensity.HEATED.emoji == "🔥"
        assert RivalryIntensity.SIMMERING.range_display == "0-9 heat"
        assert RivalryIntensity.EXPLOSIVE.range_display == "30+ heat"
        assert RivalryIntensity.INTENSE.description == "Can attempt resolution"


class TestDerivedFlags:
    @pytest.mark.parametrize("heat,match,resolution,stipulation", [
        (9, False, False, False),
        (10, True, False, False),
        (20, True, True, False),
        (30, True, True, True),
    ])
    def test_thresholds(self, rivalry, heat, match, resolution, stipulation):
        rivalry.apply_heat(heat, "setup")
        assert rivalry.requires_match is match
        assert rivalry.eligible_for_resolution is resolution
        assert rivalry.requires_stipulation_match is stipulation

    def test_flags_off_when_inactive(self, rivalry):
        rivalry.apply_heat(35, "brawl")
        rivalry.end("Storyline concluded")
        assert not rivalry.requires_match
        assert not rivalry.eligible_for_resolution
        assert not rivalry.requires_stipulation_match


class TestApplyHeat:
    def test_history_records_each_change(self, rivalry):
        rivalry.apply_heat(10, "Backstage attack")
        rivalry.apply_heat(-3, "Apology")
        assert rivalry.heat == 7
        assert [e.heat_change for e in rivalry.heat_events] == [10, -3]
        assert rivalry.heat_events[-1].heat_after_event == 7
        assert rivalry.heat_events[-1].reason == "Apology"

    def test_floor_clamps_and_records_request(self, rivalry):
        rivalry.apply_heat(3, "Stare down")
        event = rivalry.apply_heat(-10, "Handshake", floor=0)
        assert rivalry.heat == 0
        assert event.heat_change == -3
        assert event.requested_change == -10
        assert event.was_floored

    def test_no_floor_allows_negative(self, rivalry):
        rivalry.apply_heat(-4, "Mutual respect", floor=None)
        assert rivalry.heat == -4


class TestParticipants:
    def test_opponent_of(self, rivalry, main_eventer, icon):
        assert rivalry.opponent_of(main_eventer) is icon
        assert rivalry.opponent_of(icon) is main_eventer

    def test_opponent_of_outsider_raises(self, rivalry):
        with pytest.raises(ValueError, match="not part of this rivalry"):
            rivalry.opponent_of(Wrestler(name="Outsider"))

    def test_is_between_either_order(self, rivalry, main_eventer, icon):
        assert rivalry.is_between(icon, main_eventer)
        assert rivalry.involves(main_eventer)

    def test_display_name(self, rivalry):
        rivalry.apply_heat(15, "Promo battle")
        assert rivalry.display_name == "John Cena vs The Rock (15 heat - Heated)"

    def test_duration_days(self, main_eventer, icon):
        start = datetime(2026, 1, 1)
        rivalry = Rivalry(main_eventer, icon, started_at=start)
        assert rivalry.duration_days(now=start + timedelta(days=12)) == 12
        rivalry.end("done", at=start + timedelta(days=30))
        assert rivalry.duration_days(now=start + timedelta(days=90)) == 30
