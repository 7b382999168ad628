"""Tests for segment interference state."""

from turnbuckle.core.models import InterferenceState, Segment
from turnbuckle.core.tables import DEFAULT_STIPULATIONS


class TestInterferenceState:
    def test_starts_at_zero(self):
        assert InterferenceState().level == 0

    def test_never_decreases(self):
        state = InterferenceState()
        state.raise_to(40)
        state.raise_to(10)
        assert state.level == 40
        assert len(state.history) == 1

    def test_capped_at_100(self):
        state = InterferenceState(level=95)
        assert state.raise_to(130) == 100
        assert state.is_maxed


class TestSegment:
    def test_no_dq_follows_stipulation(self):
        assert not Segment().is_no_dq
        assert Segment(stipulation=DEFAULT_STIPULATIONS["No Disqualification"]).is_no_dq

    def test_resolve(self):
        segment = Segment()
        segment.resolve()
        assert segment.is_resolved
