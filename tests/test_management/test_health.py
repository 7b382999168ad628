"""Tests for bumps and injuries."""

import random
import uuid

import pytest

from turnbuckle.core.enums import InjurySeverity, WrestlerTier
from turnbuckle.errors import NotFound
from turnbuckle.management.health import (
    apply_bump,
    bump_causes_injury,
    heal_injury,
    roll_severity,
)


class TestBumps:
    def test_first_two_bumps_are_harmless(self, rookie, rng):
        assert apply_bump(rookie, rng) is None
        assert apply_bump(rookie, rng) is None
        assert rookie.bumps == 2
        assert rookie.injuries == []

    def test_third_bump_injures_and_resets(self, rookie, rng):
        apply_bump(rookie, rng)
        apply_bump(rookie, rng)
        injury = apply_bump(rookie, rng)

        assert injury is not None
        assert rookie.bumps == 0
        assert rookie.active_injuries == [injury]
        assert rookie.effective_health < rookie.starting_health

    def test_bump_causes_injury_does_not_mutate(self, rookie):
        rookie.bumps = 2
        assert bump_causes_injury(rookie)
        assert rookie.bumps == 2


class TestSeverity:
    def test_severity_is_always_known(self):
        rng = random.Random(3)
        for tier in WrestlerTier:
            for _ in range(50):
                assert roll_severity(tier, rng) in InjurySeverity


class TestHealing:
    def test_heal_active_injury(self, rookie, rng):
        for _ in range(3):
            apply_bump(rookie, rng)
        injury = rookie.injuries[0]

        healed = heal_injury(rookie, injury.id)

        assert healed is injury
        assert not injury.is_active
        assert rookie.active_injuries == []

    def test_unknown_injury(self, rookie):
        with pytest.raises(NotFound):
            heal_injury(rookie, uuid.uuid4())
