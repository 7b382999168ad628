"""Shared pytest fixtures for turnbuckle tests."""

import random
from datetime import datetime, timedelta

import pytest

from turnbuckle.config import EngineConfig, set_config
from turnbuckle.core.enums import Alignment, MatchType, TitleTier
from turnbuckle.core.models import MatchTeam, Npc, Rivalry, Segment, Title, Wrestler
from turnbuckle.store import InMemoryRepository


# =============================================================================
# Config
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_config():
    """Every test starts from a fresh, seeded configuration."""
    set_config(EngineConfig(seed=1234, heat_floor=0))
    yield
    set_config(None)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 20, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


# =============================================================================
# Wrestler Fixtures
# =============================================================================


@pytest.fixture
def rookie() -> Wrestler:
    """A wrestler fresh out of the training school."""
    return Wrestler(name="Rookie Rick", fans=5_000)


@pytest.fixture
def contender() -> Wrestler:
    return Wrestler(name="Contender Carla", fans=45_000)


@pytest.fixture
def main_eventer() -> Wrestler:
    return Wrestler(name="John Cena", fans=120_000)


@pytest.fixture
def icon() -> Wrestler:
    return Wrestler(name="The Rock", fans=200_000)


@pytest.fixture
def heel_manager() -> Npc:
    """A HEEL manager who loves to get involved."""
    return Npc(name="Paul Heyman", role="Manager", alignment=Alignment.HEEL)


@pytest.fixture
def referee() -> Npc:
    return Npc(name="Earl Hebner", role="Referee", awareness=50)


# =============================================================================
# Booking Fixtures
# =============================================================================


@pytest.fixture
def singles_teams(main_eventer, icon) -> tuple[MatchTeam, MatchTeam]:
    return MatchTeam([main_eventer]), MatchTeam([icon])


@pytest.fixture
def rivalry(main_eventer, icon) -> Rivalry:
    return Rivalry(main_eventer, icon)


@pytest.fixture
def world_title() -> Title:
    return Title(name="World Championship", tier=TitleTier.WORLD)


@pytest.fixture
def segment() -> Segment:
    return Segment(name="Main Event")


@pytest.fixture
def store() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def singles() -> MatchType:
    return MatchType.ONE_ON_ONE
