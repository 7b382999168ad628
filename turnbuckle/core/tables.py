"""
Lookup tables for business constants.

Tier thresholds, title economics, interference risks and stipulation rules
live here as immutable tables. Engines take the table they need as a
constructor argument so a league can run with its own numbers.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from turnbuckle.core.enums import Alignment, BumpRule, InjurySeverity, TitleTier, WrestlerTier


# =============================================================================
# Wrestler tiers
# =============================================================================

@dataclass(frozen=True)
class TierBand:
    """Fan range for one wrestler tier."""

    tier: WrestlerTier
    min_fans: int
    max_fans: Optional[int]  # None = open ended
    match_bonus: int

    def contains(self, fans: int) -> bool:
        if fans < self.min_fans:
            return False
        return self.max_fans is None or fans <= self.max_fans

    @property
    def range_display(self) -> str:
        if self.max_fans is None:
            return f"{self.min_fans:,}+ fans"
        return f"{self.min_fans:,} - {self.max_fans:,} fans"


DEFAULT_TIER_BANDS: tuple[TierBand, ...] = (
    TierBand(WrestlerTier.ROOKIE, 0, 24_999, 0),
    TierBand(WrestlerTier.RISER, 25_000, 39_999, 2),
    TierBand(WrestlerTier.CONTENDER, 40_000, 59_999, 4),
    TierBand(WrestlerTier.MIDCARDER, 60_000, 99_999, 6),
    TierBand(WrestlerTier.MAIN_EVENTER, 100_000, 149_999, 8),
    TierBand(WrestlerTier.ICON, 150_000, None, 10),
)


def tier_for_fans(fans: int, bands: tuple[TierBand, ...] = DEFAULT_TIER_BANDS) -> WrestlerTier:
    """Tier for a fan count. Counts below the first band map to the first tier."""
    for band in reversed(bands):
        if fans >= band.min_fans:
            return band.tier
    return bands[0].tier


def band_for_tier(tier: WrestlerTier, bands: tuple[TierBand, ...] = DEFAULT_TIER_BANDS) -> TierBand:
    for band in bands:
        if band.tier is tier:
            return band
    raise KeyError(tier)


def match_bonus_for_fans(fans: int, bands: tuple[TierBand, ...] = DEFAULT_TIER_BANDS) -> int:
    return band_for_tier(tier_for_fans(fans, bands), bands).match_bonus


# =============================================================================
# Title tiers
# =============================================================================

@dataclass(frozen=True)
class TitleTierSpec:
    """Fan requirement and challenge cost for one title tier."""

    required_fans: int
    challenge_cost: int


DEFAULT_TITLE_TIERS: Mapping[TitleTier, TitleTierSpec] = {
    TitleTier.EXTREME: TitleTierSpec(required_fans=25_000, challenge_cost=15_000),
    TitleTier.TAG_TEAM: TitleTierSpec(required_fans=40_000, challenge_cost=15_000),
    TitleTier.INTERTEMPORAL: TitleTierSpec(required_fans=60_000, challenge_cost=15_000),
    TitleTier.WORLD: TitleTierSpec(required_fans=100_000, challenge_cost=15_000),
}


# =============================================================================
# Interference
# =============================================================================

HIGH_RISK_THRESHOLD = 25


@dataclass(frozen=True)
class InterferenceType:
    """A kind of ringside action and its risk profile."""

    key: str
    name: str
    base_risk: int
    increases_awareness: bool = True
    can_cause_dq: bool = True
    power_boost: float = 0.15  # fraction added to beneficiary power on success
    alignment: Alignment = Alignment.HEEL  # which way success pushes a campaign wrestler

    @property
    def is_high_risk(self) -> bool:
        return self.base_risk >= HIGH_RISK_THRESHOLD


LEGAL_ADVICE = InterferenceType(
    "LEGAL_ADVICE", "shouted advice", 0,
    increases_awareness=False, can_cause_dq=False, power_boost=0.05,
    alignment=Alignment.FACE,
)
DISTRACTION = InterferenceType("DISTRACTION", "distraction", 10, can_cause_dq=False, power_boost=0.10)
CHEAP_SHOT = InterferenceType("CHEAP_SHOT", "cheap shot", 20, power_boost=0.20)
WEAPON_SLIDE = InterferenceType("WEAPON_SLIDE", "weapon slide", 30, power_boost=0.30)
FULL_ASSAULT = InterferenceType("FULL_ASSAULT", "full assault", 45, power_boost=0.45)

DEFAULT_INTERFERENCE_TYPES: Mapping[str, InterferenceType] = {
    t.key: t for t in (LEGAL_ADVICE, DISTRACTION, CHEAP_SHOT, WEAPON_SLIDE, FULL_ASSAULT)
}


# =============================================================================
# Stipulations
# =============================================================================

@dataclass(frozen=True)
class Stipulation:
    """Special match rule attached to a match."""

    name: str
    bump_rule: BumpRule = BumpRule.NONE
    no_dq: bool = False
    rating_bonus: float = 0.5

    @property
    def is_standard(self) -> bool:
        return self.name == STANDARD_MATCH.name


STANDARD_MATCH = Stipulation("Standard Match", rating_bonus=0.0)

DEFAULT_STIPULATIONS: Mapping[str, Stipulation] = {
    s.name: s
    for s in (
        STANDARD_MATCH,
        Stipulation("No Disqualification", BumpRule.LOSERS, no_dq=True),
        Stipulation("Steel Cage", BumpRule.ALL, rating_bonus=0.75),
        Stipulation("Ladder Match", BumpRule.ALL, rating_bonus=0.75),
        Stipulation("Last Man Standing", BumpRule.LOSERS, no_dq=True),
        Stipulation("Submission Match", BumpRule.LOSERS, rating_bonus=0.25),
        Stipulation("Hardcore Match", BumpRule.ALL, no_dq=True),
    )
}


# =============================================================================
# Injuries
# =============================================================================

# Upper d100 bounds for MINOR, MODERATE, SEVERE; anything above is CRITICAL.
# Higher tiers work safer and get hurt less badly.
DEFAULT_INJURY_BANDS: Mapping[WrestlerTier, tuple[int, int, int]] = {
    WrestlerTier.ROOKIE: (34, 64, 89),
    WrestlerTier.RISER: (39, 69, 91),
    WrestlerTier.CONTENDER: (44, 74, 93),
    WrestlerTier.MIDCARDER: (54, 79, 95),
    WrestlerTier.MAIN_EVENTER: (59, 84, 96),
    WrestlerTier.ICON: (64, 87, 97),
}


def injury_severity_for_roll(
    tier: WrestlerTier,
    roll: int,
    bands: Mapping[WrestlerTier, tuple[int, int, int]] = DEFAULT_INJURY_BANDS,
) -> InjurySeverity:
    """Map a d100 roll to a severity for a wrestler of the given tier."""
    minor, moderate, severe = bands[tier]
    if roll <= minor:
        return InjurySeverity.MINOR
    if roll <= moderate:
        return InjurySeverity.MODERATE
    if roll <= severe:
        return InjurySeverity.SEVERE
    return InjurySeverity.CRITICAL
