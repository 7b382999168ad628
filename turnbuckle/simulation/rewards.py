"""Post-match rewards: fan swings, bumps and injuries.

Everything here computes event values for a finished match. Wrestlers
are read, never modified; the booking layer applies the events.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from turnbuckle.core.enums import BumpRule
from turnbuckle.core.models import MatchResult, Wrestler
from turnbuckle.events.types import (
    DomainEvent,
    FanAwardedEvent,
    WrestlerBumpEvent,
    WrestlerInjuryEvent,
)
from turnbuckle.management.health import bump_causes_injury, roll_injury
from turnbuckle.simulation.variance import roll_dice

logger = logging.getLogger(__name__)


# (minimum rating, bonus fans), checked top down
QUALITY_BONUS_TABLE: tuple[tuple[float, int], ...] = (
    (5.0, 10_000),
    (4.5, 5_000),
    (4.0, 3_000),
    (3.0, 1_000),
)


@dataclass(frozen=True)
class RewardRules:
    """Dice rules for fan swings. Fans = (dice + modifier) * unit."""

    winner_dice: tuple[int, int] = (2, 6)
    winner_modifier: int = 3
    loser_dice: tuple[int, int] = (1, 6)
    loser_modifier: int = -4
    unit: int = 1_000
    difficulty_multiplier: float = 1.0


DEFAULT_REWARD_RULES = RewardRules()


def quality_bonus(rating: float) -> int:
    """Bonus fans every participant earns for a good match."""
    for minimum, bonus in QUALITY_BONUS_TABLE:
        if rating >= minimum:
            return bonus
    return 0


def roll_fan_swing(
    is_winner: bool,
    rating: float,
    rng: random.Random,
    rules: RewardRules = DEFAULT_REWARD_RULES,
) -> int:
    """Fans won (or lost, for a bad loss) by one participant."""
    if is_winner:
        count, sides = rules.winner_dice
        base = (roll_dice(rng, count, sides) + rules.winner_modifier) * rules.unit
    else:
        count, sides = rules.loser_dice
        base = (roll_dice(rng, count, sides) + rules.loser_modifier) * rules.unit
    return int((base + quality_bonus(rating)) * rules.difficulty_multiplier)


def _bump_targets(result: MatchResult) -> list[Wrestler]:
    rule = result.stipulation.bump_rule if result.stipulation else BumpRule.NONE
    if rule == BumpRule.WINNERS:
        return result.winners
    if rule == BumpRule.LOSERS:
        return result.losers
    if rule == BumpRule.ALL:
        return result.winners + result.losers
    return []


def build_match_events(
    result: MatchResult,
    rng: random.Random,
    rules: RewardRules = DEFAULT_REWARD_RULES,
    reason: Optional[str] = None,
) -> list[DomainEvent]:
    """
    Compute the side effects of a match as events.

    One FanAwardedEvent per participant, then a WrestlerBumpEvent for each
    wrestler the stipulation bumps, followed by a WrestlerInjuryEvent when
    that bump is the wrestler's third.
    """
    events: list[DomainEvent] = []
    label = reason or f"Match result ({result.rating:.2f} stars)"

    for wrestler in result.winners + result.losers:
        is_winner = result.is_winner(wrestler)
        amount = roll_fan_swing(is_winner, result.rating, rng, rules)
        events.append(FanAwardedEvent(
            match_id=result.id,
            wrestler_id=wrestler.id,
            wrestler_name=wrestler.name,
            amount=amount,
            reason=f"{label}: {'win' if is_winner else 'loss'}",
        ))

    for wrestler in _bump_targets(result):
        events.append(WrestlerBumpEvent(
            match_id=result.id,
            wrestler_id=wrestler.id,
            wrestler_name=wrestler.name,
        ))
        if bump_causes_injury(wrestler):
            injury = roll_injury(wrestler, rng)
            events.append(WrestlerInjuryEvent(
                match_id=result.id,
                wrestler_id=wrestler.id,
                wrestler_name=wrestler.name,
                severity=injury.severity.name,
                injury_name=injury.name,
                health_penalty=injury.severity.health_penalty,
            ))

    logger.debug(f"Match {result.id} produced {len(events)} events")
    return events
