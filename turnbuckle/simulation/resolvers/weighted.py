"""
Weighted match resolver.

Resolves matches from team power. Each member's power is a base value
plus their tier's match bonus, less wear (bumps and injuries). Team
power discounts each additional member so a handicap side has an edge
without being a lock. Power is then shaken by a bounded variance factor
and the winner is drawn in proportion to the varied power, so underdogs
still win some of the time.
"""

import logging
import random
from dataclasses import dataclass
from statistics import mean
from typing import Optional, Sequence

from turnbuckle.core.enums import MatchFinish, MatchType
from turnbuckle.core.models import MatchResult, MatchTeam, Wrestler
from turnbuckle.core.tables import DEFAULT_TIER_BANDS, STANDARD_MATCH, Stipulation, TierBand
from turnbuckle.errors import InvalidTeamComposition
from turnbuckle.simulation.interference import InterferenceResult
from turnbuckle.simulation.resolvers.base import MatchResolverBase
from turnbuckle.simulation.rewards import DEFAULT_REWARD_RULES, RewardRules, build_match_events
from turnbuckle.simulation.variance import (
    clamp,
    jitter,
    round_to_step,
    variance_factor,
    weighted_index,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverConfig:
    """Tuning constants for the weighted resolver."""

    # Power
    member_base_power: float = 10.0
    member_decay: float = 0.5  # weight of the n-th member is decay ** n
    min_member_power: float = 1.0
    power_variance: float = 0.15  # varied power within +/-15%

    # Duration (minutes)
    min_duration: int = 5
    max_duration: int = 25
    duration_base: int = 6
    duration_jitter: int = 4
    duration_per_extra_participant: int = 1

    # Rating (stars)
    min_rating: float = 1.0
    max_rating: float = 5.0
    rating_step: float = 0.25
    rating_base: float = 2.0
    rating_per_tier_bonus: float = 0.25
    rating_spread_penalty: float = 0.1
    rating_multi_person_bonus: float = 0.25
    rating_jitter: float = 0.75


DEFAULT_RESOLVER_CONFIG = ResolverConfig()


class MatchResolver(MatchResolverBase):
    """
    Resolves matches by weighted random draw on team power.

    Args:
        rng: Random source; pass a seeded Random for reproducible shows
        config: Tuning constants
        tier_bands: Fan ranges used to look up each member's tier bonus
        reward_rules: Dice rules for post-match fan swings
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        config: ResolverConfig = DEFAULT_RESOLVER_CONFIG,
        tier_bands: tuple[TierBand, ...] = DEFAULT_TIER_BANDS,
        reward_rules: RewardRules = DEFAULT_REWARD_RULES,
    ):
        self.rng = rng or random.Random()
        self.config = config
        self.tier_bands = tier_bands
        self.reward_rules = reward_rules

    # =========================================================================
    # Power
    # =========================================================================

    def member_power(self, wrestler: Wrestler) -> float:
        power = (
            self.config.member_base_power
            + wrestler.match_bonus(self.tier_bands)
            - wrestler.health_penalty
        )
        return max(self.config.min_member_power, power)

    def team_power(self, team: MatchTeam) -> float:
        """Aggregate power with diminishing weight per additional member."""
        powers = sorted((self.member_power(w) for w in team.members), reverse=True)
        return sum(p * self.config.member_decay ** i for i, p in enumerate(powers))

    def win_probability(self, team_a: MatchTeam, team_b: MatchTeam) -> float:
        """Chance team_a beats team_b before variance and interference."""
        power_a = self.team_power(team_a)
        power_b = self.team_power(team_b)
        return power_a / (power_a + power_b)

    # =========================================================================
    # Resolution
    # =========================================================================

    def _validate(self, teams: Sequence[MatchTeam]) -> None:
        seen = set()
        for team in teams:
            if team.is_empty:
                raise InvalidTeamComposition(f"Team '{team.name}' has no members")
            for wrestler in team.members:
                if wrestler.id in seen:
                    raise InvalidTeamComposition(f"{wrestler.name} appears more than once in the match")
                seen.add(wrestler.id)

    def _interference_adjusted(
        self,
        teams: Sequence[MatchTeam],
        powers: list[float],
        interference: Sequence[InterferenceResult],
        stipulation: Stipulation,
    ) -> tuple[list[float], Optional[int]]:
        """Apply interference boosts. Returns powers and the index of a DQ'd team, if any."""
        adjusted = list(powers)
        dq_team = None
        for attempt in interference:
            idx = next(
                (i for i, t in enumerate(teams) if attempt.beneficiary_id in t.member_ids),
                None,
            )
            if idx is None:
                continue
            if attempt.disqualified and not stipulation.no_dq and dq_team is None:
                dq_team = idx
            elif attempt.helps_beneficiary:
                adjusted[idx] *= 1 + attempt.interference_type.power_boost
        return adjusted, dq_team

    def _duration(self, participants: list[Wrestler]) -> int:
        cfg = self.config
        avg_bonus = mean(w.match_bonus(self.tier_bands) for w in participants)
        minutes = (
            cfg.duration_base
            + avg_bonus
            + self.rng.randint(-cfg.duration_jitter, cfg.duration_jitter)
            + cfg.duration_per_extra_participant * max(0, len(participants) - 2)
        )
        return int(clamp(round(minutes), cfg.min_duration, cfg.max_duration))

    def _rating(self, participants: list[Wrestler], stipulation: Stipulation) -> float:
        cfg = self.config
        bonuses = [w.match_bonus(self.tier_bands) for w in participants]
        rating = (
            cfg.rating_base
            + mean(bonuses) * cfg.rating_per_tier_bonus
            - (max(bonuses) - min(bonuses)) * cfg.rating_spread_penalty
            + stipulation.rating_bonus
            + jitter(self.rng, cfg.rating_jitter)
        )
        if len(participants) > 2:
            rating += cfg.rating_multi_person_bonus
        return clamp(round_to_step(rating, cfg.rating_step), cfg.min_rating, cfg.max_rating)

    def _resolve(
        self,
        teams: list[MatchTeam],
        match_type: MatchType,
        stipulation: Optional[Stipulation],
        interference: Sequence[InterferenceResult],
    ) -> MatchResult:
        self._validate(teams)
        rules = stipulation or STANDARD_MATCH

        base_powers = [self.team_power(t) for t in teams]
        powers, dq_team = self._interference_adjusted(teams, base_powers, interference, rules)

        if dq_team is not None:
            # The side that benefited from the illegal help loses
            others = [i for i in range(len(teams)) if i != dq_team]
            winner_idx = max(others, key=lambda i: powers[i])
            finish = MatchFinish.DISQUALIFICATION
        else:
            varied = [p * variance_factor(self.rng, self.config.power_variance) for p in powers]
            winner_idx = weighted_index(self.rng, varied)
            finish = MatchFinish.PINFALL

        participants = [w for t in teams for w in t.members]
        result = MatchResult(
            match_type=match_type,
            teams=teams,
            winning_team=teams[winner_idx],
            duration_minutes=self._duration(participants),
            rating=self._rating(participants, rules),
            stipulation=stipulation,
            finish=finish,
            win_probability=base_powers[winner_idx] / sum(base_powers),
            interference=list(interference),
        )
        # Interference events were published by the attempt itself
        result.events.extend(build_match_events(result, self.rng, self.reward_rules))

        logger.info(result.summary)
        return result

    def resolve(
        self,
        team_a: MatchTeam,
        team_b: MatchTeam,
        match_type: MatchType,
        stipulation: Optional[Stipulation] = None,
        interference: Sequence[InterferenceResult] = (),
    ) -> MatchResult:
        return self._resolve([team_a, team_b], match_type, stipulation, interference)

    def resolve_multi_team(
        self,
        teams: Sequence[MatchTeam],
        match_type: MatchType,
        stipulation: Optional[Stipulation] = None,
    ) -> MatchResult:
        if len(teams) < 3:
            raise InvalidTeamComposition("A multi-team match needs at least three teams")
        return self._resolve(list(teams), match_type, stipulation, ())
