"""
Rivalry heat ledger.

HeatTracker is the only place heat changes. Each change is recorded on
the rivalry and reported back as a HeatChangeEvent (plus an inbox item
when the rivalry crosses into a new intensity band). The query helpers
are pure projections over whatever rivalries the caller passes in.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from turnbuckle.core.enums import RivalryIntensity
from turnbuckle.core.models import MatchResult, Rivalry, Wrestler
from turnbuckle.core.models.rivalry import RESOLUTION_HEAT, RESOLUTION_ROLL_TARGET
from turnbuckle.errors import InvalidStateTransition
from turnbuckle.events.types import DomainEvent, HeatChangeEvent, InboxItemEvent

logger = logging.getLogger(__name__)

AUTO_RIVALRY_NOTE = "Auto-generated from heat event"


@dataclass
class ResolutionAttempt:
    """Outcome of a dice-roll attempt to settle a rivalry."""

    attempted: bool
    resolved: bool
    total: int
    message: str


@dataclass
class RivalryStats:
    """Summary over a set of rivalries."""

    total: int
    active: int
    requiring_matches: int
    eligible_for_resolution: int
    requiring_stipulation_matches: int
    total_heat: int

    @property
    def average_heat(self) -> float:
        return self.total_heat / self.active if self.active else 0.0


class HeatTracker:
    """
    Applies and queries rivalry heat.

    Args:
        floor: Lowest heat a rivalry can reach. None lets heat go negative.
        clock: Source of timestamps for heat events
    """

    def __init__(
        self,
        floor: Optional[int] = 0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.floor = floor
        self.clock = clock

    # =========================================================================
    # Commands
    # =========================================================================

    def create_rivalry(
        self,
        wrestler1: Wrestler,
        wrestler2: Wrestler,
        notes: str = "",
        existing: Iterable[Rivalry] = (),
    ) -> Rivalry:
        """Start a rivalry, or return the active one between the pair."""
        if wrestler1.id == wrestler2.id:
            raise ValueError("A wrestler cannot feud with themselves")
        current = self.find_active(wrestler1, wrestler2, existing)
        if current is not None:
            return current
        logger.info(f"New rivalry: {wrestler1.name} vs {wrestler2.name}")
        return Rivalry(wrestler1, wrestler2, storyline_notes=notes, started_at=self.clock())

    def add_heat(self, rivalry: Rivalry, delta: int, reason: str) -> list[DomainEvent]:
        """
        Add (or remove) heat and record why.

        Returns the HeatChangeEvent, followed by an InboxItemEvent when the
        change moves the rivalry into a different intensity band.

        Raises:
            InvalidStateTransition: If the rivalry has ended
        """
        if not rivalry.is_active:
            raise InvalidStateTransition(f"Rivalry {rivalry.id} has ended; heat cannot change")

        before = rivalry.heat
        old_intensity = rivalry.intensity
        heat_event = rivalry.apply_heat(delta, reason, at=self.clock(), floor=self.floor)

        logger.info(
            f"Heat {heat_event.heat_change:+d} for {rivalry.wrestler1.name} vs "
            f"{rivalry.wrestler2.name}: {reason} (now {rivalry.heat})"
        )
        events: list[DomainEvent] = [HeatChangeEvent(
            timestamp=heat_event.timestamp,
            rivalry_id=rivalry.id,
            wrestler_ids=[rivalry.wrestler1.id, rivalry.wrestler2.id],
            delta=heat_event.heat_change,
            heat_before=before,
            heat_after=rivalry.heat,
            reason=reason,
        )]

        if rivalry.intensity != old_intensity:
            events.append(InboxItemEvent(
                category="RIVALRY",
                title=f"Rivalry now {rivalry.intensity.display_name}",
                message=f"{rivalry.display_name}: {rivalry.intensity.description}",
                wrestler_ids=[rivalry.wrestler1.id, rivalry.wrestler2.id],
            ))
        return events

    def add_heat_between(
        self,
        wrestler1: Wrestler,
        wrestler2: Wrestler,
        delta: int,
        reason: str,
        rivalries: list[Rivalry],
    ) -> tuple[Rivalry, list[DomainEvent]]:
        """Add heat between two wrestlers, starting a rivalry if they have none."""
        rivalry = self.find_active(wrestler1, wrestler2, rivalries)
        if rivalry is None:
            rivalry = self.create_rivalry(wrestler1, wrestler2, AUTO_RIVALRY_NOTE)
            rivalries.append(rivalry)
        return rivalry, self.add_heat(rivalry, delta, reason)

    def heat_from_match(
        self,
        result: MatchResult,
        rivalries: Iterable[Rivalry],
        amount: int = 2,
    ) -> list[DomainEvent]:
        """Add heat to every active rivalry whose wrestlers met on opposite sides."""
        events: list[DomainEvent] = []
        for rivalry in rivalries:
            if not rivalry.is_active:
                continue
            sides = [
                i for i, team in enumerate(result.teams)
                if team.has_member(rivalry.wrestler1) or team.has_member(rivalry.wrestler2)
            ]
            faced = (
                result.involves(rivalry.wrestler1)
                and result.involves(rivalry.wrestler2)
                and len(sides) == 2
            )
            if faced:
                for event in self.add_heat(rivalry, amount, f"Faced off in match {result.id}"):
                    event.match_id = result.id
                    events.append(event)
        return events

    def attempt_resolution(self, rivalry: Rivalry, roll1: int, roll2: int) -> ResolutionAttempt:
        """
        Try to settle a rivalry with two d20 rolls.

        Needs 20+ heat. A total above 30 ends the rivalry; otherwise the
        failed attempt is noted in the history.
        """
        total = roll1 + roll2
        if not rivalry.eligible_for_resolution:
            return ResolutionAttempt(
                attempted=False,
                resolved=False,
                total=total,
                message=f"Rivalry needs {RESOLUTION_HEAT} heat before it can be resolved",
            )
        now = self.clock()
        if total > RESOLUTION_ROLL_TARGET:
            rivalry.apply_heat(0, f"Rivalry resolved by dice roll ({total})", at=now, floor=self.floor)
            rivalry.end("Resolved by dice roll", at=now)
            logger.info(f"Rivalry resolved: {rivalry.display_name} (rolled {total})")
            return ResolutionAttempt(True, True, total, f"Rivalry resolved with a roll of {total}!")

        rivalry.apply_heat(0, f"Failed resolution attempt ({total})", at=now, floor=self.floor)
        return ResolutionAttempt(True, False, total, f"Resolution failed with a roll of {total}")

    def end_rivalry(self, rivalry: Rivalry, reason: str) -> list[DomainEvent]:
        if not rivalry.is_active:
            raise InvalidStateTransition(f"Rivalry {rivalry.id} has already ended")
        rivalry.end(reason, at=self.clock())
        logger.info(f"Rivalry ended: {rivalry.wrestler1.name} vs {rivalry.wrestler2.name} ({reason})")
        return [InboxItemEvent(
            category="RIVALRY",
            title="Rivalry ended",
            message=f"{rivalry.wrestler1.name} vs {rivalry.wrestler2.name}: {reason}",
            wrestler_ids=[rivalry.wrestler1.id, rivalry.wrestler2.id],
        )]

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def find_active(
        wrestler1: Wrestler,
        wrestler2: Wrestler,
        rivalries: Iterable[Rivalry],
    ) -> Optional[Rivalry]:
        for rivalry in rivalries:
            if rivalry.is_active and rivalry.is_between(wrestler1, wrestler2):
                return rivalry
        return None

    @staticmethod
    def hottest(rivalries: Iterable[Rivalry], limit: int = 5) -> list[Rivalry]:
        active = [r for r in rivalries if r.is_active]
        return sorted(active, key=lambda r: r.heat, reverse=True)[:limit]

    @staticmethod
    def at_or_above(rivalries: Iterable[Rivalry], threshold: int) -> list[Rivalry]:
        return [r for r in rivalries if r.is_active and r.heat >= threshold]

    @staticmethod
    def in_heat_range(rivalries: Iterable[Rivalry], min_heat: int, max_heat: int) -> list[Rivalry]:
        return [r for r in rivalries if r.is_active and min_heat <= r.heat <= max_heat]

    @staticmethod
    def by_intensity(rivalries: Iterable[Rivalry], intensity: RivalryIntensity) -> list[Rivalry]:
        return [r for r in rivalries if r.is_active and r.intensity == intensity]

    @staticmethod
    def requiring_matches(rivalries: Iterable[Rivalry]) -> list[Rivalry]:
        return [r for r in rivalries if r.requires_match]

    @staticmethod
    def eligible_for_resolution(rivalries: Iterable[Rivalry]) -> list[Rivalry]:
        return [r for r in rivalries if r.eligible_for_resolution]

    @staticmethod
    def requiring_stipulation_matches(rivalries: Iterable[Rivalry]) -> list[Rivalry]:
        return [r for r in rivalries if r.requires_stipulation_match]

    @staticmethod
    def for_wrestler(rivalries: Iterable[Rivalry], wrestler: Wrestler) -> list[Rivalry]:
        return [r for r in rivalries if r.is_active and r.involves(wrestler)]

    @staticmethod
    def stats(rivalries: Iterable[Rivalry]) -> RivalryStats:
        rivalries = list(rivalries)
        active = [r for r in rivalries if r.is_active]
        return RivalryStats(
            total=len(rivalries),
            active=len(active),
            requiring_matches=sum(1 for r in active if r.requires_match),
            eligible_for_resolution=sum(1 for r in active if r.eligible_for_resolution),
            requiring_stipulation_matches=sum(1 for r in active if r.requires_stipulation_match),
            total_heat=sum(r.heat for r in active),
        )
