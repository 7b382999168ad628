"""
Championship ledger.

Eligibility is a fan threshold per title tier; challenging costs fans.
All checks run before anything is changed, so a refused challenge or
award leaves the wrestler and the title exactly as they were.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional
from uuid import UUID

from turnbuckle.core.enums import TitleTier
from turnbuckle.core.models import MatchResult, Title, TitleReign, Wrestler
from turnbuckle.core.tables import DEFAULT_TITLE_TIERS, TitleTierSpec
from turnbuckle.errors import IneligibleChallenger
from turnbuckle.events.types import DomainEvent, InboxItemEvent, TitleChangeEvent

logger = logging.getLogger(__name__)


class ChallengeError(Enum):
    """Why a challenge was refused."""

    TITLE_INACTIVE = "TITLE_INACTIVE"
    ALREADY_CHAMPION = "ALREADY_CHAMPION"
    ALREADY_CHALLENGER = "ALREADY_CHALLENGER"
    INELIGIBLE_CHALLENGER = "INELIGIBLE_CHALLENGER"
    INSUFFICIENT_FANS = "INSUFFICIENT_FANS"


@dataclass
class ChallengeResult:
    """Outcome of a title challenge."""

    success: bool
    message: str
    error: Optional[ChallengeError] = None
    fans_spent: int = 0
    events: list[DomainEvent] = field(default_factory=list)

    @classmethod
    def failure(cls, error: ChallengeError, message: str) -> "ChallengeResult":
        return cls(success=False, message=message, error=error)


class TitleLedger:
    """
    Championship eligibility, challenges and reigns.

    Args:
        tiers: Required fans and challenge cost per title tier
        clock: Source of reign timestamps
    """

    def __init__(
        self,
        tiers: Mapping[TitleTier, TitleTierSpec] = DEFAULT_TITLE_TIERS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.tiers = tiers
        self.clock = clock

    def spec_for(self, title: Title) -> TitleTierSpec:
        return self.tiers[title.tier]

    def required_fans(self, title: Title) -> int:
        return self.spec_for(title).required_fans

    def challenge_cost(self, title: Title) -> int:
        return self.spec_for(title).challenge_cost

    def is_eligible(self, wrestler: Wrestler, title: Title) -> bool:
        return wrestler.fans >= self.required_fans(title)

    def eligible_titles(self, wrestler: Wrestler, titles: Iterable[Title]) -> list[Title]:
        """Active titles the wrestler has the fans for, most prestigious first."""
        eligible = [t for t in titles if t.is_active and self.is_eligible(wrestler, t)]
        return sorted(eligible, key=lambda t: t.tier.prestige, reverse=True)

    # =========================================================================
    # Commands
    # =========================================================================

    def award_title(
        self,
        title: Title,
        wrestler: Wrestler,
        won_at_match_id: Optional[UUID] = None,
    ) -> list[DomainEvent]:
        """
        Crown a new champion.

        Raises:
            IneligibleChallenger: If the wrestler lacks the required fans
        """
        required = self.required_fans(title)
        if wrestler.fans < required:
            raise IneligibleChallenger(
                f"{wrestler.name} has {wrestler.fans:,} fans; "
                f"the {title.name} requires {required:,}"
            )

        previous = title.champion
        reign = title.award_to(wrestler, at=self.clock(), won_at_match_id=won_at_match_id)
        logger.info(f"{wrestler.name} wins the {title.name} (reign #{reign.reign_number})")
        return self._change_events(title, reign, previous)

    def vacate_title(self, title: Title) -> list[DomainEvent]:
        """Vacate a title. A vacant title stays vacant and nothing is emitted."""
        previous = title.champion
        ended = title.vacate(at=self.clock())
        if ended is None:
            return []
        logger.info(f"The {title.name} has been vacated by {previous.name}")
        return [
            TitleChangeEvent(
                title_id=title.id,
                title_name=title.name,
                new_champion_id=None,
                previous_champion_id=previous.id,
            ),
            InboxItemEvent(
                category="TITLE",
                title="Title vacated",
                message=f"The {title.name} has been vacated by {previous.name}.",
                wrestler_ids=[previous.id],
            ),
        ]

    def challenge_for_title(self, challenger: Wrestler, title: Title) -> ChallengeResult:
        """
        Pay to become a challenger for a title.

        Refusals come back as a failed ChallengeResult with the reason;
        fans are only deducted on success.
        """
        if not title.is_active:
            return ChallengeResult.failure(ChallengeError.TITLE_INACTIVE, "Title is not active.")
        if title.is_champion(challenger):
            return ChallengeResult.failure(
                ChallengeError.ALREADY_CHAMPION,
                "Wrestler is already a champion of this title.",
            )
        if title.is_challenger(challenger):
            return ChallengeResult.failure(
                ChallengeError.ALREADY_CHALLENGER,
                "Wrestler is already a challenger for this title.",
            )
        if not self.is_eligible(challenger, title):
            return ChallengeResult.failure(
                ChallengeError.INELIGIBLE_CHALLENGER,
                "Wrestler is not eligible for this title based on tier.",
            )
        cost = self.challenge_cost(title)
        if not challenger.spend_fans(cost):
            return ChallengeResult.failure(
                ChallengeError.INSUFFICIENT_FANS,
                f"Wrestler cannot afford the challenge cost of {cost:,} fans.",
            )

        title.challengers.append(challenger)
        logger.info(f"{challenger.name} paid {cost:,} fans to challenge for the {title.name}")
        message = f"Challenge successful! {challenger.name} is now a challenger for the {title.name}."
        return ChallengeResult(
            success=True,
            message=message,
            fans_spent=cost,
            events=[InboxItemEvent(
                category="TITLE",
                title="New challenger",
                message=message,
                wrestler_ids=[challenger.id],
            )],
        )

    def remove_challenger(self, title: Title, wrestler: Wrestler) -> bool:
        before = len(title.challengers)
        title.challengers = [c for c in title.challengers if c.id != wrestler.id]
        return len(title.challengers) != before

    def record_match_result(self, title: Title, result: MatchResult) -> list[DomainEvent]:
        """
        Apply a title match result.

        A losing champion drops the title to the winning side's primary
        wrestler. A vacant title goes to the winner. A winning champion
        records a successful defence.

        Raises:
            IneligibleChallenger: If the new champion lacks the required fans
        """
        winner = result.winning_team.primary
        if title.champion is not None and result.is_winner(title.champion):
            logger.info(f"{title.champion.name} retains the {title.name}")
            return [InboxItemEvent(
                match_id=result.id,
                category="TITLE",
                title="Successful defence",
                message=f"{title.champion.name} retained the {title.name}.",
                wrestler_ids=[title.champion.id],
            )]

        events = self.award_title(title, winner, won_at_match_id=result.id)
        for event in events:
            event.match_id = result.id
        return events

    def _change_events(
        self,
        title: Title,
        reign: TitleReign,
        previous: Optional[Wrestler],
    ) -> list[DomainEvent]:
        champion = reign.champion
        wrestler_ids = [champion.id] + ([previous.id] if previous else [])
        if previous is None:
            message = f"{champion.name} has won the vacant {title.name}!"
        else:
            message = f"{champion.name} has defeated {previous.name} for the {title.name}!"
        return [
            TitleChangeEvent(
                title_id=title.id,
                title_name=title.name,
                new_champion_id=champion.id,
                previous_champion_id=previous.id if previous else None,
                reign_number=reign.reign_number,
            ),
            InboxItemEvent(
                category="TITLE",
                title="New champion",
                message=message,
                wrestler_ids=wrestler_ids,
            ),
        ]
