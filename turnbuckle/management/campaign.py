"""
Campaign progression.

A campaign walks a wrestler through an ordered chapter table. Inside a
tournament chapter the campaign runs a small state machine:

    QUALIFYING -> FINALS            (enough qualifying wins)
    QUALIFYING -> FAILED_TO_QUALIFY (too many losses to catch up)
    FINALS     -> TOURNAMENT_WINNER (enough finals wins)
    FINALS     -> FINALS_ELIMINATED (too many finals losses)

The last three are terminal for that tournament. Results that arrive
afterwards still count toward the chapter's record but never move the
phase again.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional, Set

from turnbuckle.core.enums import Alignment, CampaignStatus, TournamentPhase
from turnbuckle.core.models import Campaign, PhaseChange, Wrestler
from turnbuckle.errors import AlreadyOwnedUpgrade, InsufficientSkillTokens, InvalidStateTransition
from turnbuckle.events.types import AlignmentShiftEvent, DomainEvent, InboxItemEvent
from turnbuckle.management.chapters import (
    DEFAULT_CHAPTERS,
    DEFAULT_UPGRADES,
    Chapter,
    ChapterCriteria,
    ChapterTable,
    Upgrade,
    UpgradeCatalogue,
)

logger = logging.getLogger(__name__)


MAX_ALIGNMENT_LEVEL = 5

VALID_TRANSITIONS: Dict[TournamentPhase, Set[TournamentPhase]] = {
    TournamentPhase.QUALIFYING: {
        TournamentPhase.FINALS,
        TournamentPhase.FAILED_TO_QUALIFY,
    },
    TournamentPhase.FINALS: {
        TournamentPhase.TOURNAMENT_WINNER,
        TournamentPhase.FINALS_ELIMINATED,
    },
    TournamentPhase.FAILED_TO_QUALIFY: set(),
    TournamentPhase.FINALS_ELIMINATED: set(),
    TournamentPhase.TOURNAMENT_WINNER: set(),
}

_PHASE_MESSAGES = {
    TournamentPhase.FINALS: ("Qualified!", "{name} has qualified for the tournament finals!"),
    TournamentPhase.FAILED_TO_QUALIFY: (
        "Failed to qualify",
        "{name} can no longer qualify for the tournament finals.",
    ),
    TournamentPhase.FINALS_ELIMINATED: ("Eliminated", "{name} has been eliminated in the finals."),
    TournamentPhase.TOURNAMENT_WINNER: ("Tournament winner!", "{name} has won the tournament!"),
}


class CampaignStateMachine:
    """
    Drives campaigns through chapters, tournaments and upgrades.

    Args:
        chapters: Ordered chapter table
        upgrades: Purchasable upgrades
        clock: Source of timestamps
    """

    def __init__(
        self,
        chapters: ChapterTable = DEFAULT_CHAPTERS,
        upgrades: UpgradeCatalogue = DEFAULT_UPGRADES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.chapters = chapters
        self.upgrades = upgrades
        self.clock = clock

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_campaign(
        self,
        wrestler: Wrestler,
        alignment: Alignment = Alignment.NEUTRAL,
        existing: Iterable[Campaign] = (),
    ) -> Campaign:
        """
        Open a campaign at the first chapter.

        Raises:
            InvalidStateTransition: If the wrestler already has an active campaign
        """
        for campaign in existing:
            if campaign.wrestler.id == wrestler.id and campaign.is_active:
                raise InvalidStateTransition(f"{wrestler.name} already has an active campaign")
        logger.info(f"Starting campaign for {wrestler.name} at '{self.chapters.first.id}'")
        return Campaign(
            wrestler=wrestler,
            chapter_id=self.chapters.first.id,
            alignment=alignment,
            alignment_level=0 if alignment == Alignment.NEUTRAL else 1,
            started_at=self.clock(),
        )

    def chapter_for(self, campaign: Campaign) -> Chapter:
        return self.chapters.get(campaign.chapter_id)

    def _require_active(self, campaign: Campaign) -> None:
        if not campaign.is_active:
            raise InvalidStateTransition(f"Campaign {campaign.id} is {campaign.status.value}")

    # =========================================================================
    # Matches
    # =========================================================================

    def can_transition(self, campaign: Campaign, target: TournamentPhase) -> bool:
        return target in VALID_TRANSITIONS.get(campaign.tournament_phase, set())

    def _transition(self, campaign: Campaign, target: TournamentPhase, reason: str) -> DomainEvent:
        if not self.can_transition(campaign, target):
            raise InvalidStateTransition(
                f"Cannot transition from {campaign.tournament_phase.value} to {target.value}. "
                f"Valid targets: {[p.value for p in VALID_TRANSITIONS[campaign.tournament_phase]]}"
            )
        campaign.phase_history.append(PhaseChange(
            from_phase=campaign.tournament_phase,
            to_phase=target,
            reason=reason,
            timestamp=self.clock(),
        ))
        campaign.tournament_phase = target
        logger.info(f"Campaign {campaign.id} ({campaign.wrestler.name}): {target.value} - {reason}")

        title, message = _PHASE_MESSAGES[target]
        return InboxItemEvent(
            category="CAMPAIGN",
            title=title,
            message=message.format(name=campaign.wrestler.name),
            wrestler_ids=[campaign.wrestler.id],
        )

    def process_match_result(self, campaign: Campaign, won: bool) -> list[DomainEvent]:
        """
        Record a campaign match.

        Updates the chapter record and, in a tournament chapter, the
        tournament phase.

        Raises:
            InvalidStateTransition: If the campaign is no longer active
        """
        self._require_active(campaign)
        chapter = self.chapter_for(campaign)

        campaign.matches_played += 1
        if won:
            campaign.wins += 1
            campaign.victory_points += chapter.rules.victory_points_win
        else:
            campaign.losses += 1
            campaign.victory_points += chapter.rules.victory_points_loss

        if chapter.tournament is None:
            return []
        if campaign.tournament_phase.is_terminal:
            logger.debug(
                f"Campaign {campaign.id} tournament already decided "
                f"({campaign.tournament_phase.value}); phase unchanged"
            )
            return []

        rules = chapter.tournament
        if campaign.tournament_phase == TournamentPhase.QUALIFYING:
            if won:
                campaign.qualifying_wins += 1
            else:
                campaign.qualifying_losses += 1
            if campaign.qualifying_wins >= rules.qualifying_wins_required:
                return [self._transition(
                    campaign, TournamentPhase.FINALS,
                    f"{campaign.qualifying_wins} qualifying wins",
                )]
            max_losses = rules.qualifying_matches - rules.qualifying_wins_required
            if campaign.qualifying_losses > max_losses:
                return [self._transition(
                    campaign, TournamentPhase.FAILED_TO_QUALIFY,
                    f"{campaign.qualifying_losses} qualifying losses",
                )]
            return []

        # Finals
        if won:
            campaign.finals_wins += 1
        else:
            campaign.finals_losses += 1
        if campaign.finals_wins >= rules.finals_wins_required:
            return [self._transition(
                campaign, TournamentPhase.TOURNAMENT_WINNER,
                f"{campaign.finals_wins} finals wins",
            )]
        if campaign.finals_losses > rules.finals_matches - rules.finals_wins_required:
            return [self._transition(
                campaign, TournamentPhase.FINALS_ELIMINATED,
                f"{campaign.finals_losses} finals losses",
            )]
        return []

    # =========================================================================
    # Chapters
    # =========================================================================

    def _criteria_met(self, criteria: ChapterCriteria, campaign: Campaign) -> bool:
        if criteria.min_victory_points is not None and campaign.victory_points < criteria.min_victory_points:
            return False
        if criteria.max_victory_points is not None and campaign.victory_points > criteria.max_victory_points:
            return False
        if criteria.min_matches_played is not None and campaign.matches_played < criteria.min_matches_played:
            return False
        if criteria.min_wins is not None and campaign.wins < criteria.min_wins:
            return False
        if criteria.tournament_winner is not None and campaign.is_tournament_winner != criteria.tournament_winner:
            return False
        if criteria.failed_to_qualify is not None and campaign.is_failed_to_qualify != criteria.failed_to_qualify:
            return False
        if (
            criteria.tournament_finished is not None
            and campaign.tournament_phase.is_terminal != criteria.tournament_finished
        ):
            return False
        return all(cid in campaign.completed_chapter_ids for cid in criteria.required_chapter_ids)

    def is_chapter_complete(self, campaign: Campaign) -> bool:
        """Whether any of the current chapter's exit criteria are met."""
        chapter = self.chapter_for(campaign)
        return any(self._criteria_met(c, campaign) for c in chapter.exit_criteria)

    def advance_chapter(self, campaign: Campaign) -> list[DomainEvent]:
        """
        Move to the next chapter in the table.

        The current chapter is recorded as completed and its skill tokens
        granted. Advancing from the last chapter completes the campaign.

        Raises:
            InvalidStateTransition: If the campaign is no longer active
        """
        self._require_active(campaign)
        next_chapter = self.chapters.next_after(campaign.chapter_id)
        return self._enter(campaign, next_chapter)

    def move_to_chapter(self, campaign: Campaign, chapter_id: str) -> list[DomainEvent]:
        """
        Jump forward to a specific chapter.

        Raises:
            NotFound: If the chapter id is not in the table
            InvalidStateTransition: If the target is not ahead of the current chapter
        """
        self._require_active(campaign)
        target = self.chapters.get(chapter_id)
        if self.chapters.index_of(chapter_id) <= self.chapters.index_of(campaign.chapter_id):
            raise InvalidStateTransition(
                f"Cannot move campaign from '{campaign.chapter_id}' back to '{chapter_id}'"
            )
        return self._enter(campaign, target)

    def _enter(self, campaign: Campaign, chapter: Optional[Chapter]) -> list[DomainEvent]:
        finished = self.chapter_for(campaign)
        if finished.id not in campaign.completed_chapter_ids:
            campaign.completed_chapter_ids.append(finished.id)
        campaign.skill_tokens += finished.rules.skill_tokens_on_completion

        if chapter is None:
            campaign.status = CampaignStatus.COMPLETED
            campaign.completed_at = self.clock()
            logger.info(f"Campaign {campaign.id} ({campaign.wrestler.name}) completed")
            return [InboxItemEvent(
                category="CAMPAIGN",
                title="Campaign complete",
                message=f"{campaign.wrestler.name} has completed the campaign!",
                wrestler_ids=[campaign.wrestler.id],
            )]

        campaign.chapter_id = chapter.id
        campaign.reset_chapter_progress()
        logger.info(f"Campaign {campaign.id} ({campaign.wrestler.name}) entered '{chapter.id}'")
        return [InboxItemEvent(
            category="CAMPAIGN",
            title=f"Chapter: {chapter.title}",
            message=chapter.description or f"{campaign.wrestler.name} begins '{chapter.title}'.",
            wrestler_ids=[campaign.wrestler.id],
        )]

    # =========================================================================
    # Upgrades
    # =========================================================================

    def available_upgrades(self, campaign: Campaign) -> list[Upgrade]:
        """Upgrades whose type the campaign does not own yet."""
        owned_types = {self.upgrades.get(uid).type for uid in campaign.upgrade_ids}
        return [u for u in self.upgrades.upgrades if u.type not in owned_types]

    def purchase_upgrade(self, campaign: Campaign, upgrade_id: str) -> list[DomainEvent]:
        """
        Buy an upgrade with skill tokens and apply its effects.

        Raises:
            NotFound: If the upgrade id is unknown
            AlreadyOwnedUpgrade: If the upgrade, or one of its type, is owned
            InsufficientSkillTokens: If the campaign cannot pay
        """
        upgrade = self.upgrades.get(upgrade_id)
        if campaign.owns_upgrade(upgrade.id):
            raise AlreadyOwnedUpgrade(f"You already own the upgrade: {upgrade.name}")
        owned_types = {self.upgrades.get(uid).type for uid in campaign.upgrade_ids}
        if upgrade.type in owned_types:
            raise AlreadyOwnedUpgrade(f"You already have a permanent upgrade of type: {upgrade.type}")
        if campaign.skill_tokens < upgrade.cost:
            raise InsufficientSkillTokens(
                f"{upgrade.name} costs {upgrade.cost} skill tokens; {campaign.skill_tokens} available",
                required=upgrade.cost,
                available=campaign.skill_tokens,
            )

        campaign.skill_tokens -= upgrade.cost
        campaign.upgrade_ids.append(upgrade.id)
        for stat, amount in upgrade.effects.items():
            campaign.stat_bonuses[stat] = campaign.stat_bonuses.get(stat, 0) + amount

        logger.info(f"Campaign {campaign.id} bought '{upgrade.name}' for {upgrade.cost} tokens")
        return [InboxItemEvent(
            category="CAMPAIGN",
            title="Upgrade purchased",
            message=f"{campaign.wrestler.name} learned {upgrade.name}: {upgrade.description}",
            wrestler_ids=[campaign.wrestler.id],
        )]

    # =========================================================================
    # Alignment
    # =========================================================================

    def shift_alignment(self, campaign: Campaign, amount: int, reason: str = "") -> list[DomainEvent]:
        """
        Move a campaign along the HEEL 5 ... NEUTRAL 0 ... FACE 5 track.

        Positive amounts push toward FACE, negative toward HEEL. Reaching
        zero from either side lands on NEUTRAL; a shift away from NEUTRAL
        turns the wrestler with a level of abs(amount).
        """
        if amount == 0:
            return []

        before, level_before = campaign.alignment, campaign.alignment_level
        if before == Alignment.NEUTRAL:
            campaign.alignment = Alignment.FACE if amount > 0 else Alignment.HEEL
            campaign.alignment_level = min(MAX_ALIGNMENT_LEVEL, abs(amount))
        else:
            step = amount if before == Alignment.FACE else -amount
            new_level = level_before + step
            if new_level <= 0:
                campaign.alignment = Alignment.NEUTRAL
                campaign.alignment_level = 0
            else:
                campaign.alignment_level = min(MAX_ALIGNMENT_LEVEL, new_level)

        logger.info(
            f"Campaign {campaign.id} alignment {before.value} {level_before} -> "
            f"{campaign.alignment.value} {campaign.alignment_level}"
        )
        events: list[DomainEvent] = [AlignmentShiftEvent(
            campaign_id=campaign.id,
            wrestler_id=campaign.wrestler.id,
            alignment_before=before.value,
            alignment_after=campaign.alignment.value,
            level_before=level_before,
            level_after=campaign.alignment_level,
            reason=reason,
        )]
        if campaign.alignment != before:
            events.append(InboxItemEvent(
                category="CAMPAIGN",
                title="Alignment turn",
                message=f"{campaign.wrestler.name} has turned {campaign.alignment.value}.",
                wrestler_ids=[campaign.wrestler.id],
            ))
        return events
