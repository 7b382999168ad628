"""
Booking service.

The command surface callers (an API layer, a CLI, tests) use to run a
show. Each command loads what it needs from the store, runs the pure
engines, saves everything it touched in one version-checked batch and
only then dispatches the collected events. Narration runs last and
separately, so a slow or failing narrator never touches a booked result.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union
from uuid import UUID

from turnbuckle.ai.narration import Narrator, narrate_match
from turnbuckle.config import EngineConfig, get_config
from turnbuckle.core.enums import InjurySeverity, MatchType
from turnbuckle.core.models import (
    Campaign,
    Injury,
    MatchResult,
    MatchTeam,
    Npc,
    Rivalry,
    Segment,
    Title,
    Wrestler,
)
from turnbuckle.core.tables import DEFAULT_INTERFERENCE_TYPES, Stipulation
from turnbuckle.errors import InvalidStateTransition, NotFound
from turnbuckle.events import (
    DomainEvent,
    EventBus,
    FanAwardedEvent,
    WrestlerBumpEvent,
    WrestlerInjuryEvent,
)
from turnbuckle.management import (
    CampaignStateMachine,
    ChallengeResult,
    HeatTracker,
    TitleLedger,
    load_chapter_table,
)
from turnbuckle.simulation import (
    InterferenceAiService,
    InterferenceEngine,
    InterferenceResult,
    MatchResolver,
    ResolverConfig,
)
from turnbuckle.store import Repository

logger = logging.getLogger(__name__)


@dataclass
class BookingOutcome:
    """What a booked match produced."""

    result: MatchResult
    events: list[DomainEvent] = field(default_factory=list)
    narration: Optional[str] = None


def apply_wrestler_events(
    wrestlers: dict[UUID, Wrestler],
    events: Iterable[DomainEvent],
) -> set[UUID]:
    """
    Apply fan, bump and injury events to loaded wrestlers.

    Returns the ids of wrestlers that changed.
    """
    changed: set[UUID] = set()
    for event in events:
        wrestler = wrestlers.get(getattr(event, "wrestler_id", None))
        if wrestler is None:
            continue
        if isinstance(event, FanAwardedEvent):
            wrestler.add_fans(event.amount)
        elif isinstance(event, WrestlerBumpEvent):
            wrestler.add_bump()
        elif isinstance(event, WrestlerInjuryEvent):
            wrestler.injuries.append(Injury(
                name=event.injury_name,
                severity=InjurySeverity[event.severity],
                injured_at=event.timestamp,
            ))
        else:
            continue
        changed.add(wrestler.id)
    return changed


class BookingService:
    """
    Runs booking commands against a store.

    Engines are built from the config when not supplied, all sharing one
    random source so a configured seed reproduces a whole show.
    """

    def __init__(
        self,
        store: Repository,
        bus: Optional[EventBus] = None,
        config: Optional[EngineConfig] = None,
        resolver: Optional[MatchResolver] = None,
        heat: Optional[HeatTracker] = None,
        titles: Optional[TitleLedger] = None,
        campaigns: Optional[CampaignStateMachine] = None,
        interference: Optional[InterferenceEngine] = None,
        narrator: Optional[Narrator] = None,
    ):
        self.store = store
        self.bus = bus or EventBus()
        self.config = config or get_config()
        rng = self.config.make_rng()
        self.resolver = resolver or MatchResolver(
            rng=rng,
            config=ResolverConfig(
                min_duration=self.config.min_duration,
                max_duration=self.config.max_duration,
            ),
        )
        self.heat = heat or HeatTracker(floor=self.config.heat_floor)
        self.titles = titles or TitleLedger()
        self.campaigns = campaigns or CampaignStateMachine(
            chapters=load_chapter_table(self.config.chapters_path),
        )
        self.interference = interference or InterferenceEngine(
            awareness_lookup=self._npc_awareness,
            rng=rng,
        )
        self.interference_ai = InterferenceAiService(
            self.interference,
            rng=rng,
            probability=self.config.interference_probability,
        )
        self.narrator = narrator

    # =========================================================================
    # Helpers
    # =========================================================================

    def _npc_awareness(self, npc_id: UUID) -> int:
        return self.store.get(Npc, npc_id).awareness

    def _save(self, *entities) -> None:
        """Commit loaded entities together; a stale one means none are written."""
        self.store.save_all(entities)

    def _publish(self, events: Sequence[DomainEvent]) -> None:
        failures = self.bus.dispatch(events)
        if failures:
            logger.warning(f"{failures} event handler(s) failed; booking unaffected")

    def _load_team(self, wrestler_ids: Sequence[UUID], label: str) -> MatchTeam:
        return MatchTeam([self.store.get(Wrestler, wid) for wid in wrestler_ids], label=label)

    def _load_character(self, character_id: UUID) -> Union[Wrestler, Npc]:
        try:
            return self.store.get(Wrestler, character_id)
        except NotFound:
            return self.store.get(Npc, character_id)

    def _active_campaign_for(self, wrestler_id: UUID) -> Optional[Campaign]:
        for campaign in self.store.all(Campaign):
            if campaign.wrestler.id == wrestler_id and campaign.is_active:
                return campaign
        return None

    def _commit_interference(self, segment: Segment, result: InterferenceResult) -> list[DomainEvent]:
        """Save the segment, plus the beneficiary's campaign if the attempt moved its alignment."""
        events: list[DomainEvent] = list(result.events)
        campaign = None
        if result.alignment_shift:
            campaign = self._active_campaign_for(result.beneficiary_id)
        if campaign is not None:
            events.extend(self.campaigns.shift_alignment(
                campaign, result.alignment_shift, reason=result.interference_type.name
            ))
            self._save(segment, campaign)
        else:
            self._save(segment)
        return events

    # =========================================================================
    # Commands
    # =========================================================================

    def resolve_match(
        self,
        team_a_ids: Sequence[UUID],
        team_b_ids: Sequence[UUID],
        match_type: Optional[MatchType] = None,
        stipulation: Optional[Stipulation] = None,
        interference: Sequence[InterferenceResult] = (),
        segment_id: Optional[UUID] = None,
        title_id: Optional[UUID] = None,
        campaign_id: Optional[UUID] = None,
        labels: tuple[str, str] = ("", ""),
    ) -> BookingOutcome:
        """
        Book and resolve a match, then apply and publish its consequences.

        Raises:
            NotFound: If any referenced entity is missing
            InvalidTeamComposition: If a team is empty or the teams overlap
            IneligibleChallenger: If a title would go to a wrestler without the fans
            InvalidStateTransition: If the segment was already resolved
            ConcurrentModification: If something changed underneath the booking
        """
        team_a = self._load_team(team_a_ids, labels[0])
        team_b = self._load_team(team_b_ids, labels[1])
        segment = self.store.get(Segment, segment_id) if segment_id else None
        if segment is not None and segment.is_resolved:
            raise InvalidStateTransition(f"Segment {segment.id} is already resolved")
        if stipulation is None and segment is not None:
            stipulation = segment.stipulation
        match_type = match_type or MatchType.for_team_sizes([team_a.size, team_b.size])

        result = self.resolver.resolve(team_a, team_b, match_type, stipulation, interference)
        events = list(result.events)

        rivalries = list(self.store.all(Rivalry))
        heat_events = self.heat.heat_from_match(result, rivalries, amount=self.config.match_heat)
        touched_rivalries = {e.rivalry_id for e in heat_events if hasattr(e, "rivalry_id")}
        events.extend(heat_events)

        title = None
        if title_id is not None:
            title = self.store.get(Title, title_id)
            events.extend(self.titles.record_match_result(title, result))

        campaign = None
        if campaign_id is not None:
            loaded = self.store.get(Campaign, campaign_id)
            if result.involves(loaded.wrestler):
                campaign = loaded
                events.extend(self.campaigns.process_match_result(
                    campaign, won=result.is_winner(campaign.wrestler)
                ))

        # Commit
        participants = {w.id: w for team in result.teams for w in team.members}
        changed = apply_wrestler_events(participants, result.events)
        to_save = [participants[wid] for wid in changed]
        to_save.extend(r for r in rivalries if r.id in touched_rivalries)
        if title is not None:
            to_save.append(title)
        if campaign is not None:
            to_save.append(campaign)
        if segment is not None:
            segment.resolve(result.id)
            to_save.append(segment)
        self._save(*to_save)

        self._publish(events)
        return BookingOutcome(result=result, events=events)

    async def narrate(self, outcome: BookingOutcome) -> Optional[str]:
        """Decorate a booked match with prose. Failures leave narration as None."""
        outcome.narration = await narrate_match(
            self.narrator, outcome.result, timeout=self.config.narration_timeout
        )
        return outcome.narration

    def attempt_interference(
        self,
        segment_id: UUID,
        interferer_id: UUID,
        beneficiary_id: UUID,
        interference_type: str,
    ) -> InterferenceResult:
        """
        Interfere in a segment and persist the referee's raised awareness.

        Raises:
            NotFound: If an id or the interference type is unknown
            InvalidStateTransition: If the segment is already resolved
        """
        if interference_type not in DEFAULT_INTERFERENCE_TYPES:
            raise NotFound("InterferenceType", interference_type)
        segment = self.store.get(Segment, segment_id)
        interferer = self._load_character(interferer_id)
        beneficiary = self.store.get(Wrestler, beneficiary_id)

        result = self.interference.attempt_interference(
            segment, interferer, beneficiary, DEFAULT_INTERFERENCE_TYPES[interference_type]
        )
        self._publish(self._commit_interference(segment, result))
        return result

    def consider_interference(
        self,
        segment_id: UUID,
        interferer_id: UUID,
        beneficiary_id: UUID,
    ) -> Optional[InterferenceResult]:
        """
        Let an NPC decide whether to interfere for a wrestler.

        Returns None (and saves nothing) when the NPC stays out of it.
        """
        segment = self.store.get(Segment, segment_id)
        interferer = self._load_character(interferer_id)
        beneficiary = self.store.get(Wrestler, beneficiary_id)

        result = self.interference_ai.consider(segment, interferer, beneficiary)
        if result is None:
            return None
        self._publish(self._commit_interference(segment, result))
        return result

    def add_heat(self, rivalry_id: UUID, delta: int, reason: str) -> list[DomainEvent]:
        rivalry = self.store.get(Rivalry, rivalry_id)
        events = self.heat.add_heat(rivalry, delta, reason)
        self._save(rivalry)
        self._publish(events)
        return events

    def challenge_title(self, wrestler_id: UUID, title_id: UUID) -> ChallengeResult:
        wrestler = self.store.get(Wrestler, wrestler_id)
        title = self.store.get(Title, title_id)
        outcome = self.titles.challenge_for_title(wrestler, title)
        if outcome.success:
            self._save(wrestler, title)
            self._publish(outcome.events)
        return outcome

    def process_match_result(self, campaign_id: UUID, won: bool) -> list[DomainEvent]:
        campaign = self.store.get(Campaign, campaign_id)
        events = self.campaigns.process_match_result(campaign, won)
        self._save(campaign)
        self._publish(events)
        return events

    def advance_chapter(self, campaign_id: UUID) -> list[DomainEvent]:
        campaign = self.store.get(Campaign, campaign_id)
        events = self.campaigns.advance_chapter(campaign)
        self._save(campaign)
        self._publish(events)
        return events

    def purchase_upgrade(self, campaign_id: UUID, upgrade_id: str) -> list[DomainEvent]:
        campaign = self.store.get(Campaign, campaign_id)
        events = self.campaigns.purchase_upgrade(campaign, upgrade_id)
        self._save(campaign)
        self._publish(events)
        return events
