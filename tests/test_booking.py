"""End-to-end tests for the BookingService."""

import asyncio
import random

import pytest

from turnbuckle.booking import BookingService, apply_wrestler_events
from turnbuckle.config import EngineConfig
from turnbuckle.core.enums import Alignment, MatchType, TournamentPhase
from turnbuckle.core.models import Campaign, Npc, Rivalry, Segment, Title, Wrestler
from turnbuckle.errors import ConcurrentModification, InvalidStateTransition, NotFound
from turnbuckle.events import AlignmentShiftEvent, EventBus, FanAwardedEvent, WrestlerBumpEvent
from turnbuckle.logging import ShowLog


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def show_log(bus) -> ShowLog:
    log = ShowLog(name="Monday Night")
    log.attach(bus)
    return log


@pytest.fixture
def booked(store, main_eventer, icon, rivalry, world_title, segment, referee, heel_manager):
    segment.referee_id = referee.id
    for entity in (main_eventer, icon, rivalry, world_title, segment, referee, heel_manager):
        store.add(entity)
    return store


@pytest.fixture
def service(booked, bus) -> BookingService:
    return BookingService(booked, bus=bus, config=EngineConfig(seed=7, heat_floor=0))


class FixedNarrator:
    async def generate_text(self, prompt: str) -> str:
        return "An instant classic."


class LuckyRoll(random.Random):
    def random(self):
        return 0.0


def bump_behind_the_scenes(store, kind, entity_id):
    """Save an untouched copy so anything loaded earlier goes stale."""
    racing = store.get(kind, entity_id)
    store.save(racing, expected_version=racing.version)


# =============================================================================
# Matches
# =============================================================================


class TestResolveMatch:
    """Booking a match commits every consequence."""

    def test_fans_are_applied_and_saved(self, service, store, main_eventer, icon):
        outcome = service.resolve_match([main_eventer.id], [icon.id])

        awarded = {e.wrestler_id: e.amount for e in outcome.events if isinstance(e, FanAwardedEvent)}
        assert store.get(Wrestler, main_eventer.id).fans == 120_000 + awarded[main_eventer.id]
        assert store.get(Wrestler, icon.id).fans == max(0, 200_000 + awarded[icon.id])
        assert store.get(Wrestler, main_eventer.id).version == 1

    def test_match_type_inferred(self, service, main_eventer, icon):
        outcome = service.resolve_match([main_eventer.id], [icon.id])
        assert outcome.result.match_type == MatchType.ONE_ON_ONE

    def test_rivalry_heat_from_match(self, service, store, rivalry, main_eventer, icon):
        service.resolve_match([main_eventer.id], [icon.id])
        assert store.get(Rivalry, rivalry.id).heat == 2

    def test_title_match(self, service, store, world_title, main_eventer, icon):
        outcome = service.resolve_match([main_eventer.id], [icon.id], title_id=world_title.id)

        title = store.get(Title, world_title.id)
        assert title.champion.id == outcome.result.winning_team.primary.id
        assert title.current_reign.won_at_match_id == outcome.result.id

    def test_segment_is_resolved(self, service, store, segment, main_eventer, icon):
        outcome = service.resolve_match([main_eventer.id], [icon.id], segment_id=segment.id)

        stored = store.get(Segment, segment.id)
        assert stored.is_resolved
        assert stored.match_id == outcome.result.id

    def test_campaign_match_counts(self, service, store, main_eventer, icon):
        campaign = Campaign(wrestler=main_eventer, chapter_id="tournament")
        store.add(campaign)

        service.resolve_match([main_eventer.id], [icon.id], campaign_id=campaign.id)

        stored = store.get(Campaign, campaign.id)
        assert stored.matches_played == 1
        assert stored.qualifying_wins + stored.qualifying_losses == 1

    def test_events_reach_subscribers(self, service, show_log, main_eventer, icon):
        service.resolve_match([main_eventer.id], [icon.id])
        assert len(show_log.entries_of("FANS")) == 2
        assert len(show_log.entries_of("HEAT")) == 1

    def test_failing_subscriber_does_not_undo_booking(self, service, bus, store, main_eventer, icon):
        def broken(event):
            raise RuntimeError("inbox offline")

        bus.subscribe_all(broken)
        outcome = service.resolve_match([main_eventer.id], [icon.id])

        assert store.get(Wrestler, main_eventer.id).version == 1
        assert bus.failure_count == len(outcome.events)

    def test_segment_cannot_be_booked_twice(self, service, store, segment, main_eventer, icon):
        first = service.resolve_match([main_eventer.id], [icon.id], segment_id=segment.id)

        with pytest.raises(InvalidStateTransition):
            service.resolve_match([main_eventer.id], [icon.id], segment_id=segment.id)

        assert store.get(Segment, segment.id).match_id == first.result.id
        assert store.get(Wrestler, main_eventer.id).version == 1

    def test_stale_campaign_commits_nothing(self, service, store, rivalry, main_eventer, icon):
        campaign = Campaign(wrestler=main_eventer, chapter_id="tournament")
        store.add(campaign)
        process = service.campaigns.process_match_result

        def racing_process(loaded, won):
            bump_behind_the_scenes(store, Campaign, campaign.id)
            return process(loaded, won)

        service.campaigns.process_match_result = racing_process
        with pytest.raises(ConcurrentModification):
            service.resolve_match([main_eventer.id], [icon.id], campaign_id=campaign.id)

        stored = store.get(Wrestler, main_eventer.id)
        assert stored.version == 0
        assert stored.fans == 120_000
        assert store.get(Rivalry, rivalry.id).heat == 0

    def test_unknown_wrestler(self, service, main_eventer):
        with pytest.raises(NotFound):
            service.resolve_match([main_eventer.id], [Wrestler(name="Nobody").id])

    def test_narration(self, service, main_eventer, icon):
        service.narrator = FixedNarrator()
        outcome = service.resolve_match([main_eventer.id], [icon.id])

        assert asyncio.run(service.narrate(outcome)) == "An instant classic."
        assert outcome.narration == "An instant classic."

    def test_no_narrator_leaves_narration_empty(self, service, main_eventer, icon):
        outcome = service.resolve_match([main_eventer.id], [icon.id])
        assert asyncio.run(service.narrate(outcome)) is None


# =============================================================================
# Interference
# =============================================================================


class TestInterference:
    def test_awareness_is_persisted(self, service, store, segment, heel_manager, main_eventer):
        result = service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "CHEAP_SHOT")

        assert result.awareness_after == 20
        assert store.get(Segment, segment.id).referee_awareness == 20

    def test_unknown_type(self, service, segment, heel_manager, main_eventer):
        with pytest.raises(NotFound):
            service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "MOONSAULT")

    def test_resolved_segment(self, service, segment, heel_manager, main_eventer, icon):
        service.resolve_match([main_eventer.id], [icon.id], segment_id=segment.id)
        with pytest.raises(InvalidStateTransition):
            service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "DISTRACTION")

    def test_disqualification_decides_match(self, service, store, segment, heel_manager, main_eventer, icon):
        stored = store.get(Segment, segment.id)
        stored.interference.level = 90
        store.save(stored, expected_version=stored.version)

        attempt = service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "WEAPON_SLIDE")
        outcome = service.resolve_match(
            [main_eventer.id], [icon.id], segment_id=segment.id, interference=[attempt]
        )

        assert attempt.disqualified
        assert outcome.result.winning_team.primary.id == icon.id

    def test_interference_is_logged_once(self, service, show_log, segment, heel_manager, main_eventer, icon):
        attempt = service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "DISTRACTION")
        service.resolve_match([main_eventer.id], [icon.id], segment_id=segment.id, interference=[attempt])

        assert len(show_log.entries_of("INTERFERENCE")) == 1
        assert attempt.events[0].match_id is None

    def test_success_shifts_campaign_alignment(self, service, store, segment, heel_manager, main_eventer):
        campaign = Campaign(wrestler=main_eventer, chapter_id="tournament")
        store.add(campaign)
        service.interference.rng = LuckyRoll()
        seen = []
        service.bus.subscribe(AlignmentShiftEvent, seen.append)

        service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "LEGAL_ADVICE")
        service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "LEGAL_ADVICE")

        stored = store.get(Campaign, campaign.id)
        assert (stored.alignment, stored.alignment_level) == (Alignment.FACE, 2)
        assert [e.level_after for e in seen] == [1, 2]
        assert store.get(Segment, segment.id).version == 2

    def test_heel_success_shifts_campaign_heel(self, service, store, segment, heel_manager, main_eventer):
        campaign = Campaign(wrestler=main_eventer, chapter_id="tournament")
        store.add(campaign)
        service.interference.rng = LuckyRoll()

        service.attempt_interference(segment.id, heel_manager.id, main_eventer.id, "CHEAP_SHOT")

        stored = store.get(Campaign, campaign.id)
        assert (stored.alignment, stored.alignment_level) == (Alignment.HEEL, 1)

    def test_no_campaign_no_shift(self, service, store, segment, heel_manager, icon):
        service.interference.rng = LuckyRoll()
        result = service.attempt_interference(segment.id, heel_manager.id, icon.id, "LEGAL_ADVICE")

        assert result.alignment_shift == 1
        assert store.get(Segment, segment.id).version == 1

    def test_face_npc_never_interferes(self, service, store, segment, main_eventer):
        face = Npc(name="Mick Foley", role="Commissioner", alignment=Alignment.FACE)
        store.add(face)
        service.interference_ai.probability = 1.0

        assert service.consider_interference(segment.id, face.id, main_eventer.id) is None
        assert store.get(Segment, segment.id).referee_awareness == 0


# =============================================================================
# Titles, Heat and Campaigns
# =============================================================================


class TestCommands:
    def test_challenge_title(self, service, store, main_eventer, world_title):
        outcome = service.challenge_title(main_eventer.id, world_title.id)

        assert outcome.success
        assert store.get(Wrestler, main_eventer.id).fans == 105_000
        assert store.get(Title, world_title.id).is_challenger(main_eventer)

    def test_stale_title_keeps_fans(self, service, store, main_eventer, world_title):
        challenge = service.titles.challenge_for_title

        def racing_challenge(wrestler, title):
            bump_behind_the_scenes(store, Title, world_title.id)
            return challenge(wrestler, title)

        service.titles.challenge_for_title = racing_challenge
        with pytest.raises(ConcurrentModification):
            service.challenge_title(main_eventer.id, world_title.id)

        assert store.get(Wrestler, main_eventer.id).fans == 120_000
        assert store.get(Wrestler, main_eventer.id).version == 0
        assert not store.get(Title, world_title.id).is_challenger(main_eventer)

    def test_failed_challenge_saves_nothing(self, service, store, world_title):
        contender = Wrestler(name="Contender Carla", fans=45_000)
        store.add(contender)

        outcome = service.challenge_title(contender.id, world_title.id)

        assert not outcome.success
        assert store.get(Wrestler, contender.id).version == 0

    def test_stale_copy_cannot_overwrite(self, service, store, main_eventer, world_title):
        stale = store.get(Wrestler, main_eventer.id)
        service.challenge_title(main_eventer.id, world_title.id)

        stale.add_fans(1_000_000)
        with pytest.raises(ConcurrentModification):
            store.save(stale, expected_version=stale.version)

    def test_add_heat(self, service, store, rivalry):
        service.add_heat(rivalry.id, 12, "Parking lot brawl")
        assert store.get(Rivalry, rivalry.id).heat == 12

    def test_campaign_commands(self, service, store, rookie):
        store.add(rookie)
        campaign = service.campaigns.start_campaign(rookie)
        store.add(campaign)

        for _ in range(3):
            service.process_match_result(campaign.id, won=True)
        service.advance_chapter(campaign.id)
        service.purchase_upgrade(campaign.id, "iron_man")

        stored = store.get(Campaign, campaign.id)
        assert stored.chapter_id == "tournament"
        assert stored.tournament_phase == TournamentPhase.QUALIFYING
        assert stored.skill_tokens == 0
        assert stored.upgrade_ids == ["iron_man"]


class TestApplyWrestlerEvents:
    def test_only_known_wrestlers_change(self, main_eventer, icon):
        events = [
            FanAwardedEvent(wrestler_id=main_eventer.id, amount=3_000),
            WrestlerBumpEvent(wrestler_id=icon.id),
            FanAwardedEvent(wrestler_id=Wrestler(name="Elsewhere").id, amount=3_000),
        ]

        changed = apply_wrestler_events({main_eventer.id: main_eventer, icon.id: icon}, events)

        assert changed == {main_eventer.id, icon.id}
        assert main_eventer.fans == 123_000
        assert icon.bumps == 1
