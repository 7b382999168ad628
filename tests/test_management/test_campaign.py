"""Tests for the CampaignStateMachine."""

import pytest

from turnbuckle.core.enums import Alignment, CampaignStatus, TournamentPhase
from turnbuckle.core.models import Campaign
from turnbuckle.errors import (
    AlreadyOwnedUpgrade,
    InsufficientSkillTokens,
    InvalidStateTransition,
    NotFound,
)
from turnbuckle.events import AlignmentShiftEvent
from turnbuckle.management import VALID_TRANSITIONS, CampaignStateMachine


@pytest.fixture
def machine(clock) -> CampaignStateMachine:
    return CampaignStateMachine(clock=clock)


@pytest.fixture
def campaign(machine, rookie) -> Campaign:
    return machine.start_campaign(rookie)


@pytest.fixture
def tournament(rookie) -> Campaign:
    return Campaign(wrestler=rookie, chapter_id="tournament")


def play(machine, campaign, *results: bool) -> list:
    events = []
    for won in results:
        events.extend(machine.process_match_result(campaign, won))
    return events


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    def test_starts_at_first_chapter(self, campaign, clock):
        assert campaign.chapter_id == "beginning"
        assert campaign.tournament_phase == TournamentPhase.QUALIFYING
        assert campaign.is_active
        assert campaign.started_at == clock.now

    def test_one_active_campaign_per_wrestler(self, machine, campaign, rookie):
        with pytest.raises(InvalidStateTransition):
            machine.start_campaign(rookie, existing=[campaign])

    def test_record_and_victory_points(self, machine, campaign):
        play(machine, campaign, True, True, False)
        assert (campaign.matches_played, campaign.wins, campaign.losses) == (3, 2, 1)
        assert campaign.victory_points == 3

    def test_non_tournament_chapter_keeps_phase(self, machine, campaign):
        assert play(machine, campaign, True, True, True) == []
        assert campaign.tournament_phase == TournamentPhase.QUALIFYING


# =============================================================================
# Tournament
# =============================================================================


class TestTournament:
    """Tournament phase transitions."""

    def test_four_losses_fail_to_qualify(self, machine, tournament):
        events = play(machine, tournament, False, False, False, False)

        assert tournament.tournament_phase == TournamentPhase.FAILED_TO_QUALIFY
        assert tournament.is_failed_to_qualify
        assert not tournament.is_finals_phase
        assert not tournament.is_tournament_winner
        assert len(events) == 1
        assert events[0].title == "Failed to qualify"

    def test_failure_happens_once_qualifying_is_out_of_reach(self, machine, tournament):
        play(machine, tournament, False)
        assert tournament.tournament_phase == TournamentPhase.QUALIFYING
        play(machine, tournament, False)
        assert tournament.tournament_phase == TournamentPhase.FAILED_TO_QUALIFY

    def test_wins_reach_finals(self, machine, tournament):
        play(machine, tournament, True, True, True)
        assert tournament.tournament_phase == TournamentPhase.FINALS
        assert tournament.is_finals_phase

        play(machine, tournament, True)
        assert tournament.tournament_phase == TournamentPhase.FINALS
        assert tournament.finals_wins == 1

    def test_finals_wins_take_the_tournament(self, machine, tournament):
        events = play(machine, tournament, True, True, True, True, True)

        assert tournament.tournament_phase == TournamentPhase.TOURNAMENT_WINNER
        assert tournament.is_tournament_winner
        assert tournament.is_finals_phase
        assert not tournament.is_failed_to_qualify
        assert [e.title for e in events] == ["Qualified!", "Tournament winner!"]
        assert [c.to_phase for c in tournament.phase_history] == [
            TournamentPhase.FINALS,
            TournamentPhase.TOURNAMENT_WINNER,
        ]

    def test_six_straight_wins(self, machine, tournament):
        """
        Four qualifying wins then two finals wins.

        Qualifying closes as soon as the third win lands, so the fourth
        "qualifying" win is already the first finals match. The fifth
        win takes the tournament and the sixth is recorded without
        moving the settled phase.
        """
        play(machine, tournament, True, True, True, True)
        assert tournament.is_finals_phase
        assert not tournament.is_tournament_winner

        events = play(machine, tournament, True, True)

        assert tournament.is_finals_phase
        assert tournament.is_tournament_winner
        assert not tournament.is_failed_to_qualify
        assert [e.title for e in events] == ["Tournament winner!"]
        assert (tournament.qualifying_wins, tournament.finals_wins) == (3, 2)
        assert (tournament.matches_played, tournament.wins) == (6, 6)

    def test_finals_loss_eliminates(self, machine, tournament):
        play(machine, tournament, True, True, True, False)
        assert tournament.tournament_phase == TournamentPhase.FINALS_ELIMINATED
        assert tournament.is_finals_phase
        assert not tournament.is_tournament_winner

    def test_terminal_phase_is_sticky(self, machine, tournament):
        play(machine, tournament, False, False)
        events = play(machine, tournament, True, True, True, True)

        assert events == []
        assert tournament.tournament_phase == TournamentPhase.FAILED_TO_QUALIFY
        assert tournament.matches_played == 6

    def test_terminal_phases_have_no_exits(self):
        for phase in TournamentPhase:
            if phase.is_terminal:
                assert VALID_TRANSITIONS[phase] == set()

    def test_can_transition(self, machine, tournament):
        assert machine.can_transition(tournament, TournamentPhase.FINALS)
        assert not machine.can_transition(tournament, TournamentPhase.TOURNAMENT_WINNER)


# =============================================================================
# Chapters
# =============================================================================


class TestChapters:
    def test_chapter_complete_after_three_matches(self, machine, campaign):
        play(machine, campaign, True, False)
        assert not machine.is_chapter_complete(campaign)
        play(machine, campaign, False)
        assert machine.is_chapter_complete(campaign)

    def test_advance_grants_tokens_and_resets(self, machine, campaign):
        play(machine, campaign, True, True, True)
        events = machine.advance_chapter(campaign)

        assert campaign.chapter_id == "tournament"
        assert campaign.completed_chapter_ids == ["beginning"]
        assert campaign.skill_tokens == 8
        assert campaign.matches_played == 0
        assert events[0].title == "Chapter: The Tournament"

    def test_tournament_chapter_completes_when_finished(self, machine, tournament):
        play(machine, tournament, True, True)
        assert not machine.is_chapter_complete(tournament)
        play(machine, tournament, False, False)
        assert machine.is_chapter_complete(tournament)

    def test_cannot_move_backwards(self, machine, tournament):
        with pytest.raises(InvalidStateTransition):
            machine.move_to_chapter(tournament, "beginning")

    def test_unknown_chapter(self, machine, campaign):
        with pytest.raises(NotFound):
            machine.move_to_chapter(campaign, "hall_of_fame")

    def test_move_forward(self, machine, campaign):
        machine.move_to_chapter(campaign, "fighting_champion")
        assert campaign.chapter_id == "fighting_champion"

    def test_advancing_past_last_chapter_completes(self, machine, campaign, clock):
        for _ in range(3):
            machine.advance_chapter(campaign)
        assert campaign.chapter_id == "legacy"

        events = machine.advance_chapter(campaign)

        assert campaign.status == CampaignStatus.COMPLETED
        assert campaign.completed_at == clock.now
        assert events[0].title == "Campaign complete"
        with pytest.raises(InvalidStateTransition):
            machine.process_match_result(campaign, True)


# =============================================================================
# Upgrades
# =============================================================================


class TestUpgrades:
    """Skill token purchases."""

    def test_purchase_deducts_tokens(self, machine, campaign):
        campaign.skill_tokens = 20
        machine.purchase_upgrade(campaign, "heavy_hitter")

        assert campaign.skill_tokens == 12
        assert campaign.upgrade_ids == ["heavy_hitter"]
        assert campaign.stat_bonuses == {"damage": 1}

    def test_second_upgrade_of_same_type_rejected(self, machine, campaign):
        campaign.skill_tokens = 20
        machine.purchase_upgrade(campaign, "heavy_hitter")

        with pytest.raises(AlreadyOwnedUpgrade, match="You already have a permanent upgrade of type: DAMAGE"):
            machine.purchase_upgrade(campaign, "devastator")

        assert campaign.skill_tokens == 12
        assert campaign.upgrade_ids == ["heavy_hitter"]

    def test_same_upgrade_twice_rejected(self, machine, campaign):
        campaign.skill_tokens = 20
        machine.purchase_upgrade(campaign, "iron_man")
        with pytest.raises(AlreadyOwnedUpgrade, match="You already own the upgrade: Iron Man"):
            machine.purchase_upgrade(campaign, "iron_man")

    def test_insufficient_tokens(self, machine, campaign):
        campaign.skill_tokens = 5
        with pytest.raises(InsufficientSkillTokens) as exc_info:
            machine.purchase_upgrade(campaign, "iron_man")
        assert exc_info.value.required == 8
        assert exc_info.value.available == 5
        assert campaign.upgrade_ids == []

    def test_unknown_upgrade(self, machine, campaign):
        with pytest.raises(NotFound):
            machine.purchase_upgrade(campaign, "time_travel")

    def test_available_upgrades_hide_owned_types(self, machine, campaign):
        campaign.skill_tokens = 8
        machine.purchase_upgrade(campaign, "devastator")
        ids = {u.id for u in machine.available_upgrades(campaign)}
        assert ids == {"iron_man", "marathon_man", "crowd_favorite"}


# =============================================================================
# Alignment
# =============================================================================


class TestAlignment:
    """The HEEL 5 ... NEUTRAL 0 ... FACE 5 track."""

    def test_starts_neutral(self, campaign):
        assert campaign.alignment == Alignment.NEUTRAL
        assert campaign.alignment_level == 0

    def test_start_with_alignment(self, machine, rookie):
        campaign = machine.start_campaign(rookie, alignment=Alignment.HEEL)
        assert (campaign.alignment, campaign.alignment_level) == (Alignment.HEEL, 1)

    def test_neutral_turns_face(self, machine, campaign):
        events = machine.shift_alignment(campaign, 1, reason="shouted advice")

        assert (campaign.alignment, campaign.alignment_level) == (Alignment.FACE, 1)
        shift = events[0]
        assert isinstance(shift, AlignmentShiftEvent)
        assert shift.turned
        assert (shift.level_before, shift.level_after) == (0, 1)
        assert events[1].title == "Alignment turn"

    def test_neutral_turns_heel(self, machine, campaign):
        machine.shift_alignment(campaign, -1)
        assert (campaign.alignment, campaign.alignment_level) == (Alignment.HEEL, 1)

    def test_heel_goes_deeper(self, machine, campaign):
        machine.shift_alignment(campaign, -1)
        events = machine.shift_alignment(campaign, -1)

        assert (campaign.alignment, campaign.alignment_level) == (Alignment.HEEL, 2)
        assert len(events) == 1
        assert not events[0].turned

    def test_level_caps_at_five(self, machine, campaign):
        for _ in range(8):
            machine.shift_alignment(campaign, 1)
        assert (campaign.alignment, campaign.alignment_level) == (Alignment.FACE, 5)

    def test_shifting_back_lands_on_neutral(self, machine, campaign):
        machine.shift_alignment(campaign, 1)
        machine.shift_alignment(campaign, -3)
        assert (campaign.alignment, campaign.alignment_level) == (Alignment.NEUTRAL, 0)

    def test_face_step_toward_neutral_for_heel(self, machine, campaign):
        machine.shift_alignment(campaign, -3)
        machine.shift_alignment(campaign, 1)
        assert (campaign.alignment, campaign.alignment_level) == (Alignment.HEEL, 2)

    def test_zero_is_a_no_op(self, machine, campaign):
        assert machine.shift_alignment(campaign, 0) == []
        assert campaign.alignment == Alignment.NEUTRAL
