"""Campaign progression states."""

from enum import Enum


class TournamentPhase(str, Enum):
    """Where a campaign stands inside its chapter's tournament."""

    QUALIFYING = "QUALIFYING"
    FINALS = "FINALS"
    FAILED_TO_QUALIFY = "FAILED_TO_QUALIFY"
    FINALS_ELIMINATED = "FINALS_ELIMINATED"
    TOURNAMENT_WINNER = "TOURNAMENT_WINNER"

    @property
    def is_terminal(self) -> bool:
        return self in (
            TournamentPhase.FAILED_TO_QUALIFY,
            TournamentPhase.FINALS_ELIMINATED,
            TournamentPhase.TOURNAMENT_WINNER,
        )

    @property
    def reached_finals(self) -> bool:
        return self in (
            TournamentPhase.FINALS,
            TournamentPhase.FINALS_ELIMINATED,
            TournamentPhase.TOURNAMENT_WINNER,
        )


class CampaignStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
