"""Campaign (career mode) state for one wrestler."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from turnbuckle.core.enums import Alignment, CampaignStatus, TournamentPhase
from turnbuckle.core.models.wrestler import Wrestler


@dataclass
class PhaseChange:
    """Record of a tournament phase transition."""

    from_phase: TournamentPhase
    to_phase: TournamentPhase
    reason: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class Campaign:
    """
    A wrestler's run through the scripted chapters.

    Phase flags are derived from tournament_phase so they can never
    disagree with each other.
    """

    wrestler: Wrestler
    chapter_id: str
    id: UUID = field(default_factory=uuid4)
    status: CampaignStatus = CampaignStatus.ACTIVE
    alignment: Alignment = Alignment.NEUTRAL
    alignment_level: int = 0  # 0 when NEUTRAL, otherwise 1-5 toward the alignment
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    # Chapter-scoped progress
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    victory_points: int = 0

    # Tournament sub-flow
    tournament_phase: TournamentPhase = TournamentPhase.QUALIFYING
    qualifying_wins: int = 0
    qualifying_losses: int = 0
    finals_wins: int = 0
    finals_losses: int = 0
    phase_history: list[PhaseChange] = field(default_factory=list)

    # Career-wide
    completed_chapter_ids: list[str] = field(default_factory=list)
    skill_tokens: int = 0
    upgrade_ids: list[str] = field(default_factory=list)
    stat_bonuses: dict[str, int] = field(default_factory=dict)

    version: int = 0

    @property
    def is_finals_phase(self) -> bool:
        return self.tournament_phase.reached_finals

    @property
    def is_failed_to_qualify(self) -> bool:
        return self.tournament_phase == TournamentPhase.FAILED_TO_QUALIFY

    @property
    def is_tournament_winner(self) -> bool:
        return self.tournament_phase == TournamentPhase.TOURNAMENT_WINNER

    @property
    def is_active(self) -> bool:
        return self.status == CampaignStatus.ACTIVE

    @property
    def qualifying_matches_played(self) -> int:
        return self.qualifying_wins + self.qualifying_losses

    @property
    def finals_matches_played(self) -> int:
        return self.finals_wins + self.finals_losses

    def owns_upgrade(self, upgrade_id: str) -> bool:
        return upgrade_id in self.upgrade_ids

    def reset_chapter_progress(self) -> None:
        """Clear counters that belong to a single chapter."""
        self.matches_played = 0
        self.wins = 0
        self.losses = 0
        self.victory_points = 0
        self.tournament_phase = TournamentPhase.QUALIFYING
        self.qualifying_wins = 0
        self.qualifying_losses = 0
        self.finals_wins = 0
        self.finals_losses = 0
        self.phase_history.clear()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "wrestler_id": str(self.wrestler.id),
            "chapter_id": self.chapter_id,
            "status": self.status.value,
            "alignment": self.alignment.value,
            "alignment_level": self.alignment_level,
            "matches_played": self.matches_played,
            "wins": self.wins,
            "losses": self.losses,
            "victory_points": self.victory_points,
            "tournament_phase": self.tournament_phase.value,
            "is_finals_phase": self.is_finals_phase,
            "is_failed_to_qualify": self.is_failed_to_qualify,
            "is_tournament_winner": self.is_tournament_winner,
            "qualifying_wins": self.qualifying_wins,
            "qualifying_losses": self.qualifying_losses,
            "finals_wins": self.finals_wins,
            "finals_losses": self.finals_losses,
            "completed_chapter_ids": list(self.completed_chapter_ids),
            "skill_tokens": self.skill_tokens,
            "upgrade_ids": list(self.upgrade_ids),
            "stat_bonuses": dict(self.stat_bonuses),
        }
