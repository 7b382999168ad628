"""Match teams and results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from turnbuckle.core.enums import MatchFinish, MatchType
from turnbuckle.core.models.wrestler import Wrestler
from turnbuckle.core.tables import Stipulation

if TYPE_CHECKING:
    from turnbuckle.events.types import DomainEvent
    from turnbuckle.simulation.interference import InterferenceResult


@dataclass
class MatchTeam:
    """
    One side of a match.

    Member order matters: the first member is the team's primary wrestler,
    the one credited with the fall and awarded any title on the line.
    """

    members: list[Wrestler] = field(default_factory=list)
    label: str = ""

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def is_empty(self) -> bool:
        return not self.members

    @property
    def primary(self) -> Optional[Wrestler]:
        return self.members[0] if self.members else None

    @property
    def member_ids(self) -> set[UUID]:
        return {w.id for w in self.members}

    @property
    def name(self) -> str:
        if self.label:
            return self.label
        return " & ".join(w.name for w in self.members) or "(empty team)"

    def has_member(self, wrestler: Wrestler) -> bool:
        return wrestler.id in self.member_ids

    def __str__(self) -> str:
        return self.name


@dataclass
class MatchParticipant:
    """Participant entry on a result."""

    wrestler_id: UUID
    wrestler_name: str
    team_name: str
    is_winner: bool


@dataclass
class MatchResult:
    """Outcome of a resolved match."""

    match_type: MatchType
    teams: list[MatchTeam]
    winning_team: MatchTeam
    duration_minutes: int
    rating: float
    stipulation: Optional[Stipulation] = None
    finish: MatchFinish = MatchFinish.PINFALL
    win_probability: float = 0.5  # pre-match chance the winning side had
    id: UUID = field(default_factory=uuid4)
    resolved_at: datetime = field(default_factory=datetime.now)
    interference: list["InterferenceResult"] = field(default_factory=list)
    events: list["DomainEvent"] = field(default_factory=list)

    @property
    def participants(self) -> list[MatchParticipant]:
        return [
            MatchParticipant(
                wrestler_id=w.id,
                wrestler_name=w.name,
                team_name=team.name,
                is_winner=team is self.winning_team,
            )
            for team in self.teams
            for w in team.members
        ]

    @property
    def winners(self) -> list[Wrestler]:
        return list(self.winning_team.members)

    @property
    def losers(self) -> list[Wrestler]:
        return [w for team in self.teams if team is not self.winning_team for w in team.members]

    @property
    def losing_teams(self) -> list[MatchTeam]:
        return [team for team in self.teams if team is not self.winning_team]

    def is_winner(self, wrestler: Wrestler) -> bool:
        return self.winning_team.has_member(wrestler)

    def involves(self, wrestler: Wrestler) -> bool:
        return any(team.has_member(wrestler) for team in self.teams)

    @property
    def star_display(self) -> str:
        full = int(self.rating)
        text = "★" * full
        if self.rating - full >= 0.5:
            text += "½"
        return text

    @property
    def summary(self) -> str:
        stip = ""
        if self.stipulation and not self.stipulation.is_standard:
            stip = f" ({self.stipulation.name})"
        vs = " vs ".join(team.name for team in self.teams)
        how = "by disqualification" if self.finish == MatchFinish.DISQUALIFICATION else "by pinfall"
        return (
            f"{vs}{stip}: {self.winning_team.name} win {how} "
            f"after {self.duration_minutes} min, {self.rating:.2f} stars"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "match_type": self.match_type.name,
            "teams": [[str(w.id) for w in team.members] for team in self.teams],
            "winning_team": self.teams.index(self.winning_team),
            "participants": [
                {
                    "wrestler_id": str(p.wrestler_id),
                    "wrestler_name": p.wrestler_name,
                    "team_name": p.team_name,
                    "is_winner": p.is_winner,
                }
                for p in self.participants
            ],
            "duration_minutes": self.duration_minutes,
            "rating": self.rating,
            "stipulation": self.stipulation.name if self.stipulation else None,
            "finish": self.finish.name,
            "resolved_at": self.resolved_at.isoformat(),
        }
