"""Base interface for match resolution."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from turnbuckle.core.enums import MatchType
    from turnbuckle.core.models import MatchResult, MatchTeam
    from turnbuckle.core.tables import Stipulation
    from turnbuckle.simulation.interference import InterferenceResult


class MatchResolverBase(ABC):
    """
    Protocol for match resolution strategies.

    Implementations decide who wins a match, how long it goes and how
    good it was. All resolvers share the same interface so a booking
    service can swap between them (for example a scripted resolver
    for predetermined finishes).
    """

    @abstractmethod
    def resolve(
        self,
        team_a: "MatchTeam",
        team_b: "MatchTeam",
        match_type: "MatchType",
        stipulation: Optional["Stipulation"] = None,
        interference: Sequence["InterferenceResult"] = (),
    ) -> "MatchResult":
        """
        Resolve a two-sided match.

        Args:
            team_a: First side
            team_b: Second side
            match_type: How the teams are arranged
            stipulation: Optional special rules
            interference: Interference already attempted during the segment

        Returns:
            MatchResult with winner, duration, rating and emitted events

        Raises:
            InvalidTeamComposition: If either team is empty or they overlap
        """
        ...

    @abstractmethod
    def resolve_multi_team(
        self,
        teams: Sequence["MatchTeam"],
        match_type: "MatchType",
        stipulation: Optional["Stipulation"] = None,
    ) -> "MatchResult":
        """Resolve a match between three or more sides."""
        ...
