"""Match shapes, finishes and stipulation rules."""

from enum import Enum, auto


class MatchType(Enum):
    """How the teams in a match are arranged."""

    ONE_ON_ONE = auto()
    TAG_TEAM = auto()
    HANDICAP = auto()
    TRIPLE_THREAT = auto()
    FATAL_FOUR_WAY = auto()
    MULTI_TEAM = auto()

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()

    @classmethod
    def for_team_sizes(cls, sizes: list[int]) -> "MatchType":
        """Label a match from the sizes of its teams."""
        if len(sizes) == 3:
            return cls.TRIPLE_THREAT
        if len(sizes) == 4:
            return cls.FATAL_FOUR_WAY
        if len(sizes) > 4:
            return cls.MULTI_TEAM
        if len(set(sizes)) > 1:
            return cls.HANDICAP
        if sizes and sizes[0] == 1:
            return cls.ONE_ON_ONE
        return cls.TAG_TEAM


class MatchFinish(Enum):
    """How the deciding fall came about."""

    PINFALL = auto()
    DISQUALIFICATION = auto()


class BumpRule(Enum):
    """Which side of a match takes a bump from the stipulation."""

    NONE = auto()
    WINNERS = auto()
    LOSERS = auto()
    ALL = auto()
