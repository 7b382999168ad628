"""Character-level enumerations."""

from enum import Enum, auto


class Alignment(str, Enum):
    """Storyline alignment of a wrestler or NPC."""

    FACE = "FACE"
    HEEL = "HEEL"
    NEUTRAL = "NEUTRAL"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class InjurySeverity(Enum):
    """How badly a wrestler is hurt."""

    MINOR = auto()
    MODERATE = auto()
    SEVERE = auto()
    CRITICAL = auto()

    @property
    def health_penalty(self) -> int:
        return _SEVERITY_PENALTY[self]

    @property
    def shows_out(self) -> int:
        """Shows the wrestler is expected to miss."""
        return _SEVERITY_SHOWS_OUT[self]


_SEVERITY_PENALTY = {
    InjurySeverity.MINOR: 1,
    InjurySeverity.MODERATE: 2,
    InjurySeverity.SEVERE: 3,
    InjurySeverity.CRITICAL: 4,
}

_SEVERITY_SHOWS_OUT = {
    InjurySeverity.MINOR: 1,
    InjurySeverity.MODERATE: 3,
    InjurySeverity.SEVERE: 6,
    InjurySeverity.CRITICAL: 12,
}
