"""Rivalry intensity bands."""

from enum import Enum
from typing import Optional


class RivalryIntensity(Enum):
    """Band of a rivalry's heat, with the booking rule it implies."""

    SIMMERING = ("Simmering", "😐", 0, 9, "Early stages")
    HEATED = ("Heated", "🔥", 10, 19, "Must wrestle at next show")
    INTENSE = ("Intense", "💥", 20, 29, "Can attempt resolution")
    EXPLOSIVE = ("Explosive", "🌋", 30, None, "Requires stipulation match")

    def __init__(
        self,
        display_name: str,
        emoji: str,
        min_heat: int,
        max_heat: Optional[int],
        description: str,
    ):
        self.display_name = display_name
        self.emoji = emoji
        self.min_heat = min_heat
        self.max_heat = max_heat
        self.description = description

    @classmethod
    def from_heat(cls, heat: int) -> "RivalryIntensity":
        """Band for a heat value; anything below the first band is SIMMERING."""
        for intensity in reversed(list(cls)):
            if heat >= intensity.min_heat:
                return intensity
        return cls.SIMMERING

    @property
    def range_display(self) -> str:
        if self.max_heat is None:
            return f"{self.min_heat}+ heat"
        return f"{self.min_heat}-{self.max_heat} heat"

    @property
    def display_with_emoji(self) -> str:
        return f"{self.emoji} {self.display_name}"
