"""Wrestler and title tier definitions."""

from enum import Enum, auto


class WrestlerTier(Enum):
    """Career rank of a wrestler, derived from fan count."""

    ROOKIE = auto()
    RISER = auto()
    CONTENDER = auto()
    MIDCARDER = auto()
    MAIN_EVENTER = auto()
    ICON = auto()

    @property
    def display_name(self) -> str:
        return _TIER_NAMES[self]

    @property
    def emoji(self) -> str:
        return _TIER_EMOJI[self]


_TIER_NAMES = {
    WrestlerTier.ROOKIE: "Rookie",
    WrestlerTier.RISER: "Riser",
    WrestlerTier.CONTENDER: "Contender",
    WrestlerTier.MIDCARDER: "Midcard Champion",
    WrestlerTier.MAIN_EVENTER: "Main Eventer",
    WrestlerTier.ICON: "Icon",
}

_TIER_EMOJI = {
    WrestlerTier.ROOKIE: "🌱",
    WrestlerTier.RISER: "🌿",
    WrestlerTier.CONTENDER: "🎯",
    WrestlerTier.MIDCARDER: "🥈",
    WrestlerTier.MAIN_EVENTER: "🥇",
    WrestlerTier.ICON: "👑",
}


class TitleTier(Enum):
    """Championship prestige level."""

    EXTREME = auto()
    TAG_TEAM = auto()
    INTERTEMPORAL = auto()
    WORLD = auto()

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def prestige(self) -> int:
        """0 for the least prestigious title, rising with tier."""
        return list(TitleTier).index(self)
