"""Booking enumerations."""

from turnbuckle.core.enums.campaign import CampaignStatus, TournamentPhase
from turnbuckle.core.enums.matches import BumpRule, MatchFinish, MatchType
from turnbuckle.core.enums.people import Alignment, Gender, InjurySeverity
from turnbuckle.core.enums.rivalry import RivalryIntensity
from turnbuckle.core.enums.tiers import TitleTier, WrestlerTier

__all__ = [
    "Alignment",
    "BumpRule",
    "CampaignStatus",
    "Gender",
    "InjurySeverity",
    "MatchFinish",
    "MatchType",
    "RivalryIntensity",
    "TitleTier",
    "TournamentPhase",
    "WrestlerTier",
]
