"""Booking domain models."""

from turnbuckle.core.models.campaign import Campaign, PhaseChange
from turnbuckle.core.models.match import MatchParticipant, MatchResult, MatchTeam
from turnbuckle.core.models.rivalry import HeatEvent, Rivalry
from turnbuckle.core.models.segment import AwarenessChange, InterferenceState, Segment
from turnbuckle.core.models.title import Title, TitleReign, format_reign_length
from turnbuckle.core.models.wrestler import Faction, Injury, Npc, Wrestler

__all__ = [
    "AwarenessChange",
    "Campaign",
    "Faction",
    "HeatEvent",
    "Injury",
    "InterferenceState",
    "MatchParticipant",
    "MatchResult",
    "MatchTeam",
    "Npc",
    "PhaseChange",
    "Rivalry",
    "Segment",
    "Title",
    "TitleReign",
    "Wrestler",
    "format_reign_length",
]
