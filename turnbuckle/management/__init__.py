"""Booking management: rivalries, titles, campaigns and health."""

from turnbuckle.management.campaign import VALID_TRANSITIONS, CampaignStateMachine
from turnbuckle.management.chapters import (
    DEFAULT_CHAPTERS,
    DEFAULT_UPGRADES,
    Chapter,
    ChapterCriteria,
    ChapterRules,
    ChapterTable,
    TournamentRules,
    Upgrade,
    UpgradeCatalogue,
    load_chapter_table,
    load_upgrade_catalogue,
)
from turnbuckle.management.heat import HeatTracker, ResolutionAttempt, RivalryStats
from turnbuckle.management.titles import ChallengeError, ChallengeResult, TitleLedger

__all__ = [
    "CampaignStateMachine",
    "ChallengeError",
    "ChallengeResult",
    "Chapter",
    "ChapterCriteria",
    "ChapterRules",
    "ChapterTable",
    "DEFAULT_CHAPTERS",
    "DEFAULT_UPGRADES",
    "HeatTracker",
    "ResolutionAttempt",
    "RivalryStats",
    "TitleLedger",
    "TournamentRules",
    "Upgrade",
    "UpgradeCatalogue",
    "VALID_TRANSITIONS",
    "load_chapter_table",
    "load_upgrade_catalogue",
]
