"""Campaign chapter and upgrade catalogues.

Chapters and upgrades are data, not code: they load from JSON and are
validated with pydantic. The built-in catalogue below is used when no
file is configured.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from turnbuckle.errors import NotFound

logger = logging.getLogger(__name__)


# === Chapters ===

class TournamentRules(BaseModel):
    """Qualifying and finals requirements for a tournament chapter."""
    qualifying_matches: int = Field(default=4, ge=1)
    qualifying_wins_required: int = Field(default=3, ge=1)
    finals_matches: int = Field(default=2, ge=1)
    finals_wins_required: int = Field(default=2, ge=1)

    @model_validator(mode="after")
    def _reachable(self) -> "TournamentRules":
        if self.qualifying_wins_required > self.qualifying_matches:
            raise ValueError("qualifying_wins_required exceeds qualifying_matches")
        if self.finals_wins_required > self.finals_matches:
            raise ValueError("finals_wins_required exceeds finals_matches")
        return self


class ChapterRules(BaseModel):
    """Scoring for matches played inside a chapter."""
    victory_points_win: int = 2
    victory_points_loss: int = -1
    skill_tokens_on_completion: int = Field(default=8, ge=0)


class ChapterCriteria(BaseModel):
    """
    Conditions on campaign state. Unset fields are not checked.
    """
    min_victory_points: Optional[int] = None
    max_victory_points: Optional[int] = None
    min_matches_played: Optional[int] = None
    min_wins: Optional[int] = None
    tournament_winner: Optional[bool] = None
    failed_to_qualify: Optional[bool] = None
    tournament_finished: Optional[bool] = None
    required_chapter_ids: list[str] = Field(default_factory=list)


class Chapter(BaseModel):
    """One chapter of the campaign."""
    id: str
    title: str
    description: str = ""
    rules: ChapterRules = Field(default_factory=ChapterRules)
    tournament: Optional[TournamentRules] = None
    # Any one of these criteria sets completes the chapter
    exit_criteria: list[ChapterCriteria] = Field(default_factory=list)

    @property
    def is_tournament(self) -> bool:
        return self.tournament is not None


class ChapterTable(BaseModel):
    """Ordered chapters; campaigns move through them front to back."""
    chapters: list[Chapter]

    @model_validator(mode="after")
    def _unique_ids(self) -> "ChapterTable":
        if not self.chapters:
            raise ValueError("a chapter table needs at least one chapter")
        ids = [c.id for c in self.chapters]
        if len(ids) != len(set(ids)):
            raise ValueError("chapter ids must be unique")
        return self

    @property
    def first(self) -> Chapter:
        return self.chapters[0]

    def get(self, chapter_id: str) -> Chapter:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        raise NotFound("Chapter", chapter_id)

    def index_of(self, chapter_id: str) -> int:
        return self.chapters.index(self.get(chapter_id))

    def next_after(self, chapter_id: str) -> Optional[Chapter]:
        idx = self.index_of(chapter_id)
        return self.chapters[idx + 1] if idx + 1 < len(self.chapters) else None


# === Upgrades ===

class Upgrade(BaseModel):
    """A permanent skill purchased with skill tokens."""
    id: str
    name: str
    type: str  # one upgrade per type
    cost: int = Field(ge=0)
    description: str = ""
    effects: dict[str, int] = Field(default_factory=dict)


class UpgradeCatalogue(BaseModel):
    upgrades: list[Upgrade]

    def get(self, upgrade_id: str) -> Upgrade:
        for upgrade in self.upgrades:
            if upgrade.id == upgrade_id:
                return upgrade
        raise NotFound("Upgrade", upgrade_id)

    def of_type(self, upgrade_type: str) -> list[Upgrade]:
        return [u for u in self.upgrades if u.type == upgrade_type]


# === Built-in catalogue ===

DEFAULT_CHAPTERS = ChapterTable(chapters=[
    Chapter(
        id="beginning",
        title="The Beginning",
        description="Prove yourself on the undercard.",
        exit_criteria=[ChapterCriteria(min_matches_played=3)],
    ),
    Chapter(
        id="tournament",
        title="The Tournament",
        description="Qualify for the finals and win it all.",
        tournament=TournamentRules(),
        exit_criteria=[ChapterCriteria(tournament_finished=True)],
    ),
    Chapter(
        id="fighting_champion",
        title="Fighting Champion",
        description="Defend your spot against all comers.",
        exit_criteria=[
            ChapterCriteria(min_victory_points=8),
            ChapterCriteria(min_matches_played=6),
        ],
    ),
    Chapter(
        id="legacy",
        title="Legacy",
        description="Cement your place in history.",
        exit_criteria=[ChapterCriteria(min_wins=4, required_chapter_ids=["tournament"])],
    ),
])

DEFAULT_UPGRADES = UpgradeCatalogue(upgrades=[
    Upgrade(id="iron_man", name="Iron Man", type="HEALTH", cost=8,
            description="+2 starting health", effects={"health": 2}),
    Upgrade(id="marathon_man", name="Marathon Man", type="STAMINA", cost=8,
            description="+2 starting stamina", effects={"stamina": 2}),
    Upgrade(id="heavy_hitter", name="Heavy Hitter", type="DAMAGE", cost=8,
            description="+1 damage on strikes", effects={"damage": 1}),
    Upgrade(id="devastator", name="Devastator", type="DAMAGE", cost=8,
            description="+1 damage on finishers", effects={"finisher_damage": 1}),
    Upgrade(id="crowd_favorite", name="Crowd Favorite", type="MOMENTUM", cost=6,
            description="+1 momentum per win", effects={"momentum": 1}),
])


def load_chapter_table(path: Optional[str | Path] = None) -> ChapterTable:
    """Load chapters from a JSON file, or the built-in table when path is None."""
    if path is None:
        return DEFAULT_CHAPTERS
    data = json.loads(Path(path).read_text())
    if isinstance(data, list):
        data = {"chapters": data}
    table = ChapterTable.model_validate(data)
    logger.info(f"Loaded {len(table.chapters)} campaign chapters from {path}")
    return table


def load_upgrade_catalogue(path: Optional[str | Path] = None) -> UpgradeCatalogue:
    """Load upgrades from a JSON file, or the built-in catalogue when path is None."""
    if path is None:
        return DEFAULT_UPGRADES
    data = json.loads(Path(path).read_text())
    if isinstance(data, list):
        data = {"upgrades": data}
    catalogue = UpgradeCatalogue.model_validate(data)
    logger.info(f"Loaded {len(catalogue.upgrades)} campaign upgrades from {path}")
    return catalogue
