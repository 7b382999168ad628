"""Championship titles and reigns."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from turnbuckle.core.enums import TitleTier
from turnbuckle.core.models.wrestler import Wrestler


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_reign_length(days: int) -> str:
    """Human readable reign length: '1 week and 3 days', '2 months'."""
    if days < 1:
        return "Less than 1 day"
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        weeks, rest = divmod(days, 7)
        text = _plural(weeks, "week")
        return f"{text} and {_plural(rest, 'day')}" if rest else text
    months, rest = divmod(days, 30)
    text = _plural(months, "month")
    return f"{text} and {_plural(rest, 'day')}" if rest else text


@dataclass
class TitleReign:
    """One champion's run with a title."""

    champion: Wrestler
    reign_number: int
    started_at: datetime = field(default_factory=datetime.now)
    ended_at: Optional[datetime] = None
    won_at_match_id: Optional[UUID] = None

    @property
    def is_current(self) -> bool:
        return self.ended_at is None

    def length_days(self, now: Optional[datetime] = None) -> int:
        end = self.ended_at or now or datetime.now()
        return (end - self.started_at).days

    def length_display(self, now: Optional[datetime] = None) -> str:
        return format_reign_length(self.length_days(now))

    def display(self, now: Optional[datetime] = None) -> str:
        text = f"{self.champion.name} - Reign #{self.reign_number} ({self.length_display(now)})"
        return f"{text} (Current)" if self.is_current else text


@dataclass
class Title:
    """A championship. Vacant or held by exactly one wrestler."""

    name: str
    tier: TitleTier
    is_active: bool = True
    id: UUID = field(default_factory=uuid4)
    champion: Optional[Wrestler] = None
    reigns: list[TitleReign] = field(default_factory=list)
    challengers: list[Wrestler] = field(default_factory=list)
    description: str = ""
    version: int = 0

    @property
    def is_vacant(self) -> bool:
        return self.champion is None

    @property
    def current_reign(self) -> Optional[TitleReign]:
        if self.reigns and self.reigns[-1].is_current:
            return self.reigns[-1]
        return None

    def current_reign_days(self, now: Optional[datetime] = None) -> int:
        reign = self.current_reign
        return reign.length_days(now) if reign else 0

    @property
    def total_reigns(self) -> int:
        return len(self.reigns)

    def reigns_for(self, wrestler: Wrestler) -> list[TitleReign]:
        return [r for r in self.reigns if r.champion.id == wrestler.id]

    def is_champion(self, wrestler: Wrestler) -> bool:
        return self.champion is not None and self.champion.id == wrestler.id

    def is_challenger(self, wrestler: Wrestler) -> bool:
        return any(c.id == wrestler.id for c in self.challengers)

    def award_to(
        self,
        wrestler: Wrestler,
        at: Optional[datetime] = None,
        won_at_match_id: Optional[UUID] = None,
    ) -> TitleReign:
        """Close the current reign and open a new one for wrestler."""
        at = at or datetime.now()
        self._end_current_reign(at)
        reign = TitleReign(
            champion=wrestler,
            reign_number=len(self.reigns_for(wrestler)) + 1,
            started_at=at,
            won_at_match_id=won_at_match_id,
        )
        self.reigns.append(reign)
        self.champion = wrestler
        self.challengers = [c for c in self.challengers if c.id != wrestler.id]
        return reign

    def vacate(self, at: Optional[datetime] = None) -> Optional[TitleReign]:
        """Strip the champion. Returns the ended reign, or None if already vacant."""
        if self.is_vacant:
            return None
        ended = self._end_current_reign(at or datetime.now())
        self.champion = None
        return ended

    def _end_current_reign(self, at: datetime) -> Optional[TitleReign]:
        reign = self.current_reign
        if reign is not None:
            reign.ended_at = at
        return reign

    @property
    def status_emoji(self) -> str:
        if not self.is_active:
            return "🚫"
        return "👑❓" if self.is_vacant else "👑"

    @property
    def display_name(self) -> str:
        if self.is_vacant:
            return f"{self.name} (Vacant)"
        return f"{self.name} (Champion: {self.champion.name})"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "tier": self.tier.name,
            "is_active": self.is_active,
            "champion_id": str(self.champion.id) if self.champion else None,
            "challenger_ids": [str(c.id) for c in self.challengers],
            "reigns": [
                {
                    "champion_id": str(r.champion.id),
                    "reign_number": r.reign_number,
                    "started_at": r.started_at.isoformat(),
                    "ended_at": r.ended_at.isoformat() if r.ended_at else None,
                }
                for r in self.reigns
            ],
        }
