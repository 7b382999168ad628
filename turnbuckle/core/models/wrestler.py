"""Wrestler model and injury records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from turnbuckle.core.enums import Alignment, Gender, InjurySeverity, WrestlerTier
from turnbuckle.core.tables import DEFAULT_TIER_BANDS, TierBand, band_for_tier, tier_for_fans

BUMPS_PER_INJURY = 3


@dataclass
class Injury:
    """An active or healed injury."""

    name: str
    severity: InjurySeverity
    injured_at: datetime = field(default_factory=datetime.now)
    healed_at: Optional[datetime] = None
    id: UUID = field(default_factory=uuid4)

    @property
    def is_active(self) -> bool:
        return self.healed_at is None

    @property
    def health_penalty(self) -> int:
        return self.severity.health_penalty if self.is_active else 0

    def heal(self, at: Optional[datetime] = None) -> None:
        if self.healed_at is None:
            self.healed_at = at or datetime.now()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "severity": self.severity.name,
            "injured_at": self.injured_at.isoformat(),
            "healed_at": self.healed_at.isoformat() if self.healed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Injury":
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            severity=InjurySeverity[data["severity"]],
            injured_at=datetime.fromisoformat(data["injured_at"]),
            healed_at=datetime.fromisoformat(data["healed_at"]) if data.get("healed_at") else None,
        )


@dataclass
class Wrestler:
    """
    A wrestler on the roster.

    Tier is never stored: it is recomputed from the fan count on every
    access, so fans are the single source of truth for a wrestler's rank.
    """

    name: str
    fans: int = 0
    id: UUID = field(default_factory=uuid4)
    gender: Gender = Gender.MALE
    alignment: Alignment = Alignment.NEUTRAL
    is_npc: bool = False

    # Physical baselines
    starting_health: int = 15
    starting_stamina: int = 16
    bumps: int = 0
    injuries: list[Injury] = field(default_factory=list)

    # Affiliations
    faction_id: Optional[UUID] = None
    manager_id: Optional[UUID] = None

    # Optimistic concurrency
    version: int = 0

    # Fan economy

    @property
    def tier(self) -> WrestlerTier:
        return tier_for_fans(self.fans)

    def tier_in(self, bands: tuple[TierBand, ...]) -> WrestlerTier:
        """Tier under a custom band table."""
        return tier_for_fans(self.fans, bands)

    def match_bonus(self, bands: tuple[TierBand, ...] = DEFAULT_TIER_BANDS) -> int:
        return band_for_tier(tier_for_fans(self.fans, bands), bands).match_bonus

    @property
    def fan_weight(self) -> float:
        return self.fans / 5

    def add_fans(self, delta: int) -> int:
        """Apply a fan change, never dropping below zero. Returns the applied delta."""
        new_fans = max(0, self.fans + delta)
        applied = new_fans - self.fans
        self.fans = new_fans
        return applied

    def can_afford(self, cost: int) -> bool:
        return self.fans >= cost

    def spend_fans(self, cost: int) -> bool:
        """Deduct a cost if affordable. Returns False and changes nothing otherwise."""
        if not self.can_afford(cost):
            return False
        self.fans -= cost
        return True

    # Health

    def add_bump(self) -> bool:
        """
        Record a bump.

        Returns True when the bump is the one that causes an injury; the
        bump counter resets at that point.
        """
        self.bumps += 1
        if self.bumps >= BUMPS_PER_INJURY:
            self.bumps = 0
            return True
        return False

    @property
    def active_injuries(self) -> list[Injury]:
        return [i for i in self.injuries if i.is_active]

    @property
    def injury_penalty(self) -> int:
        return sum(i.health_penalty for i in self.injuries)

    @property
    def effective_health(self) -> int:
        return max(1, self.starting_health - self.bumps - self.injury_penalty)

    @property
    def health_penalty(self) -> int:
        """Power lost to wear: bumps plus three per active injury."""
        return self.bumps + 3 * len(self.active_injuries)

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "name": self.name,
            "fans": self.fans,
            "tier": self.tier.name,
            "gender": self.gender.value,
            "alignment": self.alignment.value,
            "is_npc": self.is_npc,
            "starting_health": self.starting_health,
            "starting_stamina": self.starting_stamina,
            "bumps": self.bumps,
            "injuries": [i.to_dict() for i in self.injuries],
            "faction_id": str(self.faction_id) if self.faction_id else None,
            "manager_id": str(self.manager_id) if self.manager_id else None,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Wrestler":
        """Create from dictionary. A stored tier is ignored; fans decide it."""
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            fans=data.get("fans", 0),
            gender=Gender(data.get("gender", Gender.MALE.value)),
            alignment=Alignment(data.get("alignment", Alignment.NEUTRAL.value)),
            is_npc=data.get("is_npc", False),
            starting_health=data.get("starting_health", 15),
            starting_stamina=data.get("starting_stamina", 16),
            bumps=data.get("bumps", 0),
            injuries=[Injury.from_dict(i) for i in data.get("injuries", [])],
            faction_id=UUID(data["faction_id"]) if data.get("faction_id") else None,
            manager_id=UUID(data["manager_id"]) if data.get("manager_id") else None,
            version=data.get("version", 0),
        )


@dataclass
class Faction:
    """A stable of wrestlers with an optional manager."""

    name: str
    id: UUID = field(default_factory=uuid4)
    member_ids: list[UUID] = field(default_factory=list)
    manager_id: Optional[UUID] = None
    affinity: int = 50

    def has_member(self, wrestler: Wrestler) -> bool:
        return wrestler.id in self.member_ids


@dataclass
class Npc:
    """Non-wrestling character: referee, manager, commentator."""

    name: str
    role: str = "Referee"
    id: UUID = field(default_factory=uuid4)
    alignment: Alignment = Alignment.NEUTRAL
    awareness: int = 50
    faction_id: Optional[UUID] = None
