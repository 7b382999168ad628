"""Wrestler bumps and injuries.

Three bumps make an injury. Severity is rolled on a d100 against the
wrestler's tier: veterans get hurt less badly.
"""

import logging
import random
from typing import Mapping, Optional
from uuid import UUID

from turnbuckle.core.enums import InjurySeverity, WrestlerTier
from turnbuckle.core.models import Injury, Wrestler
from turnbuckle.core.models.wrestler import BUMPS_PER_INJURY
from turnbuckle.core.tables import DEFAULT_INJURY_BANDS, injury_severity_for_roll
from turnbuckle.errors import NotFound

logger = logging.getLogger(__name__)


INJURY_NAMES: dict[InjurySeverity, list[str]] = {
    InjurySeverity.MINOR: ["Bruised Ribs", "Jammed Finger", "Stinger", "Mat Burn"],
    InjurySeverity.MODERATE: ["Sprained Ankle", "Strained Hamstring", "Separated Shoulder"],
    InjurySeverity.SEVERE: ["Concussion", "Torn Bicep", "Broken Hand"],
    InjurySeverity.CRITICAL: ["Torn ACL", "Broken Neck", "Ruptured Pectoral"],
}


def bump_causes_injury(wrestler: Wrestler, pending_bumps: int = 1) -> bool:
    """Whether the next bump(s) would take the wrestler to an injury, without applying them."""
    return wrestler.bumps + pending_bumps >= BUMPS_PER_INJURY


def roll_severity(
    tier: WrestlerTier,
    rng: random.Random,
    bands: Mapping[WrestlerTier, tuple[int, int, int]] = DEFAULT_INJURY_BANDS,
) -> InjurySeverity:
    return injury_severity_for_roll(tier, rng.randint(1, 100), bands)


def roll_injury(
    wrestler: Wrestler,
    rng: random.Random,
    bands: Mapping[WrestlerTier, tuple[int, int, int]] = DEFAULT_INJURY_BANDS,
) -> Injury:
    """Build (but do not attach) an injury for a wrestler."""
    severity = roll_severity(wrestler.tier, rng, bands)
    name = rng.choice(INJURY_NAMES[severity])
    logger.debug(f"{wrestler.name} injury roll: {severity.name} ({name})")
    return Injury(name=name, severity=severity)


def apply_bump(wrestler: Wrestler, rng: random.Random) -> Optional[Injury]:
    """
    Apply one bump to a wrestler.

    Returns the injury attached to the wrestler when the bump causes one.
    """
    if not wrestler.add_bump():
        return None
    injury = roll_injury(wrestler, rng)
    wrestler.injuries.append(injury)
    logger.info(f"{wrestler.name} suffered a {injury.severity.name.lower()} injury: {injury.name}")
    return injury


def heal_injury(wrestler: Wrestler, injury_id: UUID) -> Injury:
    """Heal one of a wrestler's active injuries."""
    for injury in wrestler.active_injuries:
        if injury.id == injury_id:
            injury.heal()
            return injury
    raise NotFound("Injury", injury_id)
