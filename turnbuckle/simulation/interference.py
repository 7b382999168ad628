"""
Ringside interference.

The engine owns the referee-awareness state machine for a segment:
every attempt raises awareness by the attempt's effective risk, and
crossing the ejection and disqualification thresholds ends the
interferer's night (or the match). Whether to interfere at all is
decided elsewhere (see interference_ai).
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional
from uuid import UUID

from turnbuckle.core.enums import Alignment
from turnbuckle.core.models import Faction, Npc, Segment, Wrestler
from turnbuckle.core.tables import InterferenceType
from turnbuckle.errors import InvalidStateTransition
from turnbuckle.events.types import InterferenceEvent
from turnbuckle.simulation.variance import clamp

logger = logging.getLogger(__name__)


EJECTION_THRESHOLD = 80
DQ_THRESHOLD = 100
MAX_AFFINITY_REDUCTION = 0.3  # full affinity takes 30% off the risk

Interferer = Wrestler | Npc
AffinityLookup = Callable[[Interferer, Wrestler], int]
AwarenessLookup = Callable[[UUID], int]


def no_affinity(interferer: Interferer, beneficiary: Wrestler) -> int:
    return 0


def effective_risk(base_risk: float, affinity: int) -> float:
    """Risk after the interferer/beneficiary affinity discount."""
    affinity = clamp(affinity, 0, 100)
    return base_risk * (1 - affinity / 100 * MAX_AFFINITY_REDUCTION)


@dataclass
class InterferenceResult:
    """Outcome of one interference attempt."""

    interference_type: InterferenceType
    interferer_id: UUID
    beneficiary_id: UUID
    segment_id: UUID
    effective_risk: float
    awareness_before: int
    awareness_after: int
    success: bool
    ejected: bool
    disqualified: bool
    message: str
    events: list[InterferenceEvent] = field(default_factory=list)

    @property
    def helps_beneficiary(self) -> bool:
        """Success that was not cancelled by getting caught."""
        return self.success and not self.ejected and not self.disqualified

    @property
    def alignment_shift(self) -> int:
        """Steps a successful attempt moves the beneficiary's campaign: +1 FACE, -1 HEEL."""
        if not self.success:
            return 0
        return {Alignment.FACE: 1, Alignment.HEEL: -1}.get(self.interference_type.alignment, 0)


class InterferenceEngine:
    """
    Resolves interference attempts against a segment's referee.

    Args:
        affinity_lookup: Faction affinity between interferer and beneficiary, 0-100
        awareness_lookup: Referee's own attentiveness by NPC id, 0-100
        rng: Random source for the success roll
        ejection_threshold: Awareness at which the interferer is thrown out
        dq_threshold: Awareness at which a DQ-capable attempt ends the match
    """

    def __init__(
        self,
        affinity_lookup: AffinityLookup = no_affinity,
        awareness_lookup: Optional[AwarenessLookup] = None,
        rng: Optional[random.Random] = None,
        ejection_threshold: int = EJECTION_THRESHOLD,
        dq_threshold: int = DQ_THRESHOLD,
    ):
        self.affinity_lookup = affinity_lookup
        self.awareness_lookup = awareness_lookup
        self.rng = rng or random.Random()
        self.ejection_threshold = ejection_threshold
        self.dq_threshold = dq_threshold

    def _referee_factor(self, segment: Segment) -> float:
        """Scales success chance down for an attentive referee. 1.0 with no referee."""
        if self.awareness_lookup is None or segment.referee_id is None:
            return 1.0
        referee_awareness = clamp(self.awareness_lookup(segment.referee_id), 0, 100)
        return 1 - referee_awareness / 200

    def attempt_interference(
        self,
        segment: Segment,
        interferer: Interferer,
        beneficiary: Wrestler,
        interference_type: InterferenceType,
    ) -> InterferenceResult:
        """
        Attempt an interference and update the segment's awareness.

        Raises:
            InvalidStateTransition: If the segment is already resolved
        """
        if segment.is_resolved:
            raise InvalidStateTransition(f"Segment {segment.id} is already resolved")

        risk = effective_risk(
            interference_type.base_risk,
            self.affinity_lookup(interferer, beneficiary),
        )
        before = segment.interference.level
        after = before
        if interference_type.increases_awareness:
            after = segment.interference.raise_to(
                min(100, before + int(risk)),
                cause=f"{interferer.name}: {interference_type.name}",
            )

        ejected = interference_type.increases_awareness and after >= self.ejection_threshold
        disqualified = (
            interference_type.can_cause_dq
            and after >= self.dq_threshold
            and not segment.is_no_dq
        )

        success = False
        if not ejected:
            chance = clamp((1 - after / 100) * self._referee_factor(segment), 0.0, 1.0)
            success = self.rng.random() < chance

        name = interference_type.name
        if disqualified:
            message = f"The referee saw the illegal {name}! DISQUALIFICATION!"
        elif ejected:
            message = f"The {name} was spotted! The referee is EJECTING {interferer.name} from ringside!"
        elif success:
            message = f"The {name} was successful!"
        else:
            message = f"The {name} failed to help as much as intended."

        logger.info(
            f"Interference by {interferer.name} for {beneficiary.name} ({interference_type.key}): "
            f"awareness {before} -> {after}, success={success}, ejected={ejected}, dq={disqualified}"
        )

        result = InterferenceResult(
            interference_type=interference_type,
            interferer_id=interferer.id,
            beneficiary_id=beneficiary.id,
            segment_id=segment.id,
            effective_risk=risk,
            awareness_before=before,
            awareness_after=after,
            success=success,
            ejected=ejected,
            disqualified=disqualified,
            message=message,
        )
        result.events.append(InterferenceEvent(
            segment_id=segment.id,
            interferer_id=interferer.id,
            beneficiary_id=beneficiary.id,
            interference_type=interference_type.key,
            success=success,
            ejected=ejected,
            disqualified=disqualified,
            awareness_after=after,
            message=message,
        ))
        return result


def find_supporter(
    wrestler: Wrestler,
    match_wrestlers: Iterable[Wrestler],
    roster: Iterable[Wrestler],
    npcs: Iterable[Npc] = (),
    factions: Iterable[Faction] = (),
) -> Optional[Interferer]:
    """
    Who would come to ringside for a wrestler.

    Checked in order: the wrestler's own manager, their faction's
    manager, then a faction member who is not in the match.
    """
    npcs_by_id = {n.id: n for n in npcs}
    if wrestler.manager_id and wrestler.manager_id in npcs_by_id:
        return npcs_by_id[wrestler.manager_id]

    if wrestler.faction_id is None:
        return None

    faction = next((f for f in factions if f.id == wrestler.faction_id), None)
    if faction and faction.manager_id and faction.manager_id in npcs_by_id:
        return npcs_by_id[faction.manager_id]

    in_match = {w.id for w in match_wrestlers}
    for other in roster:
        if other.faction_id == wrestler.faction_id and other.id not in in_match:
            return other
    return None
