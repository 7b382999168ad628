"""NPC decision layer for interference.

Decides whether and how an NPC interferes, then hands the attempt to
the InterferenceEngine. The decision and the engine call are separate
steps so either can be tested on its own.
"""

import logging
import random
from typing import Mapping, Optional

from turnbuckle.core.enums import Alignment
from turnbuckle.core.models import Segment, Wrestler
from turnbuckle.core.tables import DEFAULT_INTERFERENCE_TYPES, InterferenceType
from turnbuckle.simulation.interference import (
    EJECTION_THRESHOLD,
    InterferenceEngine,
    InterferenceResult,
    Interferer,
)

logger = logging.getLogger(__name__)

DEFAULT_INTERFERENCE_PROBABILITY = 0.35


class InterferenceAiService:
    """
    Chooses when heel NPCs get involved.

    Only HEEL-aligned characters interfere. Each opportunity is an
    independent roll against ``probability``; the type is picked so the
    interferer stays under the ejection threshold when a cheaper option
    can do that.
    """

    def __init__(
        self,
        engine: InterferenceEngine,
        rng: Optional[random.Random] = None,
        probability: float = DEFAULT_INTERFERENCE_PROBABILITY,
        types: Mapping[str, InterferenceType] = DEFAULT_INTERFERENCE_TYPES,
    ):
        self.engine = engine
        self.rng = rng or random.Random()
        self.probability = probability
        self.types = types

    def should_interfere(self, interferer: Interferer) -> bool:
        """Roll whether this NPC takes the opportunity."""
        if interferer.alignment != Alignment.HEEL:
            return False
        return self.rng.random() < self.probability

    def choose_type(self, segment: Segment) -> InterferenceType:
        """
        Pick an interference type for the current awareness.

        Prefers actions that keep awareness below the ejection threshold;
        with nothing safe left, anything goes.
        """
        illegal = [t for t in self.types.values() if t.increases_awareness]
        safe = [
            t for t in illegal
            if segment.referee_awareness + t.base_risk < EJECTION_THRESHOLD
        ]
        pool = safe or illegal or list(self.types.values())
        weights = [max(1, t.base_risk) for t in pool]
        return self.rng.choices(pool, weights=weights, k=1)[0]

    def consider(
        self,
        segment: Segment,
        interferer: Interferer,
        beneficiary: Wrestler,
    ) -> Optional[InterferenceResult]:
        """
        Give an NPC an opportunity to interfere.

        Returns the engine's result, or None if the NPC stays out of it.
        """
        if segment.is_resolved or not self.should_interfere(interferer):
            return None
        interference_type = self.choose_type(segment)
        logger.debug(f"{interferer.name} chooses to interfere with a {interference_type.name}")
        return self.engine.attempt_interference(segment, interferer, beneficiary, interference_type)
