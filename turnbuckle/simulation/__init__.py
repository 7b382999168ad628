"""Match and segment simulation."""

from turnbuckle.simulation.interference import (
    DQ_THRESHOLD,
    EJECTION_THRESHOLD,
    InterferenceEngine,
    InterferenceResult,
    effective_risk,
    find_supporter,
)
from turnbuckle.simulation.interference_ai import InterferenceAiService
from turnbuckle.simulation.resolvers import MatchResolver, MatchResolverBase, ResolverConfig

__all__ = [
    "DQ_THRESHOLD",
    "EJECTION_THRESHOLD",
    "InterferenceAiService",
    "InterferenceEngine",
    "InterferenceResult",
    "MatchResolver",
    "MatchResolverBase",
    "ResolverConfig",
    "effective_risk",
    "find_supporter",
]
