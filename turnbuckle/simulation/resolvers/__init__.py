"""Match resolution strategies."""

from turnbuckle.simulation.resolvers.base import MatchResolverBase
from turnbuckle.simulation.resolvers.weighted import MatchResolver, ResolverConfig

__all__ = ["MatchResolver", "MatchResolverBase", "ResolverConfig"]
