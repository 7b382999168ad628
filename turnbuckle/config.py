"""
Engine configuration.

Controls randomness, heat policy, match-length bounds and narration.
All settings can be overridden via environment variables.
"""

import os
import random
from dataclasses import dataclass, field
from typing import Optional


def _optional_int(name: str, default: Optional[str]) -> Optional[int]:
    raw = os.getenv(name, default)
    if raw is None or raw.strip().lower() in ("", "none", "off"):
        return None
    return int(raw)


@dataclass
class EngineConfig:
    """Configuration for the booking engine."""

    # Randomness - unset means a fresh unseeded source per engine
    seed: Optional[int] = field(default_factory=lambda: _optional_int("TURNBUCKLE_SEED", None))

    # Heat policy - None lets heat go negative
    heat_floor: Optional[int] = field(
        default_factory=lambda: _optional_int("TURNBUCKLE_HEAT_FLOOR", "0")
    )
    match_heat: int = field(default_factory=lambda: int(os.getenv("TURNBUCKLE_MATCH_HEAT", "2")))

    # Match length bounds (minutes)
    min_duration: int = field(
        default_factory=lambda: int(os.getenv("TURNBUCKLE_MIN_DURATION", "5"))
    )
    max_duration: int = field(
        default_factory=lambda: int(os.getenv("TURNBUCKLE_MAX_DURATION", "25"))
    )

    # NPC decision layer
    interference_probability: float = field(
        default_factory=lambda: float(os.getenv("TURNBUCKLE_INTERFERENCE_PROBABILITY", "0.35"))
    )

    # Campaign chapter table (JSON); None uses the built-in chapters
    chapters_path: Optional[str] = field(
        default_factory=lambda: os.getenv("TURNBUCKLE_CHAPTERS_PATH") or None
    )

    # Narration is best-effort and bounded
    narration_timeout: float = field(
        default_factory=lambda: float(os.getenv("TURNBUCKLE_NARRATION_TIMEOUT", "10.0"))
    )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if self.min_duration < 1:
            errors.append("TURNBUCKLE_MIN_DURATION must be at least 1")
        if self.max_duration < self.min_duration:
            errors.append("TURNBUCKLE_MAX_DURATION must not be below TURNBUCKLE_MIN_DURATION")
        if not 0.0 <= self.interference_probability <= 1.0:
            errors.append("TURNBUCKLE_INTERFERENCE_PROBABILITY must be within [0, 1]")
        if self.match_heat < 0:
            errors.append("TURNBUCKLE_MATCH_HEAT must not be negative")
        if self.narration_timeout <= 0:
            errors.append("TURNBUCKLE_NARRATION_TIMEOUT must be positive")
        return errors

    def make_rng(self) -> random.Random:
        """Build a random source, seeded when a seed is configured."""
        return random.Random(self.seed)


# Singleton config instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def set_config(config: Optional[EngineConfig]) -> None:
    """
    Replace the global configuration.

    Passing None makes the next get_config() re-read the environment.
    Useful for testing.
    """
    global _config
    _config = config
