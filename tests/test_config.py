"""Tests for engine configuration."""

import pytest

from turnbuckle.config import EngineConfig, get_config, set_config


class TestEnvironment:
    def test_defaults(self, monkeypatch):
        for name in ("TURNBUCKLE_SEED", "TURNBUCKLE_HEAT_FLOOR", "TURNBUCKLE_CHAPTERS_PATH"):
            monkeypatch.delenv(name, raising=False)
        config = EngineConfig.from_env()

        assert config.seed is None
        assert config.heat_floor == 0
        assert config.match_heat == 2
        assert (config.min_duration, config.max_duration) == (5, 25)
        assert config.interference_probability == pytest.approx(0.35)
        assert config.chapters_path is None
        assert config.validate() == []

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("TURNBUCKLE_SEED", "77")
        monkeypatch.setenv("TURNBUCKLE_HEAT_FLOOR", "none")
        monkeypatch.setenv("TURNBUCKLE_MAX_DURATION", "40")

        config = EngineConfig.from_env()

        assert config.seed == 77
        assert config.heat_floor is None
        assert config.max_duration == 40

    def test_seeded_rng_is_reproducible(self):
        config = EngineConfig(seed=5)
        assert config.make_rng().random() == config.make_rng().random()


class TestValidate:
    def test_reports_each_problem(self):
        config = EngineConfig(min_duration=10, max_duration=5, interference_probability=1.5)
        errors = config.validate()
        assert len(errors) == 2
        assert any("MAX_DURATION" in e for e in errors)
        assert any("INTERFERENCE_PROBABILITY" in e for e in errors)


class TestSingleton:
    def test_set_and_reset(self, monkeypatch):
        custom = EngineConfig(seed=99)
        set_config(custom)
        assert get_config() is custom

        monkeypatch.setenv("TURNBUCKLE_SEED", "3")
        set_config(None)
        assert get_config().seed == 3
