"""Tests for hunt configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from ringhunter.builder import DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_BRANCHING
from ringhunter.config import (
    ENV_CATALOG,
    ENV_MAX_ATTEMPTS,
    ENV_MAX_BRANCHING,
    ENV_SEED,
    HuntConfig,
    load_config,
)
from ringhunter.errors import ConfigError


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (ENV_SEED, ENV_MAX_BRANCHING, ENV_MAX_ATTEMPTS, ENV_CATALOG):
        monkeypatch.delenv(name, raising=False)


class TestHuntConfig:
    def test_defaults(self) -> None:
        config = HuntConfig()
        assert config.max_branching == DEFAULT_MAX_BRANCHING == 4
        assert config.max_attempts == DEFAULT_MAX_ATTEMPTS
        assert config.seed is None
        assert config.catalog_path is None

    def test_from_dict(self) -> None:
        config = HuntConfig.from_dict({"max_branching": 3, "max_attempts": 10, "seed": 42})
        assert config == HuntConfig(max_branching=3, max_attempts=10, seed=42)

    def test_from_dict_empty(self) -> None:
        assert HuntConfig.from_dict({}) == HuntConfig()

    def test_relative_catalog_resolved_against_source(self, tmp_path: Path) -> None:
        source = tmp_path / "ringhunter.yaml"
        config = HuntConfig.from_dict({"catalog": "vocab.yaml"}, source=source)
        assert config.catalog_path == tmp_path / "vocab.yaml"

    def test_absolute_catalog_kept(self, tmp_path: Path) -> None:
        absolute = tmp_path / "elsewhere" / "vocab.yaml"
        config = HuntConfig.from_dict({"catalog": str(absolute)}, source=tmp_path / "x.yaml")
        assert config.catalog_path == absolute

    @pytest.mark.parametrize("value", ["many", True, None, [1]])
    def test_non_integer_branching(self, value: object) -> None:
        with pytest.raises(ConfigError, match="max_branching"):
            HuntConfig.from_dict({"max_branching": value})

    def test_branching_below_one(self) -> None:
        with pytest.raises(ConfigError, match="at least 1"):
            HuntConfig(max_branching=0)

    def test_attempts_below_one(self) -> None:
        with pytest.raises(ConfigError, match="at least 1"):
            HuntConfig.from_dict({"max_attempts": 0})

    def test_config_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            HuntConfig().seed = 3  # type: ignore[misc]


class TestEnvOverrides:
    def test_no_env_returns_same_config(self) -> None:
        config = HuntConfig(seed=1)
        assert config.with_env_overrides() is config

    def test_env_values_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_SEED, "17")
        monkeypatch.setenv(ENV_MAX_BRANCHING, "3")
        monkeypatch.setenv(ENV_MAX_ATTEMPTS, "50")
        monkeypatch.setenv(ENV_CATALOG, "/tmp/vocab.yaml")

        config = HuntConfig(seed=1).with_env_overrides()

        assert config.seed == 17
        assert config.max_branching == 3
        assert config.max_attempts == 50
        assert config.catalog_path == Path("/tmp/vocab.yaml")

    def test_bad_env_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_SEED, "forty-two")
        with pytest.raises(ConfigError, match=ENV_SEED):
            HuntConfig().with_env_overrides()


class TestLoadConfig:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "ringhunter.yaml"
        path.write_text("max_branching: 3\nseed: 9\ncatalog: vocab.yaml\n", encoding="utf-8")

        config = load_config(path)

        assert config.max_branching == 3
        assert config.seed == 9
        assert config.catalog_path == tmp_path / "vocab.yaml"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="File not found"):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "ringhunter.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="Empty file"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "ringhunter.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_bad_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "ringhunter.yaml"
        path.write_text("seed: [1,\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)
