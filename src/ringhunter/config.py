"""Hunt configuration loading.

Resolution order for each setting:
1. Environment variable (e.g., RINGHUNTER_SEED)
2. Config file (ringhunter.yaml)
3. Built-in default
CLI flags are applied on top by the command that uses them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ringhunter.builder import DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_BRANCHING
from ringhunter.errors import ConfigError
from ringhunter.observability.logging import get_logger

log = get_logger(__name__)

DEFAULT_CONFIG_NAME = "ringhunter.yaml"

ENV_SEED = "RINGHUNTER_SEED"
ENV_MAX_BRANCHING = "RINGHUNTER_MAX_BRANCHING"
ENV_MAX_ATTEMPTS = "RINGHUNTER_MAX_ATTEMPTS"
ENV_CATALOG = "RINGHUNTER_CATALOG"


def _as_int(value: Any, name: str, source: Path | None) -> int:
    if isinstance(value, bool):
        raise ConfigError(source, f"'{name}' must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(source, f"'{name}' must be an integer, got {value!r}") from e


@dataclass(frozen=True)
class HuntConfig:
    """Settings for tree generation.

    Attributes:
        max_branching: Largest child count per node, also the depth budget.
        max_attempts: Build attempts before the fallback tree is used.
        seed: Seed for the random source; None draws from the OS.
        catalog_path: Vocabulary file; None uses the packaged catalog.
    """

    max_branching: int = DEFAULT_MAX_BRANCHING
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: int | None = None
    catalog_path: Path | None = None

    def __post_init__(self) -> None:
        if self.max_branching < 1:
            raise ConfigError(None, f"max_branching must be at least 1, got {self.max_branching}")
        if self.max_attempts < 1:
            raise ConfigError(None, f"max_attempts must be at least 1, got {self.max_attempts}")

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> HuntConfig:
        """Create config from a dictionary.

        Args:
            data: Mapping with any of max_branching, max_attempts, seed, catalog.
                A relative catalog path is resolved against the config file.
            source: File the data came from.

        Returns:
            HuntConfig instance.
        """
        seed = data.get("seed")
        catalog = data.get("catalog")
        catalog_path: Path | None = None
        if catalog:
            catalog_path = Path(str(catalog))
            if source is not None and not catalog_path.is_absolute():
                catalog_path = source.parent / catalog_path

        return cls(
            max_branching=_as_int(
                data.get("max_branching", DEFAULT_MAX_BRANCHING), "max_branching", source
            ),
            max_attempts=_as_int(
                data.get("max_attempts", DEFAULT_MAX_ATTEMPTS), "max_attempts", source
            ),
            seed=None if seed is None else _as_int(seed, "seed", source),
            catalog_path=catalog_path,
        )

    def with_env_overrides(self) -> HuntConfig:
        """Return a copy with RINGHUNTER_* environment variables applied."""
        changes: dict[str, Any] = {}
        if seed := os.getenv(ENV_SEED):
            changes["seed"] = _as_int(seed, ENV_SEED, None)
        if branching := os.getenv(ENV_MAX_BRANCHING):
            changes["max_branching"] = _as_int(branching, ENV_MAX_BRANCHING, None)
        if attempts := os.getenv(ENV_MAX_ATTEMPTS):
            changes["max_attempts"] = _as_int(attempts, ENV_MAX_ATTEMPTS, None)
        if catalog := os.getenv(ENV_CATALOG):
            changes["catalog_path"] = Path(catalog)
        if changes:
            log.debug("config_env_overrides", keys=sorted(changes))
        return replace(self, **changes) if changes else self


def load_config(path: Path) -> HuntConfig:
    """Load hunt configuration from a YAML file.

    Args:
        path: Path to the config file.

    Returns:
        HuntConfig instance.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise ConfigError(path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except (OSError, YAMLError) as e:
        raise ConfigError(path, str(e)) from e

    if data is None:
        raise ConfigError(path, "Empty file")
    if not isinstance(data, dict):
        raise ConfigError(path, "config file must contain a mapping")

    config = HuntConfig.from_dict(data, source=path)
    log.debug("config_loaded", path=str(path))
    return config
