"""Vocabulary of named Middle-earth entities used to populate trees.

A catalog is loaded once and never mutated. Each build attempt takes its
own copy through ``pool()`` and removes records from that copy as they are
attached, so the same catalog can serve any number of builds.

Records whose kind is not Being or Place are skipped at load time. They are
logged and kept on ``Catalog.warnings``; loading does not fail because of
them.
"""

from __future__ import annotations

from pathlib import Path
from random import Random
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ringhunter.errors import CatalogLoadWarning, ConfigError, InvalidArgumentError
from ringhunter.nodes import NodeKind
from ringhunter.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

log = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "middle_earth.yaml"

RecordKind = Literal["Being", "Place"]

T = TypeVar("T")


class CatalogRecord(BaseModel):
    """A nameable entity that can become a Being or Place node."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    kind: RecordKind

    @property
    def node_kind(self) -> NodeKind:
        return NodeKind(self.kind)


class RootRecord(BaseModel):
    """Name and description for the root of every tree."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)


DEFAULT_ROOT = RootRecord(name="Angmar", description="realm of the Ringwraiths")
DEFAULT_TARGET = CatalogRecord(name="Frodo", description="bearer of The One Ring", kind="Being")


def _validation_reason(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "record"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class Catalog:
    """Immutable vocabulary of entity records.

    Attributes:
        root: Record used for the root node.
        target: Record used for the target node.
        warnings: Records skipped while loading.
    """

    def __init__(
        self,
        records: Iterable[CatalogRecord],
        *,
        root: RootRecord = DEFAULT_ROOT,
        target: CatalogRecord = DEFAULT_TARGET,
        warnings: Iterable[CatalogLoadWarning] = (),
    ) -> None:
        self._records: tuple[CatalogRecord, ...] = tuple(records)
        if not self._records:
            raise InvalidArgumentError("records", "a catalog needs at least one record")
        self.root = root
        self.target = target
        self.warnings: tuple[CatalogLoadWarning, ...] = tuple(warnings)

    @property
    def records(self) -> tuple[CatalogRecord, ...]:
        return self._records

    def record_count(self) -> int:
        return len(self._records)

    def pool(self) -> list[CatalogRecord]:
        """Return a fresh mutable copy of the records for one build attempt."""
        return list(self._records)

    def sample(self, n: int, rng: Random | None = None) -> list[CatalogRecord]:
        """Draw ``n`` distinct records without replacement.

        Args:
            n: Number of records to draw.
            rng: Random source. A fresh Random() is used if None.

        Returns:
            The drawn records in draw order.

        Raises:
            InvalidArgumentError: If n is negative or exceeds record_count().
        """
        if n < 0 or n > len(self._records):
            raise InvalidArgumentError(
                "n", f"cannot draw {n} records from a catalog of {len(self._records)}"
            )
        if rng is None:
            rng = Random()
        pool = self.pool()
        return [self.draw(pool, rng) for _ in range(n)]

    @staticmethod
    def draw(pool: list[T], rng: Random) -> T:
        """Remove and return one uniformly chosen entry of a build pool.

        Raises:
            InvalidArgumentError: If the pool is empty.
        """
        if not pool:
            raise InvalidArgumentError("pool", "cannot draw from an empty pool")
        return pool.pop(rng.randrange(len(pool)))

    @staticmethod
    def capacity_for(max_branching: int) -> int:
        """Largest number of pool records a tree with this branching factor can use.

        Children are attached on ``max(1, max_branching - 1)`` levels below the
        root, each node taking at most ``max_branching`` children.
        """
        levels = max(1, max_branching - 1)
        return sum(max_branching**level for level in range(1, levels + 1))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> Catalog:
        """Build a catalog from parsed YAML data.

        Args:
            data: Mapping with ``records`` and optional ``root``/``target``.
            source: File the data came from, for error messages.

        Returns:
            Catalog holding every valid record.

        Raises:
            ConfigError: If root/target are malformed or no record is usable.
        """
        try:
            root = RootRecord.model_validate(dict(data["root"])) if "root" in data else DEFAULT_ROOT
            target = (
                CatalogRecord.model_validate(dict(data["target"]))
                if "target" in data
                else DEFAULT_TARGET
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(source, f"invalid root or target: {e}") from e

        raw_records = data.get("records") or []
        if not isinstance(raw_records, list):
            raise ConfigError(source, "'records' must be a list")

        records: list[CatalogRecord] = []
        warnings: list[CatalogLoadWarning] = []
        for index, raw in enumerate(raw_records):
            if not isinstance(raw, dict):
                reason = "record is not a mapping"
            else:
                try:
                    records.append(CatalogRecord.model_validate(dict(raw)))
                    continue
                except ValidationError as e:
                    reason = _validation_reason(e)
            warning = CatalogLoadWarning(index=index, raw=raw, reason=reason)
            warnings.append(warning)
            log.warning("catalog_record_skipped", index=index, reason=reason)

        if not records:
            raise ConfigError(source, "catalog has no usable records")

        log.debug(
            "catalog_loaded",
            source=str(source) if source else None,
            records=len(records),
            skipped=len(warnings),
        )
        return cls(records, root=root, target=target, warnings=warnings)

    @classmethod
    def load(cls, path: Path) -> Catalog:
        """Load a catalog from a YAML file.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping.
        """
        if not path.exists():
            raise ConfigError(path, "File not found")

        yaml = YAML(typ="safe")
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.load(f)
        except (OSError, YAMLError) as e:
            raise ConfigError(path, str(e)) from e

        if not isinstance(data, dict):
            raise ConfigError(path, "catalog file must contain a mapping")
        return cls.from_dict(data, source=path)

    @classmethod
    def default(cls) -> Catalog:
        """Load the packaged Middle-earth vocabulary."""
        return cls.load(DEFAULT_CATALOG_PATH)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Catalog(records={len(self._records)}, skipped={len(self.warnings)})"
