"""Tests for catalog loading and sampling."""

from __future__ import annotations

import logging
from random import Random
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from ringhunter.catalog import DEFAULT_ROOT, DEFAULT_TARGET, Catalog, CatalogRecord
from ringhunter.errors import ConfigError, InvalidArgumentError
from ringhunter.nodes import NodeKind
from tests.fixtures.trees import ScriptedRandom

if TYPE_CHECKING:
    from pathlib import Path


class TestCatalogRecord:
    def test_kind_maps_to_node_kind(self) -> None:
        record = CatalogRecord(name="Shire", description="home of the hobbits", kind="Place")
        assert record.node_kind is NodeKind.PLACE

    def test_rejects_unknown_kind(self) -> None:
        with pytest.raises(ValidationError):
            CatalogRecord(name="Smaug", description="a dragon", kind="Dragon")  # type: ignore

    def test_rejects_root_kind(self) -> None:
        with pytest.raises(ValidationError):
            CatalogRecord(name="Angmar", description="realm", kind="Root")  # type: ignore[arg-type]

    def test_records_are_frozen(self) -> None:
        record = CatalogRecord(name="Shire", description="home", kind="Place")
        with pytest.raises(ValidationError):
            record.name = "Bree"  # type: ignore[misc]


class TestDefaultCatalog:
    def test_loads_packaged_vocabulary(self, default_catalog: Catalog) -> None:
        assert default_catalog.record_count() == 83
        assert default_catalog.warnings == ()
        assert default_catalog.root.name == "Angmar"
        assert default_catalog.target.name == "Frodo"

    def test_has_both_kinds(self, default_catalog: Catalog) -> None:
        kinds = {r.kind for r in default_catalog.records}
        assert kinds == {"Being", "Place"}

    def test_target_not_among_records(self, default_catalog: Catalog) -> None:
        assert default_catalog.target.name not in {r.name for r in default_catalog.records}


class TestLoad:
    def test_skips_bad_records(self, catalog_file: Path) -> None:
        catalog = Catalog.load(catalog_file)

        assert [r.name for r in catalog.records] == ["Gandalf", "Erebor"]
        assert [w.index for w in catalog.warnings] == [1, 3]
        assert "kind" in catalog.warnings[0].reason
        assert catalog.warnings[1].reason == "record is not a mapping"

    def test_skipped_records_are_logged_as_warnings(
        self, catalog_file: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            Catalog.load(catalog_file)

        skipped = [
            r for r in caplog.records
            if isinstance(r.msg, dict) and r.msg.get("event") == "catalog_record_skipped"
        ]
        assert [r.msg["index"] for r in skipped] == [1, 3]
        assert all(r.levelno == logging.WARNING for r in skipped)

    def test_reads_root_and_target(self, catalog_file: Path) -> None:
        catalog = Catalog.load(catalog_file)
        assert catalog.root.name == "Dol Guldur"
        assert catalog.target.name == "Bilbo"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="File not found"):
            Catalog.load(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("records: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            Catalog.load(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            Catalog.load(path)

    def test_no_usable_records(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text(
            "records:\n  - {name: Smaug, description: dragon, kind: Dragon}\n", encoding="utf-8"
        )
        with pytest.raises(ConfigError, match="no usable records"):
            Catalog.load(path)

    def test_invalid_target_kind_is_fatal(self) -> None:
        data = {
            "target": {"name": "Frodo", "description": "bearer", "kind": "Ring"},
            "records": [{"name": "Sam", "description": "gardener", "kind": "Being"}],
        }
        with pytest.raises(ConfigError, match="invalid root or target"):
            Catalog.from_dict(data)

    def test_defaults_for_root_and_target(self) -> None:
        catalog = Catalog.from_dict(
            {"records": [{"name": "Sam", "description": "gardener", "kind": "Being"}]}
        )
        assert catalog.root == DEFAULT_ROOT
        assert catalog.target == DEFAULT_TARGET

    def test_records_must_be_list(self) -> None:
        with pytest.raises(ConfigError, match="must be a list"):
            Catalog.from_dict({"records": {"name": "Sam"}})


class TestSample:
    def test_sample_is_distinct(self, default_catalog: Catalog) -> None:
        drawn = default_catalog.sample(20, Random(3))
        assert len(drawn) == 20
        assert len({id(r) for r in drawn}) == 20

    def test_sample_does_not_mutate_catalog(self, small_catalog: Catalog) -> None:
        small_catalog.sample(3, Random(1))
        assert small_catalog.record_count() == 3

    def test_sample_uses_rng(self, small_catalog: Catalog) -> None:
        drawn = small_catalog.sample(2, ScriptedRandom([2, 0]))
        assert [r.name for r in drawn] == ["Celeborn", "Aragorn"]

    def test_sample_whole_catalog(self, small_catalog: Catalog) -> None:
        drawn = small_catalog.sample(3, Random(5))
        assert sorted(r.name for r in drawn) == ["Aragorn", "Bree", "Celeborn"]

    @pytest.mark.parametrize("n", [-1, 4])
    def test_sample_out_of_range(self, small_catalog: Catalog, n: int) -> None:
        with pytest.raises(InvalidArgumentError):
            small_catalog.sample(n)

    def test_draw_removes_chosen_entry(self) -> None:
        pool = [(0, "Aragorn"), (1, "Bree"), (2, "Celeborn")]
        rng = ScriptedRandom([1])

        assert Catalog.draw(pool, rng) == (1, "Bree")
        assert pool == [(0, "Aragorn"), (2, "Celeborn")]
        assert rng.calls == [3]

    def test_draw_from_empty_pool(self) -> None:
        with pytest.raises(InvalidArgumentError, match="empty pool"):
            Catalog.draw([], Random(0))


class TestCatalogBasics:
    def test_pool_is_fresh_copy(self, small_catalog: Catalog) -> None:
        pool = small_catalog.pool()
        pool.clear()
        assert small_catalog.record_count() == 3
        assert len(small_catalog.pool()) == 3

    def test_empty_catalog_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Catalog([])

    @pytest.mark.parametrize(
        ("branching", "capacity"),
        [(1, 1), (2, 2), (3, 12), (4, 84)],
    )
    def test_capacity_for(self, branching: int, capacity: int) -> None:
        assert Catalog.capacity_for(branching) == capacity
