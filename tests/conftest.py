"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from ringhunter.catalog import Catalog, CatalogRecord


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def small_catalog() -> Catalog:
    """Three-record catalog: Aragorn (Being), Bree (Place), Celeborn (Being)."""
    return Catalog(
        [
            CatalogRecord(name="Aragorn", description="son of Arathorn", kind="Being"),
            CatalogRecord(name="Bree", description="a village of men and hobbits", kind="Place"),
            CatalogRecord(name="Celeborn", description="lord of Lothlorien", kind="Being"),
        ]
    )


@pytest.fixture
def default_catalog() -> Catalog:
    """The packaged Middle-earth catalog."""
    return Catalog.default()


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Catalog YAML with one bad kind and one malformed record."""
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "root:\n"
        "  name: Dol Guldur\n"
        "  description: Sauron's old stronghold\n"
        "target:\n"
        "  name: Bilbo\n"
        "  description: a very famous hobbit\n"
        "  kind: Being\n"
        "records:\n"
        "  - {name: Gandalf, description: the grey wizard, kind: Being}\n"
        "  - {name: Smaug, description: the last great dragon, kind: Dragon}\n"
        "  - {name: Erebor, description: the Lonely Mountain, kind: Place}\n"
        "  - just a string\n",
        encoding="utf-8",
    )
    return path
