"""Entry points for presentation layers.

``generate_tree`` and ``hunt`` are all a front end needs: build a tree,
walk it for display through the read-only Node accessors, then hunt it.
"""

from __future__ import annotations

from random import Random
from typing import TYPE_CHECKING

from ringhunter.builder import TreeBuilder
from ringhunter.catalog import Catalog
from ringhunter.config import HuntConfig
from ringhunter.hunter import DepthFirstHunter

if TYPE_CHECKING:
    from ringhunter.hunter import HuntReport
    from ringhunter.nodes import Tree


def load_catalog(config: HuntConfig) -> Catalog:
    """Load the catalog named by ``config``, or the packaged one."""
    if config.catalog_path is None:
        return Catalog.default()
    return Catalog.load(config.catalog_path)


def generate_tree(
    config: HuntConfig | None = None,
    *,
    catalog: Catalog | None = None,
    rng: Random | None = None,
) -> Tree:
    """Build a random tree with a reachable target.

    Args:
        config: Generation settings. Defaults to HuntConfig().
        catalog: Vocabulary to draw from. Loaded from config if None.
        rng: Random source. Seeded from config.seed if None.

    Returns:
        A valid tree.
    """
    config = config or HuntConfig()
    if catalog is None:
        catalog = load_catalog(config)
    if rng is None:
        rng = Random(config.seed)
    builder = TreeBuilder(
        catalog,
        max_branching=config.max_branching,
        max_attempts=config.max_attempts,
        rng=rng,
    )
    return builder.build()


def hunt(tree: Tree | None, hunter: DepthFirstHunter | None = None) -> HuntReport:
    """Hunt ``tree`` for its target and return the narrated report.

    Raises:
        InvalidArgumentError: If tree is None.
    """
    hunter = hunter or DepthFirstHunter()
    return hunter.hunt(tree)
