"""Randomized construction of Middle-earth trees.

A build attempt works on its own copy of the catalog:

1. Create the root and the target, and load the catalog into a pool.
2. Pick one pool record at random to be the target's parent (the
   adjacent record). It stays in the pool like any other record.
3. Attach children depth-first. Each node draws a child count in
   ``[0, max_branching]``; a count larger than what is left in the pool
   stops branching at that node. Attached children recurse only while the
   remaining depth budget is above 2.
4. When the adjacent record is attached, the target is attached under it
   and the attempt is marked as holding the target.

An attempt counts only if the root has children and the target made it
into the tree. Otherwise it is thrown away whole and a new attempt starts
from a fresh pool. After ``max_attempts`` failures the builder returns a
minimal hand-built tree so callers always get a valid result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import TYPE_CHECKING

from ringhunter.errors import InvalidArgumentError, TreeCorruptionError
from ringhunter.nodes import ROOT_HANDLE, Node, NodeKind, Tree
from ringhunter.observability.logging import get_logger
from ringhunter.validation import run_tree_checks

if TYPE_CHECKING:
    from ringhunter.catalog import Catalog, CatalogRecord

log = get_logger(__name__)

DEFAULT_MAX_BRANCHING = 4
DEFAULT_MAX_ATTEMPTS = 1000

# Recursion stops one level above the deepest useful level
_MIN_RECURSION_DEPTH = 2


@dataclass
class _DraftNode:
    """Mutable node used while an attempt is in progress."""

    id: int
    name: str
    description: str
    kind: NodeKind
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    is_target: bool = False
    is_adjacent_to_target: bool = False

    def freeze(self) -> Node:
        return Node(
            id=self.id,
            name=self.name,
            description=self.description,
            kind=self.kind,
            parent=self.parent,
            children=tuple(self.children),
            is_target=self.is_target,
            is_adjacent_to_target=self.is_adjacent_to_target,
        )


class _Attempt:
    """State owned by a single build attempt."""

    def __init__(self, catalog: Catalog, rng: Random) -> None:
        self.catalog = catalog
        self.rng = rng
        # Pool entries keep their catalog position so the adjacent pick is
        # tracked by slot, not by record content.
        self.pool: list[tuple[int, CatalogRecord]] = list(enumerate(catalog.pool()))
        self.nodes: list[_DraftNode] = [
            _DraftNode(
                id=ROOT_HANDLE,
                name=catalog.root.name,
                description=catalog.root.description,
                kind=NodeKind.ROOT,
            )
        ]
        self.target_record = catalog.target
        self.adjacent_slot = rng.randrange(len(self.pool))
        self.has_target = False

    def attach(
        self,
        parent: _DraftNode,
        record: CatalogRecord,
        *,
        slot: int | None = None,
        is_target: bool = False,
    ) -> _DraftNode:
        node = _DraftNode(
            id=len(self.nodes),
            name=record.name,
            description=record.description,
            kind=record.node_kind,
            parent=parent.id,
            is_target=is_target,
            is_adjacent_to_target=slot is not None and slot == self.adjacent_slot,
        )
        self.nodes.append(node)
        parent.children.append(node.id)
        return node

    def draw(self) -> tuple[int, CatalogRecord]:
        return self.catalog.draw(self.pool, self.rng)

    def grow(self, parent: _DraftNode, depth: int, max_branching: int) -> None:
        """Attach a random number of children under ``parent`` and recurse."""
        count = self.rng.randrange(max_branching + 1)
        if count > len(self.pool):
            return

        children = []
        for _ in range(count):
            slot, record = self.draw()
            children.append(self.attach(parent, record, slot=slot))

        for child in children:
            if child.is_adjacent_to_target:
                self.attach(child, self.target_record, is_target=True)
                self.has_target = True
            elif depth > _MIN_RECURSION_DEPTH:
                self.grow(child, depth - 1, max_branching)

    @property
    def is_valid(self) -> bool:
        return bool(self.nodes[ROOT_HANDLE].children) and self.has_target

    @property
    def reason(self) -> str:
        if not self.nodes[ROOT_HANDLE].children:
            return "root_has_no_children"
        return "target_not_attached"

    def freeze(self) -> Tree:
        return Tree([n.freeze() for n in self.nodes])


class TreeBuilder:
    """Builds random trees whose target is always reachable from the root.

    Attributes:
        catalog: Vocabulary the trees are drawn from.
        max_branching: Largest child count per node; also the depth budget.
        max_attempts: Attempts made before falling back to a minimal tree.
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        max_branching: int = DEFAULT_MAX_BRANCHING,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        rng: Random | None = None,
    ) -> None:
        if max_branching < 1:
            raise InvalidArgumentError("max_branching", f"must be at least 1, got {max_branching}")
        if max_attempts < 1:
            raise InvalidArgumentError("max_attempts", f"must be at least 1, got {max_attempts}")
        self.catalog = catalog
        self.max_branching = max_branching
        self.max_attempts = max_attempts
        self.rng = rng if rng is not None else Random()

        capacity = catalog.capacity_for(max_branching)
        if catalog.record_count() < capacity:
            log.debug(
                "catalog_may_exhaust",
                records=catalog.record_count(),
                capacity=capacity,
                max_branching=max_branching,
            )

    def build(self) -> Tree:
        """Build a valid tree.

        Returns:
            A tree with a single root, a single reachable target and the
            target's parent flagged as adjacent.

        Raises:
            TreeCorruptionError: If the produced tree fails a structural
                check, which means the builder itself is broken.
        """
        for attempt_number in range(1, self.max_attempts + 1):
            attempt = _Attempt(self.catalog, self.rng)
            attempt.grow(attempt.nodes[ROOT_HANDLE], self.max_branching, self.max_branching)
            if attempt.is_valid:
                tree = attempt.freeze()
                log.info("tree_built", attempts=attempt_number, nodes=len(tree))
                return self._checked(tree)
            log.debug("tree_attempt_discarded", attempt=attempt_number, reason=attempt.reason)

        log.warning("tree_build_fallback", attempts=self.max_attempts)
        return self._checked(self.fallback_tree())

    def fallback_tree(self) -> Tree:
        """Minimal valid tree: root, first catalog record, then the target."""
        catalog = self.catalog
        adjacent = catalog.records[0]
        target = catalog.target
        return Tree(
            [
                Node(
                    id=0,
                    name=catalog.root.name,
                    description=catalog.root.description,
                    kind=NodeKind.ROOT,
                    children=(1,),
                ),
                Node(
                    id=1,
                    name=adjacent.name,
                    description=adjacent.description,
                    kind=adjacent.node_kind,
                    parent=0,
                    children=(2,),
                    is_adjacent_to_target=True,
                ),
                Node(
                    id=2,
                    name=target.name,
                    description=target.description,
                    kind=target.node_kind,
                    parent=1,
                    is_target=True,
                ),
            ]
        )

    @staticmethod
    def _checked(tree: Tree) -> Tree:
        report = run_tree_checks(tree)
        if report.has_failures:
            raise TreeCorruptionError(violations=report.failures)
        return tree
