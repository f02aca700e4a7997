"""Node model for Middle-earth trees.

A Tree is an arena of frozen Node records addressed by integer handles.
Parent and child links are handles into the arena, so a node never owns
another node and identity is the handle, never the name or description.
Handle 0 is always the root.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ringhunter.errors import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class NodeKind(StrEnum):
    """Closed set of node variants."""

    ROOT = "Root"
    BEING = "Being"
    PLACE = "Place"


ROOT_HANDLE = 0


@dataclass(frozen=True)
class Node:
    """A single entity in a tree.

    Attributes:
        id: Handle of this node, unique within its tree.
        name: Display name (e.g., "Gandalf").
        description: Short description (e.g., "the grey wizard").
        kind: Root, Being or Place.
        parent: Handle of the parent, None for the root.
        children: Child handles in insertion order.
        is_target: True for the single node the hunt must locate.
        is_adjacent_to_target: True for the target's parent only.
    """

    id: int
    name: str
    description: str
    kind: NodeKind
    parent: int | None = None
    children: tuple[int, ...] = ()
    is_target: bool = False
    is_adjacent_to_target: bool = False

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def __str__(self) -> str:
        return self.name


class Tree:
    """Immutable rooted tree stored as an arena of nodes."""

    def __init__(self, nodes: Sequence[Node]) -> None:
        """Wrap a sequence of nodes whose ids match their positions.

        Raises:
            InvalidArgumentError: If the sequence is empty or a node's id
                does not match its position.
        """
        if not nodes:
            raise InvalidArgumentError("nodes", "a tree needs at least a root node")
        for position, node in enumerate(nodes):
            if node.id != position:
                raise InvalidArgumentError(
                    "nodes", f"node {node.name!r} has id {node.id} at position {position}"
                )
        self._nodes: tuple[Node, ...] = tuple(nodes)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def root(self) -> Node:
        return self._nodes[ROOT_HANDLE]

    @property
    def target(self) -> Node | None:
        """The node flagged as target, or None if the tree has none."""
        return next((n for n in self._nodes if n.is_target), None)

    def node(self, handle: int) -> Node:
        """Look up a node by handle.

        Raises:
            InvalidArgumentError: If the handle does not belong to this tree.
        """
        if not 0 <= handle < len(self._nodes):
            raise InvalidArgumentError("handle", f"no node with handle {handle}")
        return self._nodes[handle]

    def children_of(self, node: Node) -> tuple[Node, ...]:
        return tuple(self._nodes[h] for h in node.children)

    def parent_of(self, node: Node) -> Node | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def depth_of(self, node: Node) -> int:
        """Number of edges between the root and ``node``."""
        depth = 0
        current = node
        while current.parent is not None:
            if depth > len(self._nodes):
                raise InvalidArgumentError("node", f"{node.name!r} is part of a cycle")
            current = self._nodes[current.parent]
            depth += 1
        return depth

    def walk(self) -> Iterator[Node]:
        """Yield nodes in pre-order, children in insertion order."""
        stack = [self.root]
        seen: set[int] = set()
        while stack:
            node = stack.pop()
            if node.id in seen:
                continue
            seen.add(node.id)
            yield node
            stack.extend(self._nodes[h] for h in reversed(node.children))

    def outline(self, indent: str = "  ") -> str:
        """Render the tree as an indented text outline."""
        lines = []
        for node in self.walk():
            marker = " *" if node.is_target else ""
            lines.append(f"{indent * self.depth_of(node)}{node.name} [{node.kind}]{marker}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        return f"Tree(root={self.root.name!r}, nodes={len(self._nodes)})"
