"""Depth-first hunt for the target node.

The hunter keeps its own bookkeeping and never touches the tree: a frontier
stack holding the ancestor chain of the node being explored, a set of
visited handles, and the encounter log. Once the target is found the
frontier is exactly the root-to-target path, which becomes the itinerary.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ringhunter.errors import InvalidArgumentError, TreeCorruptionError
from ringhunter.observability.logging import get_logger
from ringhunter.report import (
    TARGET_FOUND,
    TARGET_NEAR,
    build_itinerary,
    compose_hunting_report,
    encounter_line,
    format_full_report,
)

if TYPE_CHECKING:
    from ringhunter.nodes import Node, Tree

log = get_logger(__name__)

DEFAULT_HUNTER_NAME = "Witch-king of Angmar"


@dataclass
class HuntReport:
    """Outcome of a successful hunt.

    Attributes:
        hunter_name: Who did the hunting.
        encounters: Narrated events in visitation order.
        path: Nodes from the root to the target.
        visited: Number of distinct nodes met, root included.
    """

    hunter_name: str
    encounters: list[str] = field(default_factory=list)
    path: list[Node] = field(default_factory=list)
    visited: int = 0

    @property
    def itinerary(self) -> str:
        return build_itinerary(self.path)

    @property
    def hunting_report(self) -> str:
        return compose_hunting_report(self.encounters, self.itinerary)

    @property
    def target(self) -> Node:
        return self.path[-1]

    def full_report(self) -> str:
        return format_full_report(self.hunter_name, self.hunting_report)


class DepthFirstHunter:
    """Searches a tree depth-first, descending early toward the target.

    Children are scanned in order. A child that is the target ends the hunt;
    a child that is adjacent to the target or has children of its own is
    entered next. Leaves are narrated and skipped. When a node's children
    are exhausted the hunter backs up to its parent.
    """

    def __init__(self, name: str = DEFAULT_HUNTER_NAME) -> None:
        self.name = name

    def hunt(self, tree: Tree | None) -> HuntReport:
        """Locate the target in ``tree``.

        Args:
            tree: A tree produced by TreeBuilder.build().

        Returns:
            HuntReport with the encounter log and root-to-target path.

        Raises:
            InvalidArgumentError: If tree is None.
            TreeCorruptionError: If the search runs out of nodes without
                finding a target.
        """
        if tree is None:
            raise InvalidArgumentError("tree", "cannot hunt without a tree")

        root = tree.root
        report = HuntReport(hunter_name=self.name, encounters=[encounter_line(root)])
        frontier: list[Node] = [root]
        visited: set[int] = {root.id}

        while frontier:
            current = frontier.pop()
            for child in tree.children_of(current):
                if child.id in visited:
                    continue
                visited.add(child.id)
                report.encounters.append(encounter_line(child))

                if child.is_target:
                    frontier.extend((current, child))
                    report.encounters.append(TARGET_FOUND)
                    report.path = self._drain(frontier)
                    report.visited = len(visited)
                    log.info(
                        "hunt_completed",
                        hunter=self.name,
                        target=child.name,
                        visited=report.visited,
                        path_length=len(report.path),
                    )
                    return report
                if child.is_adjacent_to_target:
                    frontier.extend((current, child))
                    report.encounters.append(TARGET_NEAR)
                    break
                if child.children:
                    frontier.extend((current, child))
                    break
            else:
                log.debug("hunt_backtrack", node=current.name, depth=len(frontier))

        raise TreeCorruptionError(
            violations=[f"target not reachable from {root.name!r} after {len(visited)} node(s)"]
        )

    @staticmethod
    def _drain(frontier: list[Node]) -> list[Node]:
        """Empty the frontier top-first into a root-first path."""
        path: deque[Node] = deque()
        while frontier:
            path.appendleft(frontier.pop())
        return list(path)
