"""Narrative text for hunts.

Two tables keyed by node kind drive all wording: one for encounters during
the search and one for the steps of the final itinerary. The "near" and
"found" narrations are fixed lines.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ringhunter.errors import UnrecognizedKindError
from ringhunter.nodes import NodeKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ringhunter.nodes import Node

ENCOUNTER_TEMPLATES: dict[NodeKind, str] = {
    NodeKind.ROOT: "Leaving {name} ({description})",
    NodeKind.BEING: "Meeting {name} ({description})",
    NodeKind.PLACE: "Entering (the) {name} ({description})",
}

PATH_PHRASES: dict[NodeKind, str] = {
    NodeKind.ROOT: "Start at ",
    NodeKind.BEING: "and then go see ",
    NodeKind.PLACE: "and then visit (the) ",
}

TARGET_FOUND = "WE FOUND THE ONE RING. MUHAHA!"
TARGET_NEAR = "The Ring is near; I can feel it"
PATH_MARKER = "...the path is..."


def _lookup(table: dict[NodeKind, str], kind: Any, table_name: str) -> str:
    if not isinstance(kind, NodeKind):
        raise UnrecognizedKindError(kind=kind, table=table_name)
    return table[kind]


def encounter_line(node: Node) -> str:
    """Narrate meeting ``node`` during the search."""
    template = _lookup(ENCOUNTER_TEMPLATES, node.kind, "encounter")
    return template.format(name=node.name, description=node.description)


def path_phrase(kind: Any) -> str:
    """Return the itinerary prefix for a node kind.

    Raises:
        UnrecognizedKindError: If ``kind`` is not a NodeKind.
    """
    return _lookup(PATH_PHRASES, kind, "path")


def path_step(node: Node) -> str:
    return f"{path_phrase(node.kind)}{node.name}"


def build_itinerary(path: Iterable[Node]) -> str:
    """Join the steps of a root-first path into one itinerary."""
    return "\n".join(path_step(node) for node in path)


def compose_hunting_report(encounters: Iterable[str], itinerary: str) -> str:
    """Encounter lines in order, then the path marker, then the itinerary."""
    lines = [*encounters, PATH_MARKER, itinerary]
    return "\n".join(lines)


def format_full_report(hunter_name: str, hunting_report: str) -> str:
    """Header naming the hunter, followed by the hunting report."""
    return f"Hunter name: {hunter_name}\n\nHunting report:\n{hunting_report}"
