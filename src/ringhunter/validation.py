"""Structural checks for generated trees.

Each check inspects a Tree and returns a ValidationCheck. The builder runs
the full set before handing a tree out; tests run them against many random
builds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from ringhunter.nodes import ROOT_HANDLE, NodeKind

if TYPE_CHECKING:
    from ringhunter.nodes import Tree


@dataclass
class ValidationCheck:
    """Result of a single validation check.

    Attributes:
        name: Identifier for the check.
        severity: "pass" or "fail".
        message: Human-readable description of the result.
    """

    name: str
    severity: Literal["pass", "fail"]
    message: str = ""


@dataclass
class ValidationReport:
    """Aggregated results of validation checks."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return any(c.severity == "fail" for c in self.checks)

    @property
    def failures(self) -> list[str]:
        return [f"{c.name}: {c.message}" for c in self.checks if c.severity == "fail"]

    @property
    def summary(self) -> str:
        fails = sum(1 for c in self.checks if c.severity == "fail")
        passes = len(self.checks) - fails
        parts: list[str] = []
        if fails:
            parts.append(f"{fails} failed")
        if passes:
            parts.append(f"{passes} passed")
        return ", ".join(parts)


def check_single_root(tree: Tree) -> ValidationCheck:
    """Exactly one Root node, at handle 0, without a parent."""
    roots = [n for n in tree if n.kind == NodeKind.ROOT]
    if len(roots) != 1:
        names = ", ".join(n.name for n in roots) or "none"
        return ValidationCheck("single_root", "fail", f"Expected one root, found: {names}")
    root = roots[0]
    if root.id != ROOT_HANDLE or root.parent is not None:
        return ValidationCheck(
            "single_root", "fail", f"Root {root.name!r} is not a parentless node at handle 0"
        )
    return ValidationCheck("single_root", "pass", f"Root: {root.name}")


def check_single_target(tree: Tree) -> ValidationCheck:
    targets = [n for n in tree if n.is_target]
    if len(targets) == 1:
        return ValidationCheck("single_target", "pass", f"Target: {targets[0].name}")
    names = ", ".join(n.name for n in targets) or "none"
    return ValidationCheck("single_target", "fail", f"Expected one target, found: {names}")


def check_adjacency(tree: Tree) -> ValidationCheck:
    """The target's parent, and only it, is flagged adjacent."""
    adjacent = [n for n in tree if n.is_adjacent_to_target]
    target = tree.target
    if target is None or target.parent is None or not 0 <= target.parent < len(tree):
        return ValidationCheck("adjacency", "fail", "Target is missing or has no parent")
    if len(adjacent) != 1 or adjacent[0].id != target.parent:
        names = ", ".join(n.name for n in adjacent) or "none"
        return ValidationCheck(
            "adjacency",
            "fail",
            f"Adjacent flags ({names}) do not match target parent "
            f"{tree.node(target.parent).name!r}",
        )
    return ValidationCheck("adjacency", "pass", f"Adjacent: {adjacent[0].name}")


def check_root_has_children(tree: Tree) -> ValidationCheck:
    if tree.root.children:
        return ValidationCheck(
            "root_has_children", "pass", f"Root has {len(tree.root.children)} child(ren)"
        )
    return ValidationCheck("root_has_children", "fail", "Root has no children")


def check_links(tree: Tree) -> ValidationCheck:
    """Parent and child handles agree and every child is listed once."""
    problems: list[str] = []
    claimed: dict[int, int] = {}
    for node in tree:
        for handle in node.children:
            if not 0 <= handle < len(tree):
                problems.append(f"{node.name!r} lists unknown child handle {handle}")
                continue
            if handle in claimed:
                problems.append(f"handle {handle} is a child of more than one node")
            claimed[handle] = node.id
            if tree.node(handle).parent != node.id:
                problems.append(f"{tree.node(handle).name!r} does not point back to {node.name!r}")
    for node in tree:
        if node.id != ROOT_HANDLE and claimed.get(node.id) != node.parent:
            problems.append(f"{node.name!r} is not listed among its parent's children")
    if problems:
        return ValidationCheck("links", "fail", "; ".join(problems[:5]))
    return ValidationCheck("links", "pass", "Parent and child links agree")


def check_acyclic_connected(tree: Tree) -> ValidationCheck:
    """Every node reaches the root by following parents, without revisiting."""
    for node in tree:
        seen = {node.id}
        current = node
        while current.parent is not None:
            if current.parent in seen or not 0 <= current.parent < len(tree):
                return ValidationCheck(
                    "acyclic_connected", "fail", f"{node.name!r} has no finite path to the root"
                )
            seen.add(current.parent)
            current = tree.node(current.parent)
        if current.id != ROOT_HANDLE:
            return ValidationCheck(
                "acyclic_connected", "fail", f"{node.name!r} is detached from the root"
            )
    return ValidationCheck("acyclic_connected", "pass", f"All {len(tree)} nodes reach the root")


def run_tree_checks(tree: Tree) -> ValidationReport:
    """Run every structural check against ``tree``."""
    return ValidationReport(
        checks=[
            check_single_root(tree),
            check_single_target(tree),
            check_adjacency(tree),
            check_root_has_children(tree),
            check_links(tree),
            check_acyclic_connected(tree),
        ]
    )
