"""Error types for tree generation and hunting.

Fatal errors (bad arguments, unknown node kinds, broken trees, bad
configuration) derive from RingHunterError and are always surfaced to the
caller. CatalogLoadWarning is not an exception: it records a catalog entry
that was skipped while loading, and loading carries on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class RingHunterError(Exception):
    """Base class for all fatal Ring Hunter errors."""


@dataclass
class InvalidArgumentError(RingHunterError, ValueError):
    """Raised when an operation receives an argument it cannot work with.

    Attributes:
        argument: Name of the offending argument.
        reason: What is wrong with it.
    """

    argument: str
    reason: str

    def __post_init__(self) -> None:
        super().__init__(f"Invalid argument '{self.argument}': {self.reason}")


@dataclass
class UnrecognizedKindError(RingHunterError, LookupError):
    """Raised when a template lookup meets a kind outside Root/Being/Place.

    Attributes:
        kind: The value that was looked up.
        table: Which template table the lookup was made against.
    """

    kind: Any
    table: str = ""

    def __post_init__(self) -> None:
        msg = f"Unrecognized node kind: {self.kind!r}"
        if self.table:
            msg += f" ({self.table})"
        super().__init__(msg)


@dataclass
class TreeCorruptionError(RingHunterError):
    """Raised when a tree breaks its structural invariants.

    This indicates a bug in tree construction or a hand-built tree that was
    never valid, not bad luck in the random source.

    Attributes:
        violations: Human-readable invariant violations.
    """

    violations: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(f"Tree corruption detected: {len(self.violations)} violation(s)")

    def __str__(self) -> str:
        lines = ["Tree corruption detected:"]
        for v in self.violations[:5]:
            lines.append(f"  - {v}")
        if len(self.violations) > 5:
            lines.append(f"  - ... and {len(self.violations) - 5} more")
        return "\n".join(lines)


class ConfigError(RingHunterError):
    """Raised when a configuration or catalog file cannot be loaded."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f" at {path}" if path is not None else ""
        super().__init__(f"Failed to load configuration{where}: {reason}")


@dataclass(frozen=True)
class CatalogLoadWarning:
    """A catalog record that was skipped during loading.

    Attributes:
        index: Position of the record in the source list.
        raw: The record as it appeared in the source.
        reason: Why it could not be used.
    """

    index: int
    raw: Any
    reason: str

    def __str__(self) -> str:
        return f"record #{self.index} skipped: {self.reason}"
