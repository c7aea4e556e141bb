"""Filesystem operations produced by sync planning."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Union


@dataclass(frozen=True)
class Copy:
    """Copy a file or a whole directory tree from base to target."""

    source: Path
    """Path in the base tree"""

    destination: Path
    """Path in the target tree"""

    kind = "copy"

    def __str__(self) -> str:
        return f"Copying '{self.source}' to '{self.destination}'"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "action": self.kind,
            "source": str(self.source),
            "destination": str(self.destination),
        }


@dataclass(frozen=True)
class Remove:
    """Remove a file or a whole directory tree from the target."""

    path: Path
    """Path in the target tree"""

    kind = "remove"

    def __str__(self) -> str:
        return f"Removing '{self.path}'"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {"action": self.kind, "path": str(self.path)}


@dataclass(frozen=True)
class Keep:
    """Leave a target entry as it is.

    Has no filesystem effect; recorded so that a dry run can report every
    decision, including the ones that need no action.
    """

    path: Path
    """Path in the target tree"""

    kind = "keep"

    def __str__(self) -> str:
        return f"Keeping '{self.path}'"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {"action": self.kind, "path": str(self.path)}


SyncOperation = Union[Copy, Remove, Keep]


def count_operations(operations: Iterable[SyncOperation]) -> dict[str, int]:
    """Count operations by kind.

    Args:
        operations: Sync operations

    Returns:
        Dictionary with "copies", "removes" and "keeps" counts
    """
    stats = {"copies": 0, "removes": 0, "keeps": 0}
    for op in operations:
        if isinstance(op, Copy):
            stats["copies"] += 1
        elif isinstance(op, Remove):
            stats["removes"] += 1
        elif isinstance(op, Keep):
            stats["keeps"] += 1
        else:
            raise TypeError(f"Unknown sync operation: {op!r}")
    return stats
