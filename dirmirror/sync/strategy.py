"""Sync strategies."""

from enum import Enum


class SyncStrategy(str, Enum):
    """How items that exist only in the target are treated during sync."""

    FULL = "full"
    """Mirror base exactly: target-only items are removed"""

    PATCH = "patch"
    """Bring base items over without removing anything from target"""

    @classmethod
    def from_string(cls, value: str) -> "SyncStrategy":
        """Parse a strategy name or abbreviation.

        Args:
            value: Strategy name ("full", "patch") or alias ("f", "mirror", "p")

        Returns:
            SyncStrategy

        Raises:
            ValueError: If the name is not recognised

        Examples:
            >>> SyncStrategy.from_string("Full")
            <SyncStrategy.FULL: 'full'>
            >>> SyncStrategy.from_string("p")
            <SyncStrategy.PATCH: 'patch'>
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        strategy = _ALIASES.get(key)
        if strategy is None:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Can't use that strategy! {value!r} (expected: {valid})")
        return strategy

    @property
    def removes_new_items(self) -> bool:
        """Whether target-only items are removed."""
        return self is SyncStrategy.FULL

    @property
    def is_destructive(self) -> bool:
        """Whether a sync with this strategy can delete data in the target."""
        return self.removes_new_items


_ALIASES = {
    "full": SyncStrategy.FULL,
    "f": SyncStrategy.FULL,
    "mirror": SyncStrategy.FULL,
    "patch": SyncStrategy.PATCH,
    "p": SyncStrategy.PATCH,
}
