"""Hierarchical comparison of two directory snapshots."""

import logging
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Generic, TypeVar

from ..utils import DEFAULT_HASH_CHUNK_SIZE
from .hashing import hash_file
from .snapshot import DirectorySnapshot, FileEntry

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True)
class Partition(Generic[T]):
    """Four-way classification of the union of two name sets.

    The sets are pairwise disjoint and together cover every name present
    on either side. A partition is never modified once built.
    """

    missing: frozenset[T] = frozenset()
    """Present in base, absent in target"""

    new: frozenset[T] = frozenset()
    """Present in target, absent in base"""

    changed: frozenset[T] = frozenset()
    """Present in both, contents differ"""

    same: frozenset[T] = frozenset()
    """Present in both, contents identical"""

    def __post_init__(self) -> None:
        for name in ("missing", "new", "changed", "same"):
            object.__setattr__(self, name, frozenset(getattr(self, name)))

    @classmethod
    def from_names(cls, base: Iterable[T], target: Iterable[T]) -> "Partition[T]":
        """Partition two name sets by presence.

        Names present on both sides start out in ``same``; a content check
        moves them to ``changed`` with with_changed().

        Args:
            base: Names on the base side
            target: Names on the target side

        Returns:
            Partition with ``changed`` empty
        """
        base_names = set(base)
        target_names = set(target)
        return cls(
            missing=base_names - target_names,
            new=target_names - base_names,
            same=base_names & target_names,
        )

    def with_changed(self, names: Iterable[T]) -> "Partition[T]":
        """Get a copy with names present on both sides moved to ``changed``.

        Raises:
            KeyError: If a name is not present on both sides
        """
        names = set(names)
        both = self.same | self.changed
        for name in names:
            if name not in both:
                raise KeyError(f"{name!r} is not present on both sides")
        return Partition(
            missing=self.missing,
            new=self.new,
            changed=self.changed | names,
            same=self.same - names,
        )

    def unchanged(self) -> bool:
        """Check that nothing was added, removed or modified."""
        return not (self.missing or self.new or self.changed)

    def all_names(self) -> frozenset[T]:
        """Get the union of all four categories."""
        return self.missing | self.new | self.changed | self.same


@dataclass(frozen=True)
class DirectoryDiff:
    """Result of comparing two snapshots at one tree level."""

    files: Partition[str] = field(default_factory=Partition)
    """Classification of file names"""

    subdirs: Partition[str] = field(default_factory=Partition)
    """Classification of subdirectory names"""

    nested: Mapping[str, "DirectoryDiff"] = field(default_factory=dict)
    """Diffs of subdirectories that differ, keyed by name"""

    unreadable: frozenset[str] = frozenset()
    """File names whose contents could not be hashed on one side.

    These are also in ``files.changed``.
    """

    def __post_init__(self) -> None:
        object.__setattr__(self, "nested", MappingProxyType(dict(self.nested)))
        object.__setattr__(self, "unreadable", frozenset(self.unreadable))

    def unchanged(self) -> bool:
        """Check whether the two trees are identical at this level and below."""
        return self.files.unchanged() and self.subdirs.unchanged() and not self.nested

    def all_unreadable(self, prefix: str = "") -> list[str]:
        """Collect relative paths of unreadable files across the whole diff."""
        paths = [f"{prefix}{name}" for name in sorted(self.unreadable)]
        for name in sorted(self.nested):
            paths.extend(self.nested[name].all_unreadable(f"{prefix}{name}/"))
        return paths


class TreeComparator:
    """Compares two directory snapshots.

    Files present on both sides are compared by SHA-256 digest of their
    contents. Subdirectories present on both sides are compared
    recursively, and only those that differ get a nested diff.

    Examples:
        >>> comparator = TreeComparator()
        >>> diff = comparator.compare(build_snapshot(base), build_snapshot(target))
        >>> diff.files.missing
        frozenset({'report.pdf'})
    """

    def __init__(self, chunk_size: int = DEFAULT_HASH_CHUNK_SIZE):
        """Initialize tree comparator.

        Args:
            chunk_size: Read size used when hashing file contents
        """
        self.chunk_size = chunk_size

    def compare(
        self, base: DirectorySnapshot, target: DirectorySnapshot
    ) -> DirectoryDiff:
        """Compare the contents of two snapshots.

        The snapshots' own paths are not compared, only their contents.

        Args:
            base: Snapshot of the reference tree
            target: Snapshot of the tree to compare against it

        Returns:
            DirectoryDiff for this level, with nested diffs for every
            subdirectory that differs
        """
        files = Partition.from_names(base.files, target.files)
        subdirs = Partition.from_names(base.subdirs, target.subdirs)

        unreadable: set[str] = set()
        changed_files = [
            name
            for name in sorted(files.same)
            if not self._same_content(base.files[name], target.files[name], unreadable)
        ]

        nested: dict[str, DirectoryDiff] = {}
        for name in sorted(subdirs.same):
            subdiff = self.compare(base.subdirs[name], target.subdirs[name])
            if not subdiff.unchanged():
                nested[name] = subdiff

        return DirectoryDiff(
            files=files.with_changed(changed_files),
            subdirs=subdirs.with_changed(nested),
            nested=nested,
            unreadable=unreadable,
        )

    def _same_content(
        self, base_file: FileEntry, target_file: FileEntry, unreadable: set[str]
    ) -> bool:
        """Compare two files by content digest.

        A file that cannot be read counts as changed and its name is added
        to ``unreadable``.
        """
        try:
            base_hash = hash_file(base_file.path, self.chunk_size)
            target_hash = hash_file(target_file.path, self.chunk_size)
        except OSError as e:
            logger.warning(
                "Cannot hash %s or %s (%s); treating as changed",
                base_file.path,
                target_file.path,
                e,
            )
            unreadable.add(base_file.name)
            return False

        return base_hash == target_hash


def compare_snapshots(
    base: DirectorySnapshot,
    target: DirectorySnapshot,
    chunk_size: int = DEFAULT_HASH_CHUNK_SIZE,
) -> DirectoryDiff:
    """Compare two snapshots with a one-off comparator."""
    return TreeComparator(chunk_size=chunk_size).compare(base, target)
