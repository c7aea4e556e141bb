"""Turns a directory diff into an ordered list of sync operations."""

import logging
from pathlib import Path
from typing import Union

from .diff import DirectoryDiff
from .operations import Copy, Keep, Remove, SyncOperation
from .strategy import SyncStrategy

logger = logging.getLogger(__name__)


class SyncPlanner:
    """Plans the operations that make a target tree match a base tree.

    Within one directory level, removals come first, then copies, then
    keeps, and finally the plans of changed subdirectories. Removing
    before copying lets a name that switched between file and directory
    be replaced under the full strategy.

    Examples:
        >>> planner = SyncPlanner(SyncStrategy.PATCH)
        >>> ops = planner.plan(diff, Path("/base"), Path("/target"))
        >>> [str(op) for op in ops]
        ["Copying '/base/a/f2' to '/target/a/f2'",
         "Keeping '/target/a/f3'",
         "Keeping '/target/a/f1'"]
    """

    def __init__(self, strategy: SyncStrategy):
        """Initialize sync planner.

        Args:
            strategy: Decides whether target-only items are removed or kept
        """
        self.strategy = strategy

    def plan(
        self,
        diff: DirectoryDiff,
        base_root: Union[str, Path],
        target_root: Union[str, Path],
    ) -> list[SyncOperation]:
        """Plan the operations for a diff.

        Args:
            diff: Diff between base_root and target_root
            base_root: Directory the diff's base side was built from
            target_root: Directory the diff's target side was built from

        Returns:
            Ordered list of operations
        """
        operations: list[SyncOperation] = []
        self._plan_level(diff, Path(base_root), Path(target_root), operations)
        logger.debug(
            "Planned %d operation(s) with %s strategy",
            len(operations),
            self.strategy.value,
        )
        return operations

    def _plan_level(
        self,
        diff: DirectoryDiff,
        base_root: Path,
        target_root: Path,
        operations: list[SyncOperation],
    ) -> None:
        files = diff.files
        subdirs = diff.subdirs

        # Target-only entries
        target_only = sorted(files.new | subdirs.new)
        if self.strategy.removes_new_items:
            operations.extend(Remove(target_root / name) for name in target_only)

        # Files missing or different in target, and whole missing subtrees
        for name in sorted(files.missing | files.changed | subdirs.missing):
            operations.append(Copy(base_root / name, target_root / name))

        if not self.strategy.removes_new_items:
            operations.extend(Keep(target_root / name) for name in target_only)
        for name in sorted(files.same | subdirs.same):
            operations.append(Keep(target_root / name))

        # Only subdirectories with a nested diff are planned entry by entry
        for name in sorted(diff.nested):
            self._plan_level(
                diff.nested[name], base_root / name, target_root / name, operations
            )


def plan_sync(
    diff: DirectoryDiff,
    strategy: SyncStrategy,
    base_root: Union[str, Path],
    target_root: Union[str, Path],
) -> list[SyncOperation]:
    """Plan the operations for a diff with a one-off planner.

    Args:
        diff: Diff between base_root and target_root
        strategy: Sync strategy
        base_root: Base directory
        target_root: Target directory

    Returns:
        Ordered list of operations
    """
    return SyncPlanner(strategy).plan(diff, base_root, target_root)
