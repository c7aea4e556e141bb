"""Core engine tying snapshot, comparison, planning and execution together."""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..config import Config
from ..output import OutputFormatter
from ..utils import DEFAULT_HASH_CHUNK_SIZE
from .diff import DirectoryDiff, TreeComparator
from .executor import SyncExecutor
from .operations import Copy, Keep, Remove, SyncOperation, count_operations
from .organize import generate_organize_operations
from .planner import SyncPlanner
from .snapshot import DirectorySnapshot, SnapshotBuilder
from .strategy import SyncStrategy

logger = logging.getLogger(__name__)


class MirrorEngine:
    """Compares and syncs a base directory tree into a target tree."""

    def __init__(
        self,
        output: Optional[OutputFormatter] = None,
        config: Optional[Config] = None,
    ):
        """Initialize mirror engine.

        Args:
            output: Output formatter for displaying progress/status
            config: Settings for hashing, filtering and copy behaviour.
                Built-in defaults are used when omitted.
        """
        self.output = output or OutputFormatter()
        self.config = config

        if config is not None:
            self.chunk_size = config.get_hash_chunk_size()
            self.replace_mismatched = bool(config.get("replace_mismatched"))
            self.builder = SnapshotBuilder(
                ignore_patterns=config.get("ignore_patterns"),
                exclude_dot_files=bool(config.get("exclude_dot_files")),
            )
        else:
            self.chunk_size = DEFAULT_HASH_CHUNK_SIZE
            self.replace_mismatched = False
            self.builder = SnapshotBuilder()

    def _validate_directory(self, path: Path, role: str) -> None:
        if not path.exists():
            raise ValueError(f"{role} directory does not exist: {path}")
        if not path.is_dir():
            raise ValueError(f"{role} path is not a directory: {path}")

    def scan(
        self, base: Union[str, Path], target: Union[str, Path]
    ) -> tuple[DirectorySnapshot, DirectorySnapshot]:
        """Build snapshots of both trees.

        Args:
            base: Base directory
            target: Target directory

        Returns:
            Tuple of (base snapshot, target snapshot)

        Raises:
            ValueError: If either path is missing or not a directory
            SnapshotError: If a directory cannot be listed
        """
        base_path = Path(base)
        target_path = Path(target)
        self._validate_directory(base_path, "Base")
        self._validate_directory(target_path, "Target")

        scan_start = time.time()
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            task = progress.add_task("Scanning base directory...", total=None)
            base_snapshot = self.builder.build(base_path)
            progress.update(
                task, description=f"Found {base_snapshot.file_count()} base file(s)"
            )

            task = progress.add_task("Scanning target directory...", total=None)
            target_snapshot = self.builder.build(target_path)
            progress.update(
                task,
                description=f"Found {target_snapshot.file_count()} target file(s)",
            )

        logger.debug(f"Scan took {time.time() - scan_start:.2f}s")
        return base_snapshot, target_snapshot

    def compare(
        self, base: Union[str, Path], target: Union[str, Path]
    ) -> DirectoryDiff:
        """Compare two directory trees.

        Args:
            base: Base directory
            target: Target directory

        Returns:
            DirectoryDiff of the two trees

        Examples:
            >>> engine = MirrorEngine()
            >>> diff = engine.compare("/photos", "/backup/photos")
            >>> diff.unchanged()
            True
        """
        base_snapshot, target_snapshot = self.scan(base, target)
        compare_start = time.time()
        diff = TreeComparator(chunk_size=self.chunk_size).compare(
            base_snapshot, target_snapshot
        )
        logger.debug(f"Comparison took {time.time() - compare_start:.2f}s")

        unreadable = diff.all_unreadable()
        if unreadable and not self.output.quiet:
            self.output.warning(
                f"{len(unreadable)} file(s) could not be read and are treated "
                "as changed"
            )
        return diff

    def plan(
        self,
        base: Union[str, Path],
        target: Union[str, Path],
        strategy: SyncStrategy,
    ) -> tuple[DirectoryDiff, list[SyncOperation]]:
        """Compare two trees and plan the sync.

        Returns:
            Tuple of (diff, planned operations)
        """
        diff = self.compare(base, target)
        operations = SyncPlanner(strategy).plan(
            diff, Path(base).absolute(), Path(target).absolute()
        )
        return diff, operations

    def sync_pair(
        self,
        base: Union[str, Path],
        target: Union[str, Path],
        strategy: SyncStrategy = SyncStrategy.FULL,
        dry_run: bool = False,
    ) -> dict:
        """Make a target tree match a base tree.

        Args:
            base: Base directory (never modified)
            target: Target directory
            strategy: Whether target-only items are removed or kept
            dry_run: If True, only show what would be done

        Returns:
            Dictionary with sync statistics

        Raises:
            ValueError: If either path is missing or not a directory
            SnapshotError: If a directory cannot be listed
            SyncExecutionError: If an operation fails; earlier operations
                stay applied

        Examples:
            >>> engine = MirrorEngine()
            >>> stats = engine.sync_pair("/photos", "/backup/photos", dry_run=True)
            >>> print(f"Would copy {stats['copies']} item(s)")
        """
        if not self.output.quiet:
            self.output.info(f"Syncing: {base} -> {target}")
            self.output.info(f"Strategy: {strategy.value}")
            if dry_run:
                self.output.info("Dry run: No changes will be made")
            self.output.print("")

        _, operations = self.plan(base, target, strategy)

        stats: dict = dict(count_operations(operations))
        stats["executed"] = False
        self._display_sync_plan(stats, operations, dry_run)

        if (
            strategy.is_destructive
            and stats["removes"] > 0
            and not dry_run
            and not self.output.quiet
        ):
            self.output.warning(
                f"Removing {stats['removes']} item(s) that exist only in {target}"
            )

        if dry_run:
            for op in operations:
                logger.info(str(op))
        else:
            executor = SyncExecutor(replace_mismatched=self.replace_mismatched)
            execution_stats = executor.execute(operations)
            stats.update(
                {
                    "executed": True,
                    "files_copied": execution_stats["files_copied"],
                    "bytes_copied": execution_stats["bytes_copied"],
                    "files_removed": execution_stats["files_removed"],
                    "dirs_removed": execution_stats["dirs_removed"],
                    "skipped": execution_stats["skipped"],
                }
            )

        if not self.output.quiet:
            self._display_summary(stats, dry_run)

        return stats

    def organize(self, base: Union[str, Path]) -> list[SyncOperation]:
        """Plan the reorganization of a directory.

        Args:
            base: Directory to organize

        Returns:
            Planned operations
        """
        base_path = Path(base)
        self._validate_directory(base_path, "Base")
        snapshot = self.builder.build(base_path)
        return generate_organize_operations(snapshot)

    def _display_sync_plan(
        self,
        stats: dict,
        operations: list[SyncOperation],
        dry_run: bool,
    ) -> None:
        """Display sync plan to user.

        Args:
            stats: Statistics dictionary
            operations: Planned operations
            dry_run: Whether this is a dry run
        """
        if self.output.quiet:
            return

        self.output.info("Sync plan:")
        if stats["copies"] > 0:
            self.output.info(f"  → Copy: {stats['copies']} item(s)")
        if stats["removes"] > 0:
            self.output.info(f"  ✗ Remove: {stats['removes']} item(s)")
        if stats["keeps"] > 0:
            self.output.info(f"  = Keep: {stats['keeps']} item(s)")

        # Every decision is listed in a dry run, only actual changes otherwise
        if dry_run:
            self.output.print("")
            for op in operations:
                self.output.info(f"  {op}")
        else:
            for op in operations:
                if isinstance(op, (Copy, Remove)):
                    self.output.info(f"  {op}")
                elif not isinstance(op, Keep):
                    raise TypeError(f"Unknown sync operation: {op!r}")

        self.output.print("")

    def _display_summary(self, stats: dict, dry_run: bool) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
            dry_run: Whether this was a dry run
        """
        self.output.print("")
        if dry_run:
            self.output.success("Dry run complete!")
        else:
            self.output.success("Sync complete!")

        total_actions = stats["copies"] + stats["removes"]
        if total_actions > 0:
            if dry_run:
                copied, removed = "Would copy", "Would remove"
            else:
                copied, removed = "Copied", "Removed"
            self.output.info(f"Total actions: {total_actions}")
            if stats["copies"] > 0:
                self.output.info(f"  {copied}: {stats['copies']}")
            if stats["removes"] > 0:
                self.output.info(f"  {removed}: {stats['removes']}")
            if stats.get("bytes_copied"):
                size = self.output.format_size(stats["bytes_copied"])
                self.output.info(f"  Bytes copied: {size}")
        else:
            self.output.info("No changes needed - everything is in sync!")
