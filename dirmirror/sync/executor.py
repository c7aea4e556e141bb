"""Applies sync operations to the filesystem."""

import logging
import shutil
from pathlib import Path
from typing import Iterable, Optional

from ..exceptions import DestinationTypeMismatchError, SyncExecutionError
from .operations import Copy, Keep, Remove, SyncOperation

logger = logging.getLogger(__name__)


class SyncExecutor:
    """Executes a sync plan sequentially.

    Operations run in order and execution stops at the first failure.
    Already applied operations are not rolled back.
    """

    def __init__(self, replace_mismatched: bool = False):
        """Initialize sync executor.

        Args:
            replace_mismatched: When a copy destination exists as the other
                kind of entry (a directory where a file is copied, or the
                reverse, or a symbolic link), remove it and copy anyway.
                When False such a copy fails with
                DestinationTypeMismatchError.
        """
        self.replace_mismatched = replace_mismatched
        self.stats = self._create_empty_stats()

    def _create_empty_stats(self) -> dict:
        """Create an empty statistics dictionary.

        Returns:
            Dictionary with zero counts for all stat categories
        """
        return {
            "copies": 0,
            "removes": 0,
            "keeps": 0,
            "files_copied": 0,
            "bytes_copied": 0,
            "files_removed": 0,
            "dirs_removed": 0,
            "skipped": 0,
        }

    def execute(self, operations: Iterable[SyncOperation]) -> dict:
        """Execute operations in order.

        Args:
            operations: Planned sync operations

        Returns:
            Dictionary with execution statistics

        Raises:
            SyncExecutionError: On the first operation that fails
        """
        self.stats = self._create_empty_stats()
        for op in operations:
            logger.info(str(op))
            try:
                self._apply(op)
            except SyncExecutionError as e:
                if e.operation is None:
                    e.operation = op
                raise
            except OSError as e:
                raise SyncExecutionError(f"{op} failed: {e}", operation=op) from e
        return self.stats

    def _apply(self, op: SyncOperation) -> None:
        if isinstance(op, Copy):
            self.copy_item(op.source, op.destination)
            self.stats["copies"] += 1
        elif isinstance(op, Remove):
            self.remove_item(op.path)
            self.stats["removes"] += 1
        elif isinstance(op, Keep):
            self.stats["keeps"] += 1
        else:
            raise TypeError(f"Unknown sync operation: {op!r}")

    def copy_item(self, source: Path, destination: Path) -> None:
        """Copy a file, or a directory with everything inside it.

        An existing destination file is overwritten. Symbolic links and
        special files inside a copied directory are skipped.

        Args:
            source: File or directory to copy
            destination: Path to create or overwrite

        Raises:
            DestinationTypeMismatchError: If destination is the wrong kind
                of entry and replace_mismatched is False
            OSError: If reading or writing fails
        """
        source = Path(source)
        destination = Path(destination)

        if source.is_symlink():
            logger.warning("Skipping symbolic link: %s", source)
            self.stats["skipped"] += 1
            return

        if source.is_file():
            if destination.is_symlink() or destination.is_dir():
                self._handle_mismatch(source, destination)
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
            self.stats["files_copied"] += 1
            self.stats["bytes_copied"] += destination.stat().st_size
            logger.debug("Copied %s -> %s", source, destination)
        elif source.is_dir():
            if destination.is_symlink() or (
                destination.exists() and not destination.is_dir()
            ):
                self._handle_mismatch(source, destination)
            destination.mkdir(parents=True, exist_ok=True)
            for child in sorted(source.iterdir()):
                if not child.is_symlink() and not (child.is_file() or child.is_dir()):
                    logger.warning("Skipping unsupported entry type: %s", child)
                    self.stats["skipped"] += 1
                    continue
                self.copy_item(child, destination / child.name)
        elif not source.exists():
            raise FileNotFoundError(f"Source does not exist: {source}")
        else:
            logger.warning("Skipping unsupported entry type: %s", source)
            self.stats["skipped"] += 1

    def _handle_mismatch(self, source: Path, destination: Path) -> None:
        """Deal with a destination that is not the same kind as the source."""
        if not self.replace_mismatched:
            expected = "directory" if source.is_dir() else "file"
            raise DestinationTypeMismatchError(
                f"Cannot copy {source} to {destination}: "
                f"destination exists and is not a {expected}"
            )
        logger.info("Replacing mismatched destination '%s'", destination)
        self.remove_item(destination)

    def remove_item(self, path: Path) -> None:
        """Remove a file, or a directory with everything inside it.

        A path that does not exist, or an entry that is neither file,
        directory nor symbolic link, is logged and left alone. Symbolic
        links are removed without touching what they point to.

        Args:
            path: Entry to remove

        Raises:
            OSError: If deleting a file or an emptied directory fails
        """
        path = Path(path)

        if path.is_symlink() or path.is_file():
            path.unlink()
            self.stats["files_removed"] += 1
            logger.debug("Removed %s", path)
        elif path.is_dir():
            if self._remove_tree(path):
                path.rmdir()
                self.stats["dirs_removed"] += 1
                logger.debug("Removed directory %s", path)
            else:
                logger.warning("Leaving non-empty directory: %s", path)
        elif not path.exists():
            logger.warning("Nothing to remove at %s", path)
        else:
            logger.warning("Cannot remove unsupported entry type: %s", path)
            self.stats["skipped"] += 1

    def _remove_tree(self, directory: Path) -> bool:
        """Remove everything inside a directory.

        Returns:
            True if the directory is now empty
        """
        emptied = True
        for child in directory.iterdir():
            if child.is_symlink() or child.is_file():
                child.unlink()
                self.stats["files_removed"] += 1
            elif child.is_dir():
                if self._remove_tree(child):
                    child.rmdir()
                    self.stats["dirs_removed"] += 1
                else:
                    emptied = False
            else:
                logger.warning("Cannot remove unsupported entry type: %s", child)
                self.stats["skipped"] += 1
                emptied = False
        return emptied


def execute_plan(
    operations: Iterable[SyncOperation],
    replace_mismatched: bool = False,
    executor: Optional[SyncExecutor] = None,
) -> dict:
    """Execute a sync plan.

    Args:
        operations: Planned sync operations
        replace_mismatched: See SyncExecutor
        executor: Executor to use instead of a new one

    Returns:
        Dictionary with execution statistics
    """
    executor = executor or SyncExecutor(replace_mismatched=replace_mismatched)
    return executor.execute(operations)
