"""Directory snapshots for comparison and sync."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from ..exceptions import SnapshotError
from ..utils import glob_match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """Represents one regular file in a snapshot.

    Only the location is recorded. Contents are hashed on demand during
    comparison.
    """

    path: Path
    """Absolute path to the file"""

    @property
    def name(self) -> str:
        """File name."""
        return self.path.name


@dataclass(frozen=True)
class DirectorySnapshot:
    """Immutable record of a directory tree at the moment it was read."""

    path: Path
    """Absolute path to the directory"""

    files: dict[str, FileEntry] = field(default_factory=dict)
    """Regular files directly inside this directory, keyed by name"""

    subdirs: dict[str, "DirectorySnapshot"] = field(default_factory=dict)
    """Child directories, keyed by name"""

    @property
    def name(self) -> str:
        """Directory name."""
        return self.path.name

    def file_count(self) -> int:
        """Count files in this directory and all descendants."""
        return len(self.files) + sum(d.file_count() for d in self.subdirs.values())

    def dir_count(self) -> int:
        """Count descendant directories (excluding this one)."""
        return len(self.subdirs) + sum(d.dir_count() for d in self.subdirs.values())

    def is_empty(self) -> bool:
        """Check whether the directory has no files or subdirectories."""
        return not self.files and not self.subdirs


class SnapshotBuilder:
    """Walks a directory tree and builds a DirectorySnapshot.

    Directories and regular files are recorded. Symbolic links, special
    files and entries whose names cannot be decoded are skipped with a
    warning; they never abort the walk. A directory that cannot be listed
    does abort it.

    Examples:
        >>> builder = SnapshotBuilder()
        >>> snapshot = builder.build(Path("/data/photos"))
        >>> sorted(snapshot.files)
        ['a.jpg', 'b.jpg']

        >>> # Skip editor backups and hidden entries
        >>> builder = SnapshotBuilder(ignore_patterns=["*~"], exclude_dot_files=True)
    """

    def __init__(
        self,
        ignore_patterns: Optional[list[str]] = None,
        exclude_dot_files: bool = False,
    ):
        """Initialize snapshot builder.

        Args:
            ignore_patterns: Glob patterns matched against entry names
                (e.g., ["*.tmp", "__pycache__"])
            exclude_dot_files: Whether to skip entries starting with a dot
        """
        self.ignore_patterns = ignore_patterns or []
        self.exclude_dot_files = exclude_dot_files
        self.skipped: list[Path] = []

    def should_ignore(self, name: str) -> bool:
        """Check if an entry name is filtered out by the builder's rules.

        Args:
            name: Entry name (not a path)

        Returns:
            True if the entry should be left out of the snapshot
        """
        if self.exclude_dot_files and name.startswith("."):
            return True
        return any(glob_match(pattern, name) for pattern in self.ignore_patterns)

    def build(self, path: Union[str, Path]) -> DirectorySnapshot:
        """Build a snapshot of a directory tree.

        Args:
            path: Root directory to walk

        Returns:
            DirectorySnapshot for the root directory

        Raises:
            SnapshotError: If the root is not a directory or any directory
                in the tree cannot be listed
        """
        root = Path(path).absolute()
        if not root.is_dir():
            raise SnapshotError(f"Not a directory: {root}", path=root)

        self.skipped = []
        snapshot = self._walk(root)
        logger.debug(
            "Snapshot of %s: %d file(s), %d dir(s), %d skipped",
            root,
            snapshot.file_count(),
            snapshot.dir_count(),
            len(self.skipped),
        )
        return snapshot

    def _walk(self, directory: Path) -> DirectorySnapshot:
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            raise SnapshotError(
                f"Cannot list directory {directory}: {e}", path=directory
            ) from e

        files: dict[str, FileEntry] = {}
        subdirs: dict[str, DirectorySnapshot] = {}

        for entry in entries:
            name = entry.name
            if not _is_decodable(name):
                logger.warning("Skipping entry with undecodable name in %s", directory)
                self.skipped.append(entry)
                continue

            if self.should_ignore(name):
                logger.debug(f"Ignoring: {entry}")
                continue

            # Checked first: is_dir()/is_file() follow links
            if entry.is_symlink():
                logger.warning("Skipping symbolic link: %s", entry)
                self.skipped.append(entry)
                continue

            if entry.is_dir():
                subdirs[name] = self._walk(entry)
            elif entry.is_file():
                files[name] = FileEntry(path=entry)
            else:
                logger.warning("Skipping unsupported entry type: %s", entry)
                self.skipped.append(entry)

        return DirectorySnapshot(path=directory, files=files, subdirs=subdirs)


def _is_decodable(name: str) -> bool:
    """Check that a name decoded from the filesystem is valid text.

    Undecodable bytes surface as lone surrogates, which cannot be
    encoded as UTF-8.
    """
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def build_snapshot(
    path: Union[str, Path],
    ignore_patterns: Optional[list[str]] = None,
    exclude_dot_files: bool = False,
) -> DirectorySnapshot:
    """Build a snapshot of a directory tree with a one-off builder.

    Args:
        path: Root directory to walk
        ignore_patterns: Glob patterns matched against entry names
        exclude_dot_files: Whether to skip entries starting with a dot

    Returns:
        DirectorySnapshot for the root directory
    """
    builder = SnapshotBuilder(
        ignore_patterns=ignore_patterns, exclude_dot_files=exclude_dot_files
    )
    return builder.build(path)
