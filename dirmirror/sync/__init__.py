"""Snapshot, comparison, planning and execution of directory syncs."""

from .diff import DirectoryDiff, Partition, TreeComparator, compare_snapshots
from .engine import MirrorEngine
from .executor import SyncExecutor, execute_plan
from .hashing import files_identical, hash_file
from .operations import Copy, Keep, Remove, SyncOperation, count_operations
from .organize import generate_organize_operations
from .planner import SyncPlanner, plan_sync
from .snapshot import DirectorySnapshot, FileEntry, SnapshotBuilder, build_snapshot
from .strategy import SyncStrategy

__all__ = [
    "MirrorEngine",
    "SyncStrategy",
    "SnapshotBuilder",
    "DirectorySnapshot",
    "FileEntry",
    "build_snapshot",
    "TreeComparator",
    "DirectoryDiff",
    "Partition",
    "compare_snapshots",
    "hash_file",
    "files_identical",
    "SyncPlanner",
    "plan_sync",
    "SyncExecutor",
    "execute_plan",
    "SyncOperation",
    "Copy",
    "Remove",
    "Keep",
    "count_operations",
    "generate_organize_operations",
]
