"""dirmirror - compare and mirror directory trees."""

from .exceptions import (
    DestinationTypeMismatchError,
    DirMirrorConfigError,
    DirMirrorError,
    SnapshotError,
    SyncExecutionError,
)
from .sync import (
    DirectoryDiff,
    DirectorySnapshot,
    MirrorEngine,
    SyncStrategy,
    build_snapshot,
    compare_snapshots,
    execute_plan,
    plan_sync,
)

__all__ = [
    "MirrorEngine",
    "SyncStrategy",
    "DirectoryDiff",
    "DirectorySnapshot",
    "build_snapshot",
    "compare_snapshots",
    "plan_sync",
    "execute_plan",
    "DirMirrorError",
    "DirMirrorConfigError",
    "SnapshotError",
    "SyncExecutionError",
    "DestinationTypeMismatchError",
]
