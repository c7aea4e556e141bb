"""Exceptions raised by dirmirror."""

from typing import Any, Optional


class DirMirrorError(Exception):
    """Base exception for all dirmirror errors."""


class SnapshotError(DirMirrorError):
    """A directory could not be enumerated while building a snapshot."""

    def __init__(self, message: str, path: Optional[Any] = None):
        super().__init__(message)
        self.path = path


class SyncExecutionError(DirMirrorError):
    """A copy or remove operation failed while executing a sync plan.

    Execution stops at the first failure, so the target may be left
    partially synced.
    """

    def __init__(self, message: str, operation: Optional[Any] = None):
        super().__init__(message)
        self.operation = operation


class DestinationTypeMismatchError(SyncExecutionError):
    """Copy destination exists but is not the same kind of entry as the source."""


class DirMirrorConfigError(DirMirrorError):
    """Configuration file or value is invalid."""
