"""Reorganizing a directory by naming convention."""

import logging

from .operations import SyncOperation
from .snapshot import DirectorySnapshot

logger = logging.getLogger(__name__)


def generate_organize_operations(snapshot: DirectorySnapshot) -> list[SyncOperation]:
    """Plan the operations that would reorganize a directory.

    No naming convention is defined yet, so the plan is always empty.

    Args:
        snapshot: Snapshot of the directory to organize

    Returns:
        Ordered list of operations (currently empty)
    """
    logger.debug("No organize rules defined for %s", snapshot.path)
    return []
