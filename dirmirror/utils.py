"""Utility functions for dirmirror."""

import fnmatch

# =============================================================================
# Constants
# =============================================================================

# Read size used when streaming files through the content hash (64 KB)
DEFAULT_HASH_CHUNK_SIZE: int = 64 * 1024


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"


# =============================================================================
# Pattern matching utilities
# =============================================================================


def glob_match(pattern: str, name: str) -> bool:
    """Match an entry name against a glob pattern.

    Matching is case-sensitive on every platform.

    Args:
        pattern: Glob pattern (e.g., "*.tmp", "cache*")
        name: Entry name to test

    Returns:
        True if the name matches the pattern

    Examples:
        >>> glob_match("*.txt", "notes.txt")
        True
        >>> glob_match("*.txt", "notes.md")
        False
    """
    return fnmatch.fnmatchcase(name, pattern)
