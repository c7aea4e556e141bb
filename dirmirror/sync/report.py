"""Read-only rendering of diffs and sync plans."""

from typing import Any, Iterable

from rich.text import Text
from rich.tree import Tree

from .diff import DirectoryDiff
from .operations import Copy, SyncOperation

STATUS_STYLES = {
    "missing": "green",
    "new": "red",
    "changed": "yellow",
    "same": "dim",
}

STATUS_MARKERS = {
    "missing": "+",
    "new": "-",
    "changed": "~",
    "same": "=",
}

CATEGORIES = ("missing", "new", "changed", "same")


def _partition_dict(partition: Any) -> dict[str, list[str]]:
    return {category: sorted(getattr(partition, category)) for category in CATEGORIES}


def diff_to_dict(diff: DirectoryDiff) -> dict[str, Any]:
    """Convert a diff to a nested JSON-serializable dictionary.

    Args:
        diff: Diff to convert

    Returns:
        Dictionary with "files", "subdirs", "nested" and "unreadable" keys
    """
    return {
        "files": _partition_dict(diff.files),
        "subdirs": _partition_dict(diff.subdirs),
        "nested": {
            name: diff_to_dict(diff.nested[name]) for name in sorted(diff.nested)
        },
        "unreadable": sorted(diff.unreadable),
    }


def diff_to_rows(
    diff: DirectoryDiff, prefix: str = "", include_same: bool = False
) -> list[dict[str, str]]:
    """Flatten a diff into table rows.

    Args:
        diff: Diff to flatten
        prefix: Relative path of the diff's directory (with trailing slash)
        include_same: Whether to include unchanged entries

    Returns:
        Rows with "status", "type" and "path" keys, sorted by path
    """
    rows: list[dict[str, str]] = []
    for entry_type, partition in (("file", diff.files), ("dir", diff.subdirs)):
        for category in CATEGORIES:
            if category == "same" and not include_same:
                continue
            for name in getattr(partition, category):
                path = f"{prefix}{name}" + ("/" if entry_type == "dir" else "")
                rows.append({"status": category, "type": entry_type, "path": path})

    for name in diff.nested:
        rows.extend(diff_to_rows(diff.nested[name], f"{prefix}{name}/", include_same))

    return sorted(rows, key=lambda row: row["path"])


def summarize_diff(diff: DirectoryDiff) -> dict[str, int]:
    """Count entries per category across the whole diff.

    Changed directories are not counted themselves; their contents are.

    Returns:
        Dictionary with "missing", "new", "changed", "same" and
        "unreadable" counts
    """
    counts = {category: 0 for category in CATEGORIES}
    counts["unreadable"] = len(diff.unreadable)
    for partition in (diff.files, diff.subdirs):
        for category in ("missing", "new", "same"):
            counts[category] += len(getattr(partition, category))
    counts["changed"] += len(diff.files.changed)
    for nested in diff.nested.values():
        for key, value in summarize_diff(nested).items():
            counts[key] += value
    return counts


def build_diff_tree(
    diff: DirectoryDiff, label: str, include_same: bool = False
) -> Tree:
    """Build a rich tree view of a diff.

    Args:
        diff: Diff to render
        label: Label of the root node (usually the target path)
        include_same: Whether to show unchanged entries

    Returns:
        rich Tree
    """
    tree = Tree(Text(label, style="bold"))
    _add_level(tree, diff, include_same)
    return tree


def _add_level(node: Tree, diff: DirectoryDiff, include_same: bool) -> None:
    entries: list[tuple[str, str, bool]] = []
    for is_dir, partition in ((False, diff.files), (True, diff.subdirs)):
        for category in CATEGORIES:
            if category == "same" and not include_same:
                continue
            for name in getattr(partition, category):
                entries.append((name, category, is_dir))

    for name, category, is_dir in sorted(entries):
        display = f"{STATUS_MARKERS[category]} {name}{'/' if is_dir else ''}"
        if name in diff.unreadable and not is_dir:
            display += " (unreadable)"
        child = node.add(Text(display, style=STATUS_STYLES[category]))
        if is_dir and name in diff.nested:
            _add_level(child, diff.nested[name], include_same)


def operations_to_rows(operations: Iterable[SyncOperation]) -> list[dict[str, str]]:
    """Convert operations to table rows.

    Returns:
        Rows with "action", "path" and "source" keys
    """
    rows = []
    for op in operations:
        if isinstance(op, Copy):
            rows.append(
                {
                    "action": op.kind,
                    "path": str(op.destination),
                    "source": str(op.source),
                }
            )
        else:
            rows.append({"action": op.kind, "path": str(op.path), "source": ""})
    return rows
