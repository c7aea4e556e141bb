"""Tests for diff and plan reporting."""

import io
from pathlib import Path

from rich.console import Console

from dirmirror.sync.diff import DirectoryDiff, Partition
from dirmirror.sync.operations import Copy, Keep, Remove
from dirmirror.sync.report import (
    build_diff_tree,
    diff_to_dict,
    diff_to_rows,
    operations_to_rows,
    summarize_diff,
)


def sample_diff() -> DirectoryDiff:
    """Diff with a changed subdirectory holding missing, new and same files."""
    inner = DirectoryDiff(
        files=Partition(missing={"f2"}, new={"f3"}, same={"f1"}),
        subdirs=Partition(missing={"photos"}),
    )
    return DirectoryDiff(
        files=Partition(changed={"notes.txt"}, same={"readme"}),
        subdirs=Partition(changed={"a"}, new={"old"}),
        nested={"a": inner},
        unreadable={"notes.txt"},
    )


class TestDiffReport:
    """Tests for diff renderers."""

    def test_diff_to_dict(self):
        """Test the nested dictionary form."""
        data = diff_to_dict(sample_diff())

        assert data["files"]["changed"] == ["notes.txt"]
        assert data["subdirs"]["new"] == ["old"]
        assert data["unreadable"] == ["notes.txt"]
        inner = data["nested"]["a"]
        assert inner["files"] == {
            "missing": ["f2"],
            "new": ["f3"],
            "changed": [],
            "same": ["f1"],
        }
        assert inner["nested"] == {}

    def test_diff_to_rows(self):
        """Test flattening to relative paths."""
        rows = diff_to_rows(sample_diff())

        assert {"status": "missing", "type": "file", "path": "a/f2"} in rows
        assert {"status": "missing", "type": "dir", "path": "a/photos/"} in rows
        assert {"status": "new", "type": "dir", "path": "old/"} in rows
        assert {"status": "changed", "type": "file", "path": "notes.txt"} in rows
        assert not any(row["status"] == "same" for row in rows)
        assert [row["path"] for row in rows] == sorted(row["path"] for row in rows)

    def test_diff_to_rows_include_same(self):
        """Test that unchanged entries can be included."""
        rows = diff_to_rows(sample_diff(), include_same=True)

        assert {"status": "same", "type": "file", "path": "a/f1"} in rows

    def test_summarize_diff(self):
        """Test recursive category counts."""
        summary = summarize_diff(sample_diff())

        assert summary == {
            "missing": 2,
            "new": 2,
            "changed": 1,
            "same": 2,
            "unreadable": 1,
        }

    def test_build_diff_tree(self):
        """Test the tree view."""
        buffer = io.StringIO()
        console = Console(file=buffer, width=120)

        console.print(build_diff_tree(sample_diff(), "target"))

        text = buffer.getvalue()
        assert "target" in text
        assert "~ a/" in text
        assert "+ f2" in text
        assert "- old/" in text
        assert "notes.txt (unreadable)" in text
        assert "readme" not in text


class TestOperationsReport:
    """Tests for plan renderers."""

    def test_operations_to_rows(self):
        """Test table rows for a plan."""
        rows = operations_to_rows(
            [
                Copy(Path("/b/f"), Path("/t/f")),
                Remove(Path("/t/x")),
                Keep(Path("/t/y")),
            ]
        )

        assert rows == [
            {"action": "copy", "path": "/t/f", "source": "/b/f"},
            {"action": "remove", "path": "/t/x", "source": ""},
            {"action": "keep", "path": "/t/y", "source": ""},
        ]
