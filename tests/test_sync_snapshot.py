"""Tests for snapshot building."""

import logging
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from dirmirror.exceptions import SnapshotError
from dirmirror.sync.snapshot import (
    DirectorySnapshot,
    FileEntry,
    SnapshotBuilder,
    build_snapshot,
)


class TestSnapshotBuilder:
    """Tests for SnapshotBuilder."""

    def test_build_records_files_and_subdirs(self, make_tree):
        """Test that files and directories are recorded under their names."""
        root = make_tree(
            "root", {"a.txt": "A", "b.txt": "B", "docs": {"c.txt": "C"}}
        )

        snapshot = SnapshotBuilder().build(root)

        assert snapshot.path == root.absolute()
        assert set(snapshot.files) == {"a.txt", "b.txt"}
        assert set(snapshot.subdirs) == {"docs"}
        assert snapshot.files["a.txt"] == FileEntry(path=root.absolute() / "a.txt")
        assert set(snapshot.subdirs["docs"].files) == {"c.txt"}

    def test_build_recurses_into_nested_directories(self, make_tree):
        """Test that nested directories are walked depth-first."""
        root = make_tree("root", {"a": {"b": {"c": {"deep.txt": "x"}}}})

        snapshot = SnapshotBuilder().build(root)

        deep = snapshot.subdirs["a"].subdirs["b"].subdirs["c"]
        assert set(deep.files) == {"deep.txt"}
        assert deep.path == root.absolute() / "a" / "b" / "c"
        assert deep.files["deep.txt"].path.is_absolute()

    def test_build_empty_directory(self, make_tree):
        """Test snapshot of an empty directory."""
        root = make_tree("empty", {})

        snapshot = SnapshotBuilder().build(root)

        assert snapshot.is_empty()
        assert snapshot.file_count() == 0
        assert snapshot.dir_count() == 0

    def test_counts(self, make_tree):
        """Test recursive file and directory counts."""
        root = make_tree(
            "root",
            {"f1": "1", "a": {"f2": "2", "b": {"f3": "3"}}, "c": {}},
        )

        snapshot = build_snapshot(root)

        assert snapshot.file_count() == 3
        assert snapshot.dir_count() == 3
        assert not snapshot.is_empty()

    def test_root_not_a_directory(self, tmp_path):
        """Test that building from a file fails."""
        test_file = tmp_path / "file.txt"
        test_file.write_text("x")

        with pytest.raises(SnapshotError, match="Not a directory"):
            SnapshotBuilder().build(test_file)

    def test_root_does_not_exist(self, tmp_path):
        """Test that building from a missing path fails."""
        with pytest.raises(SnapshotError):
            SnapshotBuilder().build(tmp_path / "missing")

    def test_unlistable_directory_aborts_walk(self, make_tree):
        """Test that a directory that cannot be listed raises SnapshotError."""
        root = make_tree("root", {"ok": {"f": "1"}, "locked": {"g": "2"}})
        real_iterdir = Path.iterdir

        def fake_iterdir(self):
            if self.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        with patch.object(Path, "iterdir", autospec=True, side_effect=fake_iterdir):
            with pytest.raises(SnapshotError, match="locked") as exc_info:
                SnapshotBuilder().build(root)

        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert exc_info.value.path == root.absolute() / "locked"

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_are_skipped_with_warning(self, make_tree, caplog):
        """Test that symbolic links to files and directories are skipped."""
        root = make_tree("root", {"real.txt": "x", "dir": {"f": "y"}})
        try:
            os.symlink(root / "real.txt", root / "link.txt")
            os.symlink(root / "dir", root / "dirlink", target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks")

        builder = SnapshotBuilder()
        with caplog.at_level(logging.WARNING, logger="dirmirror"):
            snapshot = builder.build(root)

        assert set(snapshot.files) == {"real.txt"}
        assert set(snapshot.subdirs) == {"dir"}
        assert len(builder.skipped) == 2
        assert "symbolic link" in caplog.text

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="fifos unsupported")
    def test_special_files_are_skipped_with_warning(self, make_tree, caplog):
        """Test that a named pipe is skipped rather than read."""
        root = make_tree("root", {"regular": "x"})
        os.mkfifo(root / "pipe")

        with caplog.at_level(logging.WARNING, logger="dirmirror"):
            snapshot = SnapshotBuilder().build(root)

        assert set(snapshot.files) == {"regular"}
        assert "unsupported entry type" in caplog.text

    @pytest.mark.skipif(
        not sys.platform.startswith("linux"), reason="needs byte file names"
    )
    def test_undecodable_names_are_skipped_with_warning(self, make_tree, caplog):
        """Test that names that are not valid text are skipped."""
        root = make_tree("root", {"good.txt": "x"})
        try:
            fd = os.open(os.fsencode(root) + b"/bad\xff", os.O_CREAT | os.O_WRONLY)
            os.close(fd)
        except OSError:
            pytest.skip("filesystem rejects undecodable names")

        with caplog.at_level(logging.WARNING, logger="dirmirror"):
            snapshot = SnapshotBuilder().build(root)

        assert set(snapshot.files) == {"good.txt"}
        assert "undecodable name" in caplog.text

    def test_ignore_patterns(self, make_tree):
        """Test that entries matching ignore patterns are left out."""
        root = make_tree(
            "root",
            {"keep.txt": "1", "skip.tmp": "2", "cache": {"x": "3"}, "src": {}},
        )

        snapshot = SnapshotBuilder(ignore_patterns=["*.tmp", "cache"]).build(root)

        assert set(snapshot.files) == {"keep.txt"}
        assert set(snapshot.subdirs) == {"src"}

    def test_exclude_dot_files(self, make_tree):
        """Test that dot files and directories can be excluded."""
        root = make_tree(
            "root", {".hidden": "1", "visible": "2", ".git": {"HEAD": "ref"}}
        )

        default = SnapshotBuilder().build(root)
        filtered = SnapshotBuilder(exclude_dot_files=True).build(root)

        assert set(default.files) == {".hidden", "visible"}
        assert set(default.subdirs) == {".git"}
        assert set(filtered.files) == {"visible"}
        assert filtered.subdirs == {}

    def test_should_ignore(self):
        """Test name filtering rules directly."""
        builder = SnapshotBuilder(ignore_patterns=["*.log"], exclude_dot_files=True)

        assert builder.should_ignore("debug.log") is True
        assert builder.should_ignore(".env") is True
        assert builder.should_ignore("main.py") is False


class TestDirectorySnapshot:
    """Tests for the snapshot data classes."""

    def test_snapshot_is_frozen(self, tmp_path):
        """Test that snapshot attributes cannot be reassigned."""
        snapshot = DirectorySnapshot(path=tmp_path)

        with pytest.raises(AttributeError):
            snapshot.path = Path("/elsewhere")  # type: ignore[misc]

    def test_names(self):
        """Test name properties."""
        entry = FileEntry(path=Path("/data/report.pdf"))
        snapshot = DirectorySnapshot(path=Path("/data"))

        assert entry.name == "report.pdf"
        assert snapshot.name == "data"
