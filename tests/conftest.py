"""Shared fixtures for building directory trees on disk."""

from pathlib import Path
from typing import Union

import pytest


def write_tree(root: Path, layout: dict) -> Path:
    """Create files and directories described by a nested dict.

    String or bytes values become files, dict values become directories.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, content in layout.items():
        path = root / name
        if isinstance(content, dict):
            write_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    return root


def read_tree(root: Path) -> dict:
    """Read a directory back into the nested dict format of write_tree."""
    layout: dict[str, Union[str, dict]] = {}
    for path in sorted(root.iterdir()):
        if path.is_dir():
            layout[path.name] = read_tree(path)
        else:
            layout[path.name] = path.read_text()
    return layout


@pytest.fixture
def make_tree(tmp_path):
    """Return a function that builds a named tree under tmp_path."""

    def _make(name: str, layout: dict) -> Path:
        return write_tree(tmp_path / name, layout)

    return _make


@pytest.fixture
def snapshot_tree():
    """Return a function that reads a tree back as a nested dict."""
    return read_tree
