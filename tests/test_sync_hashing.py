"""Tests for content hashing."""

import hashlib

import pytest

from dirmirror.sync.hashing import files_identical, hash_file


class TestHashFile:
    """Tests for hash_file."""

    def test_empty_file(self, tmp_path):
        """Test the digest of an empty file."""
        test_file = tmp_path / "empty"
        test_file.write_bytes(b"")

        assert hash_file(test_file) == hashlib.sha256(b"").hexdigest()

    def test_small_chunks_give_same_digest(self, tmp_path):
        """Test that the chunk size does not change the digest."""
        data = bytes(range(256)) * 100
        test_file = tmp_path / "data.bin"
        test_file.write_bytes(data)

        expected = hashlib.sha256(data).hexdigest()
        assert hash_file(test_file) == expected
        assert hash_file(test_file, chunk_size=7) == expected

    def test_missing_file_raises(self, tmp_path):
        """Test that read failures propagate."""
        with pytest.raises(OSError):
            hash_file(tmp_path / "missing")


class TestFilesIdentical:
    """Tests for files_identical."""

    def test_same_content(self, tmp_path):
        """Test files with identical bytes."""
        (tmp_path / "a").write_text("hello")
        (tmp_path / "b").write_text("hello")

        assert files_identical(tmp_path / "a", tmp_path / "b") is True

    def test_same_size_different_content(self, tmp_path):
        """Test that equal sizes are not enough."""
        (tmp_path / "a").write_text("abc")
        (tmp_path / "b").write_text("abd")

        assert files_identical(tmp_path / "a", tmp_path / "b") is False
