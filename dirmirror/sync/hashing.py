"""Content hashing used to detect changed files."""

import hashlib
from pathlib import Path
from typing import Union

from ..utils import DEFAULT_HASH_CHUNK_SIZE


def hash_file(
    path: Union[str, Path], chunk_size: int = DEFAULT_HASH_CHUNK_SIZE
) -> str:
    """Calculate the SHA-256 digest of a file's contents.

    The file is streamed in chunks, so memory use does not depend on
    file size.

    Args:
        path: Path to the file
        chunk_size: Number of bytes read per iteration

    Returns:
        Hex-encoded SHA-256 digest

    Raises:
        OSError: If the file cannot be opened or read

    Examples:
        >>> hash_file(Path("empty.txt"))
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def files_identical(
    first: Union[str, Path],
    second: Union[str, Path],
    chunk_size: int = DEFAULT_HASH_CHUNK_SIZE,
) -> bool:
    """Check whether two files have byte-identical contents.

    Raises:
        OSError: If either file cannot be read
    """
    return hash_file(first, chunk_size) == hash_file(second, chunk_size)
