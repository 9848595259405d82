"""Content digests for files and byte strings."""

import hashlib
from pathlib import Path

from . import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from .errors import TreeReadError, UnsupportedAlgorithmError

SUPPORTED_ALGORITHMS: tuple[str, ...] = ("sha256", "sha512", "sha1", "blake2b", "md5")


def new_hasher(algorithm: str = DEFAULT_ALGORITHM) -> "hashlib._Hash":
    """Create a fresh hash object for a supported algorithm name."""
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm, SUPPORTED_ALGORITHMS)
    return hashlib.new(algorithm)


def compute_digest(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Compute the hex digest of a byte string."""
    h = new_hasher(algorithm)
    h.update(data)
    return h.hexdigest()


def hash_file(
    path: Path,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> tuple[str, int]:
    """Compute the hex digest of a file's complete contents.

    The file is read in chunks, so the digest equals
    ``compute_digest(path.read_bytes(), algorithm)`` without holding the
    whole file in memory.

    Returns:
        The hex digest and the number of bytes that were digested

    Raises:
        TreeReadError: If the file cannot be opened or read.
    """
    h = new_hasher(algorithm)
    size = 0
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                h.update(chunk)
                size += len(chunk)
    except OSError as e:
        raise TreeReadError(path, e) from e
    return h.hexdigest(), size


def compute_file_digest(
    path: Path,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Compute the hex digest of a file's complete contents."""
    digest, _ = hash_file(path, algorithm, chunk_size)
    return digest


def digest_length(algorithm: str) -> int:
    """Length of a hex digest produced by ``algorithm``."""
    return new_hasher(algorithm).digest_size * 2
