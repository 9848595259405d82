"""Snapshot of a directory tree as a path -> digest mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from . import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from .hashing import hash_file, new_hasher
from .record import Record, create_record
from .walker import WalkStats, walk_files


@dataclass
class BuildStats:
    """Statistics from building a snapshot."""

    files_hashed: int = 0
    bytes_hashed: int = 0
    directories_processed: int = 0
    entries_skipped: int = 0


@dataclass
class Snapshot:
    """Content digests of every regular file under a root."""

    files: dict[str, str] = field(default_factory=dict)
    algorithm: str = DEFAULT_ALGORITHM
    build_stats: BuildStats | None = None

    @classmethod
    def build(
        cls,
        root: Path,
        algorithm: str = DEFAULT_ALGORITHM,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Snapshot:
        """
        Walk a directory and digest every regular file in it.

        Args:
            root: Directory to snapshot
            algorithm: Digest algorithm name
            chunk_size: Read size used when streaming file contents

        Returns:
            A Snapshot keyed by POSIX paths relative to ``root``

        Raises:
            TreeReadError: If any directory or file cannot be read
            UnsupportedAlgorithmError: If ``algorithm`` is unknown
        """
        # Fail on a bad algorithm before touching the filesystem
        new_hasher(algorithm)

        root = Path(root)
        walk_stats = WalkStats()
        stats = BuildStats()
        files: dict[str, str] = {}

        for entry in walk_files(root, walk_stats):
            digest, size = hash_file(entry.path, algorithm, chunk_size)
            files[entry.relative_path] = digest
            stats.files_hashed += 1
            stats.bytes_hashed += size

        stats.directories_processed = walk_stats.directories
        stats.entries_skipped = walk_stats.skipped

        logger.debug(
            "Snapshot of {}: {} files, {} bytes, {} directories, {} skipped",
            root,
            stats.files_hashed,
            stats.bytes_hashed,
            stats.directories_processed,
            stats.entries_skipped,
        )
        return cls(files=files, algorithm=algorithm, build_stats=stats)

    def sorted_items(self) -> list[tuple[str, str]]:
        """Entries sorted by path."""
        return sorted(self.files.items())

    def to_record(self) -> Record:
        """Create a persistable record from this snapshot."""
        return create_record(self.files, self.algorithm)

    def __len__(self) -> int:
        return len(self.files)
