"""Comparison of a live directory against a saved record."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loguru import logger

from . import DEFAULT_CHUNK_SIZE
from .hashing import compute_file_digest
from .record import Record
from .walker import walk_files


class ChangeKind(str, Enum):
    """How a path differs between the directory and the record."""

    ONLY_IN_DIRECTORY = "only_in_directory"
    ONLY_IN_RECORD = "only_in_record"
    DIFFERS = "differs"


@dataclass(frozen=True)
class Classification:
    """A single reported path. Unchanged paths are never reported."""

    kind: ChangeKind
    path: str


@dataclass
class ReconcileStats:
    """Statistics from one reconciliation."""

    files_seen: int = 0
    unchanged: int = 0


@dataclass
class Comparison:
    """Result of comparing a directory with a record."""

    only_in_directory: list[str] = field(default_factory=list)
    only_in_record: list[str] = field(default_factory=list)
    differs: list[str] = field(default_factory=list)
    classifications: list[Classification] = field(default_factory=list)
    stats: ReconcileStats = field(default_factory=ReconcileStats)

    @property
    def has_changes(self) -> bool:
        """Check if there are any changes."""
        return bool(self.only_in_directory or self.only_in_record or self.differs)

    @property
    def total_changes(self) -> int:
        """Total number of changed files."""
        return len(self.only_in_directory) + len(self.only_in_record) + len(self.differs)

    def add(self, classification: Classification) -> None:
        self.classifications.append(classification)
        if classification.kind is ChangeKind.ONLY_IN_DIRECTORY:
            self.only_in_directory.append(classification.path)
        elif classification.kind is ChangeKind.ONLY_IN_RECORD:
            self.only_in_record.append(classification.path)
        else:
            self.differs.append(classification.path)


def reconcile(
    live_root: Path,
    record: Record,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    stats: ReconcileStats | None = None,
) -> Iterator[Classification]:
    """
    Classify every path seen in ``live_root`` or in ``record``.

    Files in the directory are reported as they are walked. Record entries
    that were never seen are reported, sorted by path, only once the walk has
    finished, since they need the complete set of observed paths.

    Live files are digested with the record's own algorithm.

    Args:
        live_root: Directory to compare. A missing directory is treated as
            empty, so every record entry is reported as only in the record.
        record: Previously saved record
        chunk_size: Read size used when streaming file contents
        stats: Optional counters updated during the comparison

    Yields:
        Classification for each added, removed, or modified path

    Raises:
        TreeReadError: If any directory or file cannot be read
    """
    live_root = Path(live_root)
    if stats is None:
        stats = ReconcileStats()

    if not live_root.is_dir():
        logger.warning(
            "{} is not a directory; every recorded file will be reported missing",
            live_root,
        )

    hits: set[str] = set()
    for entry in walk_files(live_root):
        path = entry.relative_path
        hits.add(path)
        stats.files_seen += 1

        recorded = record.files.get(path)
        if recorded is None:
            yield Classification(ChangeKind.ONLY_IN_DIRECTORY, path)
            continue

        digest = compute_file_digest(entry.path, record.algorithm, chunk_size)
        if digest != recorded:
            yield Classification(ChangeKind.DIFFERS, path)
        else:
            stats.unchanged += 1

    for path in sorted(record.files.keys() - hits):
        yield Classification(ChangeKind.ONLY_IN_RECORD, path)

    logger.debug(
        "Compared {} against record: {} files seen, {} unchanged",
        live_root,
        stats.files_seen,
        stats.unchanged,
    )


def compare(
    live_root: Path,
    record: Record,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    on_change: Callable[[Classification], None] | None = None,
) -> Comparison:
    """
    Run a full reconciliation and collect the results.

    Args:
        live_root: Directory to compare
        record: Previously saved record
        chunk_size: Read size used when streaming file contents
        on_change: Called with each classification as soon as it is known

    Returns:
        Comparison holding every classification and the counters
    """
    comparison = Comparison()
    for classification in reconcile(live_root, record, chunk_size, comparison.stats):
        comparison.add(classification)
        if on_change is not None:
            on_change(classification)
    return comparison
