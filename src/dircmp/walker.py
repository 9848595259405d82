"""Directory traversal yielding regular files relative to a root."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .errors import PathInvariantError, TreeReadError


@dataclass(frozen=True)
class WalkEntry:
    """A regular file found under a traversal root."""

    relative_path: str  # POSIX-style, relative to the root
    path: Path  # Full path, used to read the file contents


@dataclass
class WalkStats:
    """Counters collected while walking a tree."""

    files: int = 0
    directories: int = 0
    skipped: int = 0


def relative_key(path: Path, root: Path) -> str:
    """Express ``path`` relative to ``root`` as a POSIX string key."""
    try:
        relative = path.relative_to(root)
    except ValueError as e:
        raise PathInvariantError(path, root) from e
    key = relative.as_posix()
    if key in ("", ".") or ".." in relative.parts:
        raise PathInvariantError(path, root)
    return key


def _identity(path: Path) -> tuple[int, int]:
    """Device and inode of a directory, following symlinks."""
    try:
        st = path.stat()
    except OSError as e:
        raise TreeReadError(path, e) from e
    return (st.st_dev, st.st_ino)


def walk_files(root: Path, stats: WalkStats | None = None) -> Iterator[WalkEntry]:
    """
    Walk ``root`` and yield every regular file beneath it.

    Directories are visited from an explicit stack rather than by recursion,
    so deep trees cannot exhaust the call stack. Entries inside a directory
    are visited in sorted name order. A directory reachable under several
    names is walked under each of them; only a directory that is one of its
    own ancestors (a symlink cycle) is skipped.

    Args:
        root: Directory to walk. A missing root, or one that is not a
            directory, yields nothing.
        stats: Optional counters updated during the walk

    Yields:
        WalkEntry for each regular file

    Raises:
        TreeReadError: If a directory cannot be listed
    """
    root = Path(root)
    if stats is None:
        stats = WalkStats()

    if not root.is_dir():
        logger.debug("Walk root {} is not a directory, nothing to walk", root)
        return

    # Each directory carries the identities of itself and its ancestors
    stack: list[tuple[Path, frozenset[tuple[int, int]]]] = [
        (root, frozenset([_identity(root)]))
    ]

    while stack:
        directory, ancestors = stack.pop()

        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            raise TreeReadError(directory, e) from e
        stats.directories += 1

        subdirectories: list[tuple[Path, frozenset[tuple[int, int]]]] = []
        for child in children:
            if child.is_dir():
                identity = _identity(child)
                if identity in ancestors:
                    stats.skipped += 1
                    logger.debug("Skipping directory cycle at {}", child)
                    continue
                subdirectories.append((child, ancestors | {identity}))
            elif child.is_file():
                stats.files += 1
                yield WalkEntry(relative_path=relative_key(child, root), path=child)
            else:
                stats.skipped += 1
                logger.debug("Skipping non-regular entry {}", child)

        # Reversed so subdirectories are popped in sorted order
        stack.extend(reversed(subdirectories))


__all__ = [
    "WalkEntry",
    "WalkStats",
    "relative_key",
    "walk_files",
]
