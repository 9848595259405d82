"""Shared test fixtures for dircmp."""

from pathlib import Path

import pytest
from click.testing import CliRunner
from loguru import logger


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks the CLI installs so they never outlive the test's streams."""
    yield
    logger.remove()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from DIRCMP_* variables in the calling environment."""
    for name in ("DIRCMP_CONFIG", "DIRCMP_ALGORITHM", "DIRCMP_CHUNK_SIZE", "DIRCMP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def log_messages():
    """Collect loguru messages at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


def make_tree(root: Path, files: dict[str, bytes]) -> Path:
    """Create files under root from a relative path -> content mapping.

    Args:
        root: Directory to populate (created if missing)
        files: POSIX relative paths mapped to file contents

    Returns:
        The root directory
    """
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    return root


@pytest.fixture
def tree_factory():
    """Factory building directory trees from a path -> content mapping."""
    return make_tree


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    A small directory tree.

    Structure:
        tree/
        ├── a.txt        ("x")
        └── sub/
            └── b.txt    ("y")
    """
    return make_tree(tmp_path / "tree", {"a.txt": b"x", "sub/b.txt": b"y"})
