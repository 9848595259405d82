"""Integration tests for directory traversal."""

import os
from pathlib import Path

import pytest

from dircmp.errors import PathInvariantError, TreeReadError
from dircmp.walker import WalkStats, relative_key, walk_files


class TestWalkFiles:
    """Tests for walk_files."""

    def test_yields_every_regular_file(self, sample_tree: Path):
        """Files at every depth are yielded relative to the root."""
        paths = {entry.relative_path for entry in walk_files(sample_tree)}
        assert paths == {"a.txt", "sub/b.txt"}

    def test_directories_are_not_yielded(self, tmp_path: Path, tree_factory):
        root = tree_factory(tmp_path / "root", {"x/y/z/deep.txt": b"deep"})
        (root / "empty").mkdir()

        paths = [entry.relative_path for entry in walk_files(root)]
        assert paths == ["x/y/z/deep.txt"]

    def test_entries_point_at_their_files(self, sample_tree: Path):
        contents = {e.relative_path: e.path.read_bytes() for e in walk_files(sample_tree)}
        assert contents == {"a.txt": b"x", "sub/b.txt": b"y"}

    def test_missing_root_yields_nothing(self, tmp_path: Path):
        assert list(walk_files(tmp_path / "missing")) == []

    def test_file_root_yields_nothing(self, tmp_path: Path):
        """A root that is a file is treated as an empty tree."""
        file_root = tmp_path / "file.txt"
        file_root.write_text("not a directory")
        assert list(walk_files(file_root)) == []

    def test_deep_tree_does_not_recurse(self, tmp_path: Path):
        """Nesting deeper than the recursion limit is walked without error."""
        deep = tmp_path / "deep"
        current = deep
        for _ in range(200):
            current = current / "d"
        current.mkdir(parents=True)
        (current / "leaf.txt").write_text("leaf")

        entries = list(walk_files(deep))
        assert len(entries) == 1
        assert entries[0].relative_path.endswith("/d/leaf.txt")
        assert entries[0].relative_path.count("/") == 200

    def test_stats_are_counted(self, sample_tree: Path):
        os.mkfifo(sample_tree / "pipe")
        stats = WalkStats()

        list(walk_files(sample_tree, stats))

        assert stats.files == 2
        assert stats.directories == 2
        assert stats.skipped == 1

    def test_symlink_cycle_terminates(self, sample_tree: Path):
        """A symlink back to an ancestor is not descended twice."""
        (sample_tree / "sub" / "loop").symlink_to(sample_tree, target_is_directory=True)

        paths = {entry.relative_path for entry in walk_files(sample_tree)}
        assert paths == {"a.txt", "sub/b.txt"}

    def test_directory_alias_is_walked_under_both_names(self, tmp_path: Path, tree_factory):
        """A sibling symlink to a directory does not hide the real directory."""
        root = tree_factory(tmp_path / "root", {"real/f.txt": b"f"})
        (root / "alias").symlink_to(root / "real", target_is_directory=True)

        paths = {entry.relative_path for entry in walk_files(root)}

        assert paths == {"alias/f.txt", "real/f.txt"}

    def test_cycle_below_an_alias_terminates(self, tmp_path: Path, tree_factory):
        root = tree_factory(tmp_path / "root", {"real/f.txt": b"f"})
        (root / "real" / "back").symlink_to(root / "real", target_is_directory=True)
        (root / "alias").symlink_to(root / "real", target_is_directory=True)
        stats = WalkStats()

        paths = {entry.relative_path for entry in walk_files(root, stats)}

        assert paths == {"alias/f.txt", "real/f.txt"}
        assert stats.skipped == 2

    def test_listing_failure_raises(self, sample_tree: Path, monkeypatch):
        """An unreadable directory aborts the walk, naming the directory."""
        original = Path.iterdir

        def failing_iterdir(self):
            if self.name == "sub":
                raise PermissionError(13, "Permission denied", str(self))
            return original(self)

        monkeypatch.setattr(Path, "iterdir", failing_iterdir)

        with pytest.raises(TreeReadError) as exc_info:
            list(walk_files(sample_tree))

        assert exc_info.value.path == sample_tree / "sub"
        assert "Permission denied" in str(exc_info.value)


class TestRelativeKey:
    """Tests for relative_key."""

    def test_posix_key(self, tmp_path: Path):
        assert relative_key(tmp_path / "a" / "b.txt", tmp_path) == "a/b.txt"

    def test_path_outside_root(self, tmp_path: Path):
        with pytest.raises(PathInvariantError):
            relative_key(tmp_path.parent / "elsewhere.txt", tmp_path)

    def test_root_itself_is_not_a_key(self, tmp_path: Path):
        with pytest.raises(PathInvariantError):
            relative_key(tmp_path, tmp_path)
