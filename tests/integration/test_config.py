"""Integration tests for configuration loading."""

import json
from pathlib import Path

import pytest

from dircmp.config import DircmpConfig, load_config, resolve_algorithm
from dircmp.errors import ConfigError, UnsupportedAlgorithmError


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        config = load_config()
        assert config == DircmpConfig()
        assert config.algorithm == "sha256"
        assert config.chunk_size == 8192
        assert config.log_level == "INFO"

    def test_config_file(self, tmp_path: Path):
        path = tmp_path / "dircmp.json"
        path.write_text(json.dumps({"algorithm": "sha512", "chunk_size": 4096}))

        config = load_config(path)

        assert config.algorithm == "sha512"
        assert config.chunk_size == 4096

    def test_config_file_from_env(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "dircmp.json"
        path.write_text(json.dumps({"log_level": "debug"}))
        monkeypatch.setenv("DIRCMP_CONFIG", str(path))

        assert load_config().log_level == "DEBUG"

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "dircmp.json"
        path.write_text(json.dumps({"algorithm": "sha512", "chunk_size": 4096}))
        monkeypatch.setenv("DIRCMP_ALGORITHM", "BLAKE2B")
        monkeypatch.setenv("DIRCMP_CHUNK_SIZE", "65536")

        config = load_config(path)

        assert config.algorithm == "blake2b"
        assert config.chunk_size == 65536

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="missing.json"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "dircmp.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)

    def test_invalid_algorithm(self, monkeypatch):
        monkeypatch.setenv("DIRCMP_ALGORITHM", "crc32")
        with pytest.raises(ConfigError, match="algorithm"):
            load_config()

    def test_invalid_chunk_size(self, monkeypatch):
        monkeypatch.setenv("DIRCMP_CHUNK_SIZE", "0")
        with pytest.raises(ConfigError, match="chunk_size"):
            load_config()


class TestResolveAlgorithm:
    """Tests for resolve_algorithm."""

    def test_normalizes_case(self):
        assert resolve_algorithm("SHA1") == "sha1"

    def test_unknown(self):
        with pytest.raises(UnsupportedAlgorithmError, match="sha256"):
            resolve_algorithm("whirlpool")
