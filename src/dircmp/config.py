"""Configuration management for dircmp."""

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from . import CONFIG_ENV_VAR, DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from .errors import ConfigError, UnsupportedAlgorithmError
from .hashing import SUPPORTED_ALGORITHMS


class DircmpConfig(BaseModel):
    """Configuration for dircmp."""

    algorithm: str = DEFAULT_ALGORITHM
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("algorithm")
    @classmethod
    def check_algorithm(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"must be one of {', '.join(SUPPORTED_ALGORITHMS)}, got '{value}'"
            )
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value


def get_config_path(config_path: Path | None = None) -> Path | None:
    """Resolve the config file from an explicit path or the environment."""
    if config_path is not None:
        return Path(config_path)
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        return Path(env_path)
    return None


def load_config(config_path: Path | None = None) -> DircmpConfig:
    """Load configuration.

    Starts from defaults, then applies the JSON config file if one is given
    (or named by DIRCMP_CONFIG), then environment variable overrides.

    Raises:
        ConfigError: If the file cannot be read or a value is invalid.
    """
    path = get_config_path(config_path)
    data: dict = {}

    if path is not None:
        try:
            with open(path) as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e.strerror or e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config {path}: expected a JSON object")

    data = _apply_env_overrides(data)

    try:
        return DircmpConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(e)) from e


def resolve_algorithm(name: str) -> str:
    """Validate an algorithm name given on the command line."""
    normalized = name.lower()
    if normalized not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithmError(name, SUPPORTED_ALGORITHMS)
    return normalized


def _apply_env_overrides(data: dict) -> dict:
    """Apply environment variable overrides to config data."""
    data = dict(data)

    # DIRCMP_ALGORITHM
    if algorithm := os.environ.get("DIRCMP_ALGORITHM"):
        data["algorithm"] = algorithm

    # DIRCMP_CHUNK_SIZE
    if chunk_size := os.environ.get("DIRCMP_CHUNK_SIZE"):
        data["chunk_size"] = chunk_size

    # DIRCMP_LOG_LEVEL
    if log_level := os.environ.get("DIRCMP_LOG_LEVEL"):
        data["log_level"] = log_level

    return data


def _format_validation_error(error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()
    )
    return f"Invalid configuration: {problems}"
