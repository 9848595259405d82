"""Record file management for dircmp."""

import json
import os
import re
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from . import RECORD_FORMAT_VERSION, RECORD_SUFFIX
from .errors import (
    InvalidRecordPathError,
    RecordDecodeError,
    RecordReadError,
    RecordWriteError,
)
from .hashing import SUPPORTED_ALGORITHMS, digest_length

HEX_DIGEST = re.compile(r"[0-9a-f]+")


class Record(BaseModel):
    """Persisted mapping of relative paths to content digests."""

    version: int
    algorithm: str
    files: dict[str, str]
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("version")
    @classmethod
    def check_version(cls, value: int) -> int:
        if value != RECORD_FORMAT_VERSION:
            raise ValueError(
                f"unsupported record version {value} (expected {RECORD_FORMAT_VERSION})"
            )
        return value

    @field_validator("algorithm")
    @classmethod
    def check_algorithm(cls, value: str) -> str:
        if value not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"unknown digest algorithm '{value}'")
        return value

    @model_validator(mode="after")
    def check_digests(self) -> "Record":
        expected = digest_length(self.algorithm)
        for path, digest in self.files.items():
            if len(digest) != expected or not HEX_DIGEST.fullmatch(digest):
                raise ValueError(
                    f"'{path}' has digest '{digest}', expected {expected} hex "
                    f"characters for {self.algorithm}"
                )
        return self

    def sorted_items(self) -> list[tuple[str, str]]:
        """Entries sorted by path, for display."""
        return sorted(self.files.items())

    def __len__(self) -> int:
        return len(self.files)


def create_record(files: dict[str, str], algorithm: str) -> Record:
    """Create a new record of the current format version."""
    return Record(
        version=RECORD_FORMAT_VERSION,
        algorithm=algorithm,
        files=dict(files),
        created_at=datetime.now(UTC),
    )


def record_path_for(path: Path) -> Path:
    """Normalize a record location to the fixed record suffix.

    Whatever extension was supplied is replaced, so ``snap``, ``snap.bin``
    and ``snap.json`` all resolve to ``snap.json``.

    Raises:
        InvalidRecordPathError: If the location has no file name, such as
            ``.`` or ``/``.
    """
    path = Path(path)
    if path.name in ("", ".", ".."):
        raise InvalidRecordPathError(path)
    try:
        return path.with_suffix(RECORD_SUFFIX)
    except ValueError as e:
        raise InvalidRecordPathError(path) from e


def save_record(record: Record, path: Path) -> Path:
    """Write a record to disk and return the path it was written to.

    The JSON is written to a temporary sibling first and then moved over the
    target, so an interrupted write never leaves a truncated record behind.

    Raises:
        RecordWriteError: If the file cannot be written.
    """
    record_path = record_path_for(path)
    tmp_path = record_path.with_name(record_path.name + ".tmp")

    data = record.model_dump(mode="json")
    try:
        record_path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp_path, record_path)
    except OSError as e:
        raise RecordWriteError(record_path, e) from e

    logger.debug("Saved record with {} entries to {}", len(record), record_path)
    return record_path


def load_record(path: Path) -> Record:
    """Load and validate a record file.

    Raises:
        RecordReadError: If the file is missing or unreadable.
        RecordDecodeError: If the contents are not a valid record.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise RecordReadError(path, e) from e

    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecordDecodeError(path, f"not valid JSON ({e})") from e

    if not isinstance(data, dict):
        raise RecordDecodeError(path, "expected a JSON object at the top level")

    try:
        record = Record.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        )
        raise RecordDecodeError(path, problems) from e

    logger.debug("Loaded record with {} entries from {}", len(record), path)
    return record
