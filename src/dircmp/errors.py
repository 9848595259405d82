"""Custom exceptions for dircmp.

Every failure that should stop a command derives from DircmpError, so the
CLI can report it with the offending path instead of a traceback.
"""

from pathlib import Path


class DircmpError(RuntimeError):
    """Base class for all dircmp errors."""
    pass


# Tree Errors
class TreeReadError(DircmpError):
    """A directory could not be listed or a file could not be read."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Cannot read {path}: {reason}")


class PathInvariantError(DircmpError):
    """A walked file is not located under its traversal root."""

    def __init__(self, path: Path, root: Path):
        self.path = path
        self.root = root
        super().__init__(f"{path} is not inside the traversal root {root}")


# Record Errors
class RecordError(DircmpError):
    """Base class for record file errors."""
    pass


class RecordReadError(RecordError):
    """Record file is missing or unreadable."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Cannot read record {path}: {reason}")


class RecordWriteError(RecordError):
    """Record file could not be written."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Cannot write record {path}: {reason}")


class InvalidRecordPathError(RecordError):
    """Record location does not name a file."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Record location {path} does not name a file")


class RecordDecodeError(RecordError):
    """Record file does not contain a valid encoded record."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid record {path}: {reason}")


# Configuration Errors
class ConfigError(DircmpError):
    """Base class for configuration errors."""
    pass


class UnsupportedAlgorithmError(ConfigError):
    """Digest algorithm is not one of the supported names."""

    def __init__(self, name: str, supported: tuple[str, ...]):
        self.name = name
        super().__init__(
            f"Unsupported digest algorithm '{name}'. "
            f"Choose one of: {', '.join(supported)}"
        )
