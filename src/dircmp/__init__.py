"""dircmp - Compare complete directories by hashing all files."""

__version__ = "0.1.0"

# Record file constants
RECORD_SUFFIX = ".json"
RECORD_FORMAT_VERSION = 1
DEFAULT_ALGORITHM = "sha256"
DEFAULT_CHUNK_SIZE = 8192
CONFIG_ENV_VAR = "DIRCMP_CONFIG"
