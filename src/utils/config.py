"""Application configuration loaded from environment and optional .env file."""
import os
from pathlib import Path
from threading import Lock

STORAGE_KEY = "noesis_entries_v1"
ID_PREFIX = "NOESIS"
EXPORT_PREFIX = "NOESIS_registrations_"
EXPORT_SHEET_NAME = "Registrations"

DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_LEVEL = "INFO"

_ENV_KEYS = {"NOESIS_DATA_DIR", "NOESIS_LOG_LEVEL"}

_ENV_LOADED = False
_ENV_LOCK = Lock()


def _load_env() -> None:
    """Load NOESIS_* settings from .env file if present."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        env_path = Path(".env")
        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                # Real environment wins over .env
                if key in _ENV_KEYS and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def get_data_dir() -> Path:
    """Directory holding the persisted entry list."""
    _load_env()
    return Path(os.getenv("NOESIS_DATA_DIR", DEFAULT_DATA_DIR))


def get_log_level() -> str:
    """Logging level name, upper-cased (falls back to INFO)."""
    _load_env()
    level = os.getenv("NOESIS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    return level or DEFAULT_LOG_LEVEL
