"""Durable key-value storage backed by one file per key."""
import os
import re
import shutil
import sys
import tempfile
import time
from pathlib import Path
from typing import Optional, Union

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileStorage:
    """
    Local key-value store surviving restarts.

    Each key maps to ``<base_dir>/<key>.json``. Writes are atomic
    (temp file + rename) and keep the previous value as ``<file>.backup``.
    """

    def __init__(self, base_dir: Union[str, Path], retry_count: int = 3, retry_delay: float = 0.1):
        self.base_dir = Path(base_dir)
        self.retry_count = retry_count
        self.retry_delay = retry_delay

    def path_for(self, key: str) -> Path:
        """
        Resolve the file path for a key.

        Raises:
            ValueError: If key contains path separators or other unsafe characters
        """
        if not key or not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """
        Read the stored value for a key.

        Args:
            key: Storage key

        Returns:
            Stored text, or None if the key is absent

        Raises:
            PermissionError: If file not readable after retries
            UnicodeDecodeError: If stored bytes are not UTF-8
        """
        file_path = self.path_for(key)
        if not file_path.exists():
            return None

        for attempt in range(self.retry_count):
            try:
                return file_path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
            except PermissionError:
                if attempt < self.retry_count - 1:
                    time.sleep(self.retry_delay)
                    continue

        raise PermissionError(f"Cannot read file after {self.retry_count} attempts: {file_path}")

    def set(self, key: str, value: str, backup: bool = True) -> None:
        """
        Store a value atomically with UTF-8 encoding.

        Args:
            key: Storage key
            value: Text to store
            backup: If True, keep the previous value as <file>.backup

        Raises:
            IOError: If backup or write operation fails
        """
        file_path = self.path_for(key)
        self.base_dir.mkdir(parents=True, exist_ok=True)

        if backup and file_path.exists():
            try:
                shutil.copy2(file_path, self._backup_path(file_path))
            except (IOError, PermissionError) as e:
                raise IOError(f"Failed to create backup: {e}")

        temp_fd, temp_path = tempfile.mkstemp(
            dir=self.base_dir,
            prefix=".tmp_",
            suffix=".json"
        )

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())

            # Windows refuses to rename over an open or existing file
            if sys.platform == "win32":
                for attempt in range(self.retry_count):
                    try:
                        os.replace(temp_path, file_path)
                        break
                    except PermissionError:
                        if attempt < self.retry_count - 1:
                            time.sleep(self.retry_delay)
                            continue
                        raise
            else:
                os.replace(temp_path, file_path)

        except Exception as e:
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    pass
            raise IOError(f"Failed to write file {file_path}: {e}")

    def remove(self, key: str) -> None:
        """Delete a key and its backup; absent keys are ignored."""
        file_path = self.path_for(key)
        for path in (file_path, self._backup_path(file_path)):
            try:
                path.unlink()
            except FileNotFoundError:
                pass

    @staticmethod
    def _backup_path(file_path: Path) -> Path:
        return file_path.with_name(f"{file_path.name}.backup")
