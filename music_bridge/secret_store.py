"""Secret store implementations for the stored OAuth credential."""

import json
import os
import tempfile
import threading
from pathlib import Path

from music_bridge.exceptions import MusicBridgeException
from music_bridge.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


class InMemorySecretStore:
    """Process-local store. Used in tests and when persistence is disabled."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileSecretStore:
    """Stores secrets as a JSON object in a single owner-only file.

    Writes go to a temporary file in the same directory which then replaces
    the original, so a crash never leaves a half-written credential behind.
    """

    def __init__(self, path: Path):
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log_with_context(
                logger,
                "warning",
                "Secret store unreadable, treating as empty",
                path=str(self._path),
                error=str(e),
                event_type="secret_store_unreadable",
            )
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _save(self, values: dict[str, str]) -> None:
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(values, tmp)
            os.chmod(tmp_name, 0o600)  # owner read/write only
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise MusicBridgeException(
                f"Failed to write secret store: {e}", details={"path": str(self._path)}
            ) from e

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            values = self._load()
            values[key] = value
            self._save(values)

    def delete(self, key: str) -> None:
        with self._lock:
            values = self._load()
            if key in values:
                del values[key]
                self._save(values)
