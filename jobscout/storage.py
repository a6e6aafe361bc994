"""String-keyed persisted storage (JSON document on disk) with advisory file locking."""
from __future__ import annotations

import fcntl
import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Iterable

from jobscout.errors import StorageError
from jobscout.log import get_logger

log = get_logger(__name__)


class KeyValueStorage(ABC):
    """Values are opaque strings; callers own serialization."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, keys: Iterable[str]) -> None:
        pass

    def multi_get(self, keys: Iterable[str]) -> dict[str, str | None]:
        return {k: self.get(k) for k in keys}


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, keys: Iterable[str]) -> None:
        with self._lock:
            for k in keys:
                self._data.pop(k, None)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class FileStorage(KeyValueStorage):
    """All keys live in one JSON object file; every write rewrites it under an exclusive lock."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _decode(self, raw: bytes) -> dict[str, str]:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StorageError(f"{self.path.name} is not valid UTF-8: {exc}") from exc
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise StorageError(f"{self.path.name} is corrupt: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path.name} is not a JSON object")
        return data

    def _quarantine(self, raw: bytes, reason: StorageError) -> None:
        """Keep an unreadable document beside the store so the next write can start clean."""
        backup = self.path.with_name(self.path.name + ".corrupt")
        backup.write_bytes(raw)
        log.warning("Discarding %s, moved to %s: %s", self.path.name, backup.name, reason)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "rb") as f:
                _lock(f, exclusive=False)
                raw = f.read()
                _unlock(f)
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        return self._decode(raw)

    def _update(self, mutate: Callable[[dict[str, str]], None]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a+b") as f:
                _lock(f)
                try:
                    f.seek(0)
                    raw = f.read()
                    try:
                        data = self._decode(raw)
                    except StorageError as exc:
                        self._quarantine(raw, exc)
                        data = {}
                    mutate(data)
                    f.seek(0)
                    f.truncate()
                    f.write(json.dumps(data, ensure_ascii=False).encode("utf-8"))
                    f.flush()
                finally:
                    _unlock(f)
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def multi_get(self, keys: Iterable[str]) -> dict[str, str | None]:
        with self._lock:
            data = self._read_all()
        return {k: data[k] if isinstance(data.get(k), str) else None for k in keys}

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._update(lambda data: data.__setitem__(key, value))
        log.debug("Stored %s (%d chars)", key, len(value))

    def remove(self, keys: Iterable[str]) -> None:
        keys = list(keys)

        def _drop(data: dict[str, str]) -> None:
            for k in keys:
                data.pop(k, None)

        with self._lock:
            self._update(_drop)
        log.debug("Removed %s", ", ".join(keys))


def read_json(storage: KeyValueStorage, key: str, default: Any) -> Any:
    """Stored JSON value for *key*; a missing, malformed or unreadable value yields *default*."""
    try:
        raw = storage.get(key)
    except StorageError as exc:
        log.warning("Reading %s failed, treating as absent: %s", key, exc)
        return default
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        log.warning("Stored %s is not valid JSON, treating as absent", key)
        return default


def write_json(storage: KeyValueStorage, key: str, value: Any) -> bool:
    """Serialize and store *value*. Returns False (and logs) when the write fails."""
    try:
        storage.set(key, json.dumps(value, ensure_ascii=False))
    except StorageError as exc:
        log.warning("Persisting %s failed; in-memory state is ahead of storage: %s", key, exc)
        return False
    return True


def remove_keys(storage: KeyValueStorage, keys: Iterable[str]) -> bool:
    try:
        storage.remove(keys)
    except StorageError as exc:
        log.warning("Removing stored keys failed: %s", exc)
        return False
    return True
