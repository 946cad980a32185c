"""Local key/value persistence behind a small port interface.

Values are JSON-compatible structures (dicts, lists, strings, numbers). The
services above this layer convert domain objects to documents before saving,
so nothing here knows about quizzes or users.

Usage accounting mirrors how browsers measure local storage: two bytes per
character of key plus serialized value.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import re
import tempfile
from typing import Any, Protocol

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """Raised when a value cannot be read from or written to storage."""


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the configured storage quota."""


class StoragePort(Protocol):
    """What services need from a store."""

    def load(self, key: str, default: Any = None) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...

    def usage_bytes(self) -> int: ...


def _validate_key(key: str) -> str:
    if not _KEY_PATTERN.match(key):
        raise StorageError(f"Invalid storage key: {key!r}")
    return key


def _serialize(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Value for {key!r} is not JSON serializable: {exc}") from exc


def _entry_size(key: str, serialized: str) -> int:
    return (len(key) + len(serialized)) * 2


class InMemoryStorage:
    """Process-local store with the same contract as the file store."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._entries: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    @property
    def quota_bytes(self) -> int | None:
        return self._quota_bytes

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._entries.get(_validate_key(key))
        if raw is None:
            return default
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        serialized = _serialize(_validate_key(key), value)
        if self._quota_bytes is not None:
            existing = self._entries.get(key)
            usage_without_key = self.usage_bytes() - (_entry_size(key, existing) if existing is not None else 0)
            if usage_without_key + _entry_size(key, serialized) > self._quota_bytes:
                raise StorageQuotaExceededError(
                    f"Saving {key!r} would exceed the storage quota of {self._quota_bytes} bytes."
                )
        self._entries[key] = serialized

    def delete(self, key: str) -> None:
        self._entries.pop(_validate_key(key), None)

    def keys(self) -> list[str]:
        return sorted(self._entries)

    def usage_bytes(self) -> int:
        return sum(_entry_size(key, raw) for key, raw in self._entries.items())


class JsonFileStorage:
    """Stores each key as ``<key>.json`` inside a directory."""

    def __init__(self, directory: Path, quota_bytes: int | None = None) -> None:
        self._directory = Path(directory)
        self._quota_bytes = quota_bytes
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create storage directory {self._directory}: {exc}") from exc

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def quota_bytes(self) -> int | None:
        return self._quota_bytes

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{_validate_key(key)}.json"

    def load(self, key: str, default: Any = None) -> Any:
        path = self._path_for(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read storage entry %s: %s", key, exc)
            raise StorageError(f"Storage entry {key!r} is unreadable: {exc}") from exc

    def save(self, key: str, value: Any) -> None:
        path = self._path_for(key)
        serialized = _serialize(key, value)

        if self._quota_bytes is not None:
            usage_without_key = self.usage_bytes() - self._entry_usage(key)
            if usage_without_key + _entry_size(key, serialized) > self._quota_bytes:
                logger.warning("Storage quota exceeded while saving %s", key)
                raise StorageQuotaExceededError(
                    f"Saving {key!r} would exceed the storage quota of {self._quota_bytes} bytes."
                )

        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self._directory, suffix=".tmp", delete=False
            ) as handle:
                handle.write(serialized)
                temp_name = handle.name
            os.replace(temp_name, path)
        except OSError as exc:
            logger.exception("Failed to write storage entry %s", key)
            raise StorageError(f"Could not write storage entry {key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete storage entry {key!r}: {exc}") from exc

    def keys(self) -> list[str]:
        return sorted(path.stem for path in self._directory.glob("*.json"))

    def usage_bytes(self) -> int:
        return sum(self._entry_usage(key) for key in self.keys())

    def _entry_usage(self, key: str) -> int:
        path = self._path_for(key)
        if not path.exists():
            return 0
        try:
            return _entry_size(key, path.read_text(encoding="utf-8"))
        except OSError:
            return 0
