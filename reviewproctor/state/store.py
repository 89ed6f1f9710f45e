"""Flat key-value state store contract and backends."""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, MutableMapping, Optional, Protocol

from reviewproctor.errors import StateStoreError

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "$timestamp"


class StateStore(Protocol):
    """Typed get/set access to scalar values keyed by ``<namespace>.<field>``.

    Getters return ``None`` when the key is absent or holds a value of a
    different type, so callers can tell "never written" apart from ``0`` or
    an empty string.
    """

    def get_int(self, key: str) -> Optional[int]:
        ...

    def set_int(self, key: str, value: int) -> None:
        ...

    def get_string(self, key: str) -> Optional[str]:
        ...

    def set_string(self, key: str, value: str) -> None:
        ...

    def get_timestamp(self, key: str) -> Optional[datetime]:
        ...

    def set_timestamp(self, key: str, value: datetime) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def keys(self) -> Iterable[str]:
        ...


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class InMemoryStateStore:
    """Keep state in a plain dictionary for the lifetime of the process."""

    def __init__(self, initial: Optional[MutableMapping[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    def get_int(self, key: str) -> Optional[int]:
        value = self._get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def set_int(self, key: str, value: int) -> None:
        self._set(key, int(value))

    def get_string(self, key: str) -> Optional[str]:
        value = self._get(key)
        return value if isinstance(value, str) else None

    def set_string(self, key: str, value: str) -> None:
        self._set(key, str(value))

    def get_timestamp(self, key: str) -> Optional[datetime]:
        value = self._get(key)
        return value if isinstance(value, datetime) else None

    def set_timestamp(self, key: str, value: datetime) -> None:
        self._set(key, ensure_utc(value))

    def remove(self, key: str) -> None:
        with self._lock:
            if key not in self._values:
                return
            previous = self._values.pop(key)
            try:
                self._persist_locked()
            except StateStoreError:
                self._values[key] = previous
                raise
        logger.debug(f"Removed {key}")

    def keys(self) -> Iterable[str]:
        with self._lock:
            return sorted(self._values)

    # ------------------------------------------------------------------
    def _get(self, key: str) -> Any:
        with self._lock:
            return self._values.get(key)

    def _set(self, key: str, value: Any) -> None:
        with self._lock:
            existed = key in self._values
            previous = self._values.get(key)
            self._values[key] = value
            try:
                self._persist_locked()
            except StateStoreError:
                # Keep memory in step with what was last written.
                if existed:
                    self._values[key] = previous
                else:
                    del self._values[key]
                raise
        logger.debug(f"Stored {key} = {value!r}")

    def _persist_locked(self) -> None:
        """Hook for subclasses that mirror the mapping somewhere durable."""


class JsonFileStateStore(InMemoryStateStore):
    """State store backed by a single JSON document.

    Integers and strings are stored as JSON scalars.  Timestamps are stored as
    ``{"$timestamp": "<ISO-8601>"}`` objects so they survive the round trip
    with their type intact.  Every mutation rewrites the whole document
    through a temporary file that replaces the previous one.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        super().__init__(self._load())
        logger.info(f"Loaded {len(self._values)} state entries from {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise StateStoreError(f"state file {self._path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise StateStoreError(f"state file {self._path} must contain a JSON object")
        decoded = {str(key): _decode_value(value) for key, value in raw.items()}
        return {key: value for key, value in decoded.items() if value is not None}

    def _persist_locked(self) -> None:
        payload = {key: _encode_value(value) for key, value in self._values.items()}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".state-", suffix=".json")
        except OSError as exc:
            raise StateStoreError(f"failed to write state file {self._path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StateStoreError(f"failed to write state file {self._path}: {exc}") from exc


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return {_TIMESTAMP_TAG: ensure_utc(value).isoformat()}
    return value


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict) and set(value) == {_TIMESTAMP_TAG}:
        try:
            return ensure_utc(datetime.fromisoformat(str(value[_TIMESTAMP_TAG])))
        except ValueError:
            logger.warning(f"Ignoring malformed timestamp {value[_TIMESTAMP_TAG]!r}")
            return None
    return value


__all__ = [
    "InMemoryStateStore",
    "JsonFileStateStore",
    "StateStore",
    "ensure_utc",
]
