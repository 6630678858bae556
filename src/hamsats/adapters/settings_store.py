# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Chunked settings persistence.

Values are JSON-encoded (ASCII, so characters and bytes coincide) and
stored under ``{prefix}{key}``. Encodings longer than the chunk size are
split across ``{prefix}{key}_{i}`` entries with the chunk count stored
under ``{prefix}{key}_chunks``. Keys ending in ``_chunks`` or ``_<digits>``
are reserved for that layout and rejected. Loading never raises: missing
or corrupt data yields the caller's default.
"""
import json
import logging
import os
import re
from typing import Any, TypeVar

from hamsats.ports.storage import KeyValueBackend


_log = logging.getLogger(__name__)

SETTINGS_PREFIX = "hamsats_"
CHUNK_SIZE = 4096
_RESERVED_SUFFIX = re.compile(r"_(chunks|\d+)\Z")

T = TypeVar("T")


class MemoryBackend:
    """Dict-backed key/value store."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileBackend:
    """Key/value store persisted as a single JSON object on disk."""

    def __init__(self, path: str) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            _log.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            _log.warning("Ignoring settings file %s: not a JSON object", self.path)
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class ChunkedSettingsStore:
    """Settings store splitting large values across several backend keys."""

    def __init__(
        self,
        backend: KeyValueBackend,
        prefix: str = SETTINGS_PREFIX,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self._backend = backend
        self._prefix = prefix
        self._chunk_size = chunk_size

    @staticmethod
    def _check_key(key: str) -> None:
        if _RESERVED_SUFFIX.search(key):
            raise ValueError(f"Setting key {key!r} ends with a reserved chunk suffix")

    def _key(self, key: str) -> str:
        return self._prefix + key

    def _chunk_key(self, key: str, index: int) -> str:
        return f"{self._prefix}{key}_{index}"

    def _count_key(self, key: str) -> str:
        return f"{self._prefix}{key}_chunks"

    def save(self, key: str, value: Any) -> None:
        """
        Persist a JSON-serializable value, replacing any previous value.

        Raises:
            ValueError: If the key ends with a reserved chunk suffix.
        """
        self._check_key(key)
        encoded = json.dumps(value, ensure_ascii=True)
        self.remove(key)

        if len(encoded) <= self._chunk_size:
            self._backend.set(self._key(key), encoded)
            return

        chunks = [
            encoded[i:i + self._chunk_size]
            for i in range(0, len(encoded), self._chunk_size)
        ]
        for index, chunk in enumerate(chunks):
            self._backend.set(self._chunk_key(key, index), chunk)
        self._backend.set(self._count_key(key), str(len(chunks)))
        _log.debug("Saved setting %s in %d chunks", key, len(chunks))

    def _read_encoded(self, key: str) -> str | None:
        count = self._backend.get(self._count_key(key))
        if count is None:
            return self._backend.get(self._key(key))

        parts = []
        for index in range(int(count)):
            chunk = self._backend.get(self._chunk_key(key, index))
            if chunk is None:
                raise ValueError(f"missing chunk {index} of {count}")
            parts.append(chunk)
        return "".join(parts)

    def load(self, key: str, default: T) -> Any | T:
        """Load a value, or return default when it is missing or corrupt."""
        try:
            self._check_key(key)
            encoded = self._read_encoded(key)
            if encoded is None:
                return default
            return json.loads(encoded)
        except ValueError as e:
            _log.warning("Corrupt setting %s, using default: %s", key, e)
            return default

    def remove(self, key: str) -> None:
        """Delete a value, its chunks and the chunk-count marker."""
        self._check_key(key)
        count = self._backend.get(self._count_key(key))
        if count is not None:
            try:
                total = int(count)
            except ValueError:
                total = 0
            for index in range(total):
                self._backend.delete(self._chunk_key(key, index))
            self._backend.delete(self._count_key(key))
        self._backend.delete(self._key(key))
