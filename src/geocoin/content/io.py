from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Protocol

CANONICAL_JSON_INDENT = 2
CANONICAL_JSON_SEPARATORS = (",", ": ")

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Minimal persistence surface the game state controller writes through."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryStorage:
    def __init__(self, records: dict[str, str] | None = None) -> None:
        self.records: dict[str, str] = dict(records or {})

    def get(self, key: str) -> str | None:
        return self.records.get(key)

    def set(self, key: str, value: str) -> None:
        self.records[key] = value

    def clear(self) -> None:
        self.records.clear()


class JsonFileStorage:
    """Key-value records kept in one JSON object file.

    Every ``set`` rewrites the whole file atomically. An unreadable file is
    reported as having no records.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_records(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("ignoring storage file %s: top level is not an object", self.path)
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def get(self, key: str) -> str | None:
        return self._read_records().get(key)

    def set(self, key: str, value: str) -> None:
        records = self._read_records()
        records[key] = value
        _write_atomic_json(self.path, records)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _canonical_json(payload: dict[str, Any]) -> str:
    return json.dumps(
        payload,
        indent=CANONICAL_JSON_INDENT,
        separators=CANONICAL_JSON_SEPARATORS,
        sort_keys=True,
    )


def _write_atomic_json(path: str | Path, payload: dict[str, Any]) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    serialized = _canonical_json(payload)

    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=destination.parent,
            delete=False,
            suffix=".tmp",
        ) as temp_file:
            temp_file.write(serialized)
            temp_file.flush()
            os.fsync(temp_file.fileno())
            temp_path = Path(temp_file.name)
        os.replace(temp_path, destination)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def load_json_file(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def save_json_file(path: str | Path, payload: dict[str, Any]) -> None:
    _write_atomic_json(path, payload)
