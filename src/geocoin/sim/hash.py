from __future__ import annotations

import hashlib
import json
from typing import Any

from geocoin.sim.game import GameState
from geocoin.sim.store import CacheStore


def _digest(payload: Any) -> str:
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def store_hash(store: CacheStore) -> str:
    entries = sorted(store.cache_entries(), key=lambda entry: entry["key"])
    return _digest(entries)


def snapshot_hash(payload: dict[str, Any]) -> str:
    hash_payload = {
        "player": payload["player"],
        "caches": sorted(payload["caches"], key=lambda entry: entry["key"]),
    }
    return _digest(hash_payload)


def game_hash(state: GameState) -> str:
    return snapshot_hash(state.snapshot_payload())
