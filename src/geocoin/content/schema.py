from __future__ import annotations

from typing import Any

REQUIRED_SNAPSHOT_FIELDS = {"player", "caches"}
REQUIRED_PLAYER_FIELDS = {"location", "inventory", "moveHistory"}
REQUIRED_COIN_FIELDS = {"i", "j", "serial"}


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_lat_lng(value: Any, *, field_name: str) -> None:
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be an object")
    for axis in ("lat", "lng"):
        if not _is_number(value.get(axis)):
            raise ValueError(f"{field_name}.{axis} must be numeric")


def _validate_coin(value: Any, *, field_name: str) -> None:
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be an object")
    missing = REQUIRED_COIN_FIELDS - set(value.keys())
    if missing:
        raise ValueError(f"{field_name} missing fields: {sorted(missing)}")
    for key in sorted(REQUIRED_COIN_FIELDS):
        if not _is_integer(value[key]):
            raise ValueError(f"{field_name}.{key} must be an integer")


def validate_player_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise ValueError("player must be an object")
    missing = REQUIRED_PLAYER_FIELDS - set(payload.keys())
    if missing:
        raise ValueError(f"player missing fields: {sorted(missing)}")

    _validate_lat_lng(payload["location"], field_name="player.location")

    inventory = payload["inventory"]
    if not isinstance(inventory, list):
        raise ValueError("player.inventory must be a list")
    for index, coin in enumerate(inventory):
        _validate_coin(coin, field_name=f"player.inventory[{index}]")

    history = payload["moveHistory"]
    if not isinstance(history, list):
        raise ValueError("player.moveHistory must be a list")
    for index, point in enumerate(history):
        _validate_lat_lng(point, field_name=f"player.moveHistory[{index}]")


def validate_snapshot_payload(payload: Any) -> None:
    """Shape check for a persisted game snapshot.

    Memento bodies are opaque here; they are only ever produced by
    ``Cache.to_memento``.
    """
    if not isinstance(payload, dict):
        raise ValueError("snapshot payload must be an object")
    missing = REQUIRED_SNAPSHOT_FIELDS - set(payload.keys())
    if missing:
        raise ValueError(f"snapshot missing fields: {sorted(missing)}")

    validate_player_payload(payload["player"])

    caches = payload["caches"]
    if not isinstance(caches, list):
        raise ValueError("caches must be a list")
    for index, entry in enumerate(caches):
        if not isinstance(entry, dict):
            raise ValueError(f"caches[{index}] must be an object")
        key = entry.get("key")
        if not isinstance(key, str) or not key:
            raise ValueError(f"caches[{index}].key must be a non-empty string")
        if not isinstance(entry.get("momento"), str):
            raise ValueError(f"caches[{index}].momento must be a string")
