from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from geocoin.sim.grid import LatLng

GAMEPLAY_CONFIG_SCHEMA_VERSION = 1
DEFAULT_GAMEPLAY_CONFIG_PATH = "content/gameplay.json"
OAKES_CLASSROOM = LatLng(lat=36.98949379578401, lng=-122.06277128548504)
DEFAULT_STORAGE_KEY = "geocoin.game_state"


@dataclass(frozen=True)
class GameplayConfig:
    tile_degrees: float = 1e-4
    neighborhood_size: int = 8
    cache_spawn_probability: float = 0.1
    max_coins_per_cache: int = 8
    origin: LatLng = field(default=OAKES_CLASSROOM)
    storage_key: str = DEFAULT_STORAGE_KEY
    cell_cache_radius: int = 0
    coord_precision: int = 5

    def __post_init__(self) -> None:
        if not isinstance(self.tile_degrees, (int, float)) or self.tile_degrees <= 0:
            raise ValueError("tile_degrees must be a number > 0")
        if not isinstance(self.neighborhood_size, int) or self.neighborhood_size < 0:
            raise ValueError("neighborhood_size must be an integer >= 0")
        if not isinstance(self.cache_spawn_probability, (int, float)):
            raise ValueError("cache_spawn_probability must be numeric")
        if self.cache_spawn_probability < 0.0 or self.cache_spawn_probability > 1.0:
            raise ValueError("cache_spawn_probability must be within [0.0, 1.0]")
        if not isinstance(self.max_coins_per_cache, int) or self.max_coins_per_cache < 0:
            raise ValueError("max_coins_per_cache must be an integer >= 0")
        if not isinstance(self.storage_key, str) or not self.storage_key:
            raise ValueError("storage_key must be a non-empty string")
        if not isinstance(self.cell_cache_radius, int) or self.cell_cache_radius < 0:
            raise ValueError("cell_cache_radius must be an integer >= 0")
        if self.cell_cache_radius and self.cell_cache_radius < self.neighborhood_size:
            raise ValueError("cell_cache_radius must be 0 or >= neighborhood_size")
        if not isinstance(self.coord_precision, int) or self.coord_precision < 0:
            raise ValueError("coord_precision must be an integer >= 0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": GAMEPLAY_CONFIG_SCHEMA_VERSION,
            "tile_degrees": self.tile_degrees,
            "neighborhood_size": self.neighborhood_size,
            "cache_spawn_probability": self.cache_spawn_probability,
            "max_coins_per_cache": self.max_coins_per_cache,
            "origin": self.origin.to_dict(),
            "storage_key": self.storage_key,
            "cell_cache_radius": self.cell_cache_radius,
            "coord_precision": self.coord_precision,
        }


def load_gameplay_config(path: str | Path) -> GameplayConfig:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return _config_from_payload(payload)


def _config_from_payload(payload: dict[str, Any]) -> GameplayConfig:
    if not isinstance(payload, dict):
        raise ValueError("gameplay config payload must be an object")

    schema_version = payload.get("schema_version")
    if not isinstance(schema_version, int):
        raise ValueError("gameplay config payload must contain integer field: schema_version")
    if schema_version != GAMEPLAY_CONFIG_SCHEMA_VERSION:
        raise ValueError(f"unsupported gameplay config schema_version: {schema_version}")

    defaults = GameplayConfig()
    origin_payload = payload.get("origin")
    if origin_payload is None:
        origin = defaults.origin
    else:
        if not isinstance(origin_payload, dict) or not {"lat", "lng"} <= origin_payload.keys():
            raise ValueError("origin must be an object with lat and lng")
        for axis in ("lat", "lng"):
            value = origin_payload[axis]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"origin.{axis} must be numeric")
        origin = LatLng.from_dict(origin_payload)

    return GameplayConfig(
        tile_degrees=payload.get("tile_degrees", defaults.tile_degrees),
        neighborhood_size=payload.get("neighborhood_size", defaults.neighborhood_size),
        cache_spawn_probability=payload.get("cache_spawn_probability", defaults.cache_spawn_probability),
        max_coins_per_cache=payload.get("max_coins_per_cache", defaults.max_coins_per_cache),
        origin=origin,
        storage_key=payload.get("storage_key", defaults.storage_key),
        cell_cache_radius=payload.get("cell_cache_radius", defaults.cell_cache_radius),
        coord_precision=payload.get("coord_precision", defaults.coord_precision),
    )


def load_gameplay_config_or_default(path: str | Path | None) -> GameplayConfig:
    if path is None or not Path(path).exists():
        return GameplayConfig()
    return load_gameplay_config(path)
