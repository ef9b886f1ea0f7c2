from __future__ import annotations

from geocoin.sim.grid import LatLng

# (di, dj) per direction: i follows latitude, j follows longitude.
CARDINAL_DIRECTIONS: dict[str, tuple[int, int]] = {
    "north": (1, 0),
    "south": (-1, 0),
    "east": (0, 1),
    "west": (0, -1),
}
DIRECTION_ALIASES: dict[str, str] = {
    "n": "north",
    "s": "south",
    "e": "east",
    "w": "west",
}


def normalize_direction(direction: str) -> str:
    normalized = direction.strip().lower()
    normalized = DIRECTION_ALIASES.get(normalized, normalized)
    if normalized not in CARDINAL_DIRECTIONS:
        raise ValueError(f"unknown direction: {direction}")
    return normalized


def step_location(location: LatLng, direction: str, tile_width: float) -> LatLng:
    di, dj = CARDINAL_DIRECTIONS[normalize_direction(direction)]
    return LatLng(lat=location.lat + di * tile_width, lng=location.lng + dj * tile_width)
