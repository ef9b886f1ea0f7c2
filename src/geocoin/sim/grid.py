from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

DEFAULT_TILE_DEGREES = 1e-4
DEFAULT_VISIBILITY_RADIUS = 8

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LatLng":
        return cls(lat=float(data["lat"]), lng=float(data["lng"]))


@dataclass(frozen=True, order=True)
class Cell:
    """Integer grid square anchored at 0N 0E."""

    i: int
    j: int

    @property
    def key(self) -> str:
        return f"{self.i},{self.j}"

    def chebyshev_distance(self, other: "Cell") -> int:
        return max(abs(self.i - other.i), abs(self.j - other.j))


@dataclass(frozen=True)
class CellBounds:
    south_west: LatLng
    north_east: LatLng

    @property
    def center(self) -> LatLng:
        return LatLng(
            lat=(self.south_west.lat + self.north_east.lat) / 2.0,
            lng=(self.south_west.lng + self.north_east.lng) / 2.0,
        )

    def contains(self, point: LatLng) -> bool:
        return (
            self.south_west.lat <= point.lat < self.north_east.lat
            and self.south_west.lng <= point.lng < self.north_east.lng
        )


class Board:
    """Flyweight factory for canonical ``Cell`` instances.

    Every cell handed out by the board is interned in ``_known_cells`` so two
    lookups that resolve to the same ``(i, j)`` return the very same object.
    ``tile_width`` and ``visibility_radius`` are defaults; each query accepts
    an override.
    """

    def __init__(
        self,
        tile_width: float = DEFAULT_TILE_DEGREES,
        visibility_radius: int = DEFAULT_VISIBILITY_RADIUS,
    ) -> None:
        if tile_width <= 0:
            raise ValueError("tile_width must be > 0")
        if visibility_radius < 0:
            raise ValueError("visibility_radius must be >= 0")
        self.tile_width = tile_width
        self.visibility_radius = visibility_radius
        self._known_cells: dict[tuple[int, int], Cell] = {}

    def __len__(self) -> int:
        return len(self._known_cells)

    def get_canonical_cell(self, i: int, j: int) -> Cell:
        key = (i, j)
        cell = self._known_cells.get(key)
        if cell is None:
            cell = Cell(i=i, j=j)
            self._known_cells[key] = cell
        return cell

    def cell_for_point(self, point: LatLng, tile_width: float | None = None) -> Cell:
        width = self.tile_width if tile_width is None else tile_width
        return self.get_canonical_cell(
            math.floor(point.lat / width),
            math.floor(point.lng / width),
        )

    def cell_bounds(self, cell: Cell, tile_width: float | None = None) -> CellBounds:
        width = self.tile_width if tile_width is None else tile_width
        return CellBounds(
            south_west=LatLng(lat=cell.i * width, lng=cell.j * width),
            north_east=LatLng(lat=(cell.i + 1) * width, lng=(cell.j + 1) * width),
        )

    def cells_near_point(
        self,
        point: LatLng,
        radius: int | None = None,
        tile_width: float | None = None,
    ) -> list[Cell]:
        reach = self.visibility_radius if radius is None else radius
        if reach < 0:
            raise ValueError("radius must be >= 0")
        origin = self.cell_for_point(point, tile_width)
        return [
            self.get_canonical_cell(origin.i + di, origin.j + dj)
            for di in range(-reach, reach + 1)
            for dj in range(-reach, reach + 1)
        ]

    def evict_cells_outside(self, center: Cell, keep_radius: int) -> int:
        """Drop interned cells farther than ``keep_radius`` from ``center``."""
        if keep_radius < 0:
            raise ValueError("keep_radius must be >= 0")
        stale = [key for key, cell in self._known_cells.items() if cell.chebyshev_distance(center) > keep_radius]
        for key in stale:
            del self._known_cells[key]
        if stale:
            logger.debug("evicted %d cells outside radius %d of %s", len(stale), keep_radius, center.key)
        return len(stale)
