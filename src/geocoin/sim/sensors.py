from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol, Sequence

from geocoin.content.io import load_json_file
from geocoin.sim.grid import LatLng

TRACK_SCHEMA_VERSION = 1

PositionCallback = Callable[[float, float], None]
Unsubscribe = Callable[[], None]
ConfirmProvider = Callable[[str], bool]


def always_confirm(_prompt: str) -> bool:
    return True


def never_confirm(_prompt: str) -> bool:
    return False


class PositionSource(Protocol):
    """Stream of ``(latitude, longitude)`` samples delivered by callback."""

    def subscribe(self, callback: PositionCallback) -> Unsubscribe:
        ...


class ScriptedPositionSource:
    """Position source that replays a fixed list of samples on demand."""

    def __init__(self, samples: Sequence[LatLng] = ()) -> None:
        self.samples: list[LatLng] = list(samples)
        self._callbacks: list[PositionCallback] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: PositionCallback) -> Unsubscribe:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def emit(self, lat: float, lng: float) -> None:
        for callback in list(self._callbacks):
            callback(lat, lng)

    def play(self) -> int:
        for sample in self.samples:
            self.emit(sample.lat, sample.lng)
        return len(self.samples)


def load_track_json(path: str | Path) -> ScriptedPositionSource:
    payload = load_json_file(path)
    if not isinstance(payload, dict):
        raise ValueError("track payload must be an object")
    schema_version = payload.get("schema_version")
    if schema_version != TRACK_SCHEMA_VERSION:
        raise ValueError(f"unsupported track schema_version: {schema_version}")
    rows = payload.get("samples")
    if not isinstance(rows, list):
        raise ValueError("track payload must contain list field: samples")
    samples: list[LatLng] = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict) or "lat" not in row or "lng" not in row:
            raise ValueError(f"samples[{index}] must be an object with lat and lng")
        samples.append(LatLng.from_dict(row))
    return ScriptedPositionSource(samples)
