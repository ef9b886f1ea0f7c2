from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from geocoin.sim.cache import Coin
from geocoin.sim.grid import LatLng


@dataclass
class PlayerState:
    location: LatLng
    inventory: list[Coin] = field(default_factory=list)
    move_history: list[LatLng] = field(default_factory=list)

    @classmethod
    def starting_at(cls, origin: LatLng) -> "PlayerState":
        return cls(location=origin, move_history=[origin])

    def move_to(self, location: LatLng) -> None:
        self.location = location
        self.move_history.append(location)

    def collect(self, coin: Coin) -> None:
        self.inventory.append(coin)

    def deposit(self) -> Coin | None:
        """Pop the most recently collected coin, or ``None`` when empty."""
        if not self.inventory:
            return None
        return self.inventory.pop()

    def reset(self, origin: LatLng) -> None:
        self.location = origin
        self.inventory = []
        self.move_history = []

    def inventory_text(self) -> str:
        return ", ".join(f"({coin})" for coin in self.inventory)

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "inventory": [coin.to_dict() for coin in self.inventory],
            "moveHistory": [point.to_dict() for point in self.move_history],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlayerState":
        return cls(
            location=LatLng.from_dict(data["location"]),
            inventory=[Coin.from_dict(row) for row in data.get("inventory", [])],
            move_history=[LatLng.from_dict(row) for row in data.get("moveHistory", [])],
        )
