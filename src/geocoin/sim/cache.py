from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

MEMENTO_SEPARATORS = (",", ":")


@dataclass(frozen=True)
class Coin:
    """Token minted at cache ``(i, j)``; identity is the full triple."""

    i: int
    j: int
    serial: int

    def __str__(self) -> str:
        return f"{self.i}:{self.j}#{self.serial}"

    def to_dict(self) -> dict[str, int]:
        return {"i": self.i, "j": self.j, "serial": self.serial}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Coin":
        return cls(i=int(data["i"]), j=int(data["j"]), serial=int(data["serial"]))


def mint_coins(i: int, j: int, count: int) -> list[Coin]:
    if count < 0:
        raise ValueError("coin count must be >= 0")
    return [Coin(i=i, j=j, serial=serial) for serial in range(count)]


@dataclass
class Cache:
    """Disposable view of one cell's coins.

    Mutating a ``Cache`` changes nothing durable; the owning store only sees
    the change once the cache is written back with ``CacheStore.set_cache``.
    """

    i: int
    j: int
    coins: list[Coin] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.i},{self.j}"

    def add_coin(self, coin: Coin) -> None:
        self.coins.append(coin)

    def remove_coin(self, coin: Coin) -> bool:
        # Full (i, j, serial) match; serial alone is not unique once coins travel.
        for index, existing in enumerate(self.coins):
            if existing == coin:
                del self.coins[index]
                return True
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "i": self.i,
            "j": self.j,
            "coins": [coin.to_dict() for coin in self.coins],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Cache":
        return cls(
            i=int(data["i"]),
            j=int(data["j"]),
            coins=[Coin.from_dict(row) for row in data.get("coins", [])],
        )

    def to_memento(self) -> str:
        return json.dumps(self.to_dict(), separators=MEMENTO_SEPARATORS)

    @classmethod
    def from_memento(cls, memento: str) -> "Cache":
        return cls.from_dict(json.loads(memento))
