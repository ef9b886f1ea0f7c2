from __future__ import annotations

import logging
import math
from typing import Any, Iterable

from geocoin.sim.cache import Cache, mint_coins
from geocoin.sim.rng import COINS_LUCK_SUFFIX, SPAWN_LUCK_SUFFIX, cell_luck

DEFAULT_SPAWN_PROBABILITY = 0.1
DEFAULT_MAX_COINS_PER_CACHE = 8
ENTRY_KEY_FIELD = "key"
ENTRY_MEMENTO_FIELD = "momento"

logger = logging.getLogger(__name__)


def cache_key(i: int, j: int) -> str:
    return f"{i},{j}"


class CacheStore:
    """Authoritative per-cell cache state, held as serialized mementos.

    No live ``Cache`` object is retained: ``get_cache`` builds a fresh
    instance from the stored memento each time, and ``set_cache`` is the only
    way a mutation becomes durable. A missing entry means the cell has not
    spawned a cache, which is different from a cache holding zero coins.
    """

    def __init__(
        self,
        spawn_probability: float = DEFAULT_SPAWN_PROBABILITY,
        max_coins_per_cache: int = DEFAULT_MAX_COINS_PER_CACHE,
    ) -> None:
        if not 0.0 <= spawn_probability <= 1.0:
            raise ValueError("spawn_probability must be within [0.0, 1.0]")
        if max_coins_per_cache < 0:
            raise ValueError("max_coins_per_cache must be >= 0")
        self.spawn_probability = spawn_probability
        self.max_coins_per_cache = max_coins_per_cache
        self._mementos: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._mementos)

    def __contains__(self, key: object) -> bool:
        return key in self._mementos

    def has_cache(self, i: int, j: int) -> bool:
        return cache_key(i, j) in self._mementos

    def set_cache(self, i: int, j: int, cache: Cache) -> None:
        self._mementos[cache_key(i, j)] = cache.to_memento()

    def get_cache(self, i: int, j: int) -> Cache | None:
        memento = self._mementos.get(cache_key(i, j))
        if memento is None:
            return None
        return Cache.from_memento(memento)

    def should_spawn(self, i: int, j: int) -> bool:
        return cell_luck(i, j, SPAWN_LUCK_SUFFIX) < self.spawn_probability

    def initial_coin_count(self, i: int, j: int) -> int:
        return math.floor(cell_luck(i, j, COINS_LUCK_SUFFIX) * self.max_coins_per_cache)

    def get_or_spawn_cache(self, i: int, j: int) -> Cache | None:
        existing = self.get_cache(i, j)
        if existing is not None:
            return existing
        if not self.should_spawn(i, j):
            return None
        cache = Cache(i=i, j=j, coins=mint_coins(i, j, self.initial_coin_count(i, j)))
        self.set_cache(i, j, cache)
        logger.debug("spawned cache %s with %d coins", cache.key, len(cache.coins))
        return self.get_cache(i, j)

    def cache_entries(self) -> list[dict[str, str]]:
        return [
            {ENTRY_KEY_FIELD: key, ENTRY_MEMENTO_FIELD: memento}
            for key, memento in self._mementos.items()
        ]

    def install_entries(self, entries: Iterable[dict[str, Any]]) -> None:
        for entry in entries:
            self._mementos[str(entry[ENTRY_KEY_FIELD])] = str(entry[ENTRY_MEMENTO_FIELD])

    def iter_caches(self) -> list[Cache]:
        return [Cache.from_memento(memento) for memento in self._mementos.values()]

    def total_coins(self) -> int:
        return sum(len(cache.coins) for cache in self.iter_caches())

    def clear(self) -> None:
        self._mementos.clear()
