from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from geocoin.content.config import GameplayConfig
from geocoin.sim.cache import Cache, Coin
from geocoin.sim.grid import Board, Cell, LatLng
from geocoin.sim.movement import step_location
from geocoin.sim.player import PlayerState
from geocoin.sim.store import CacheStore

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    """Everything one running game mutates: grid, cache store and player.

    Handlers receive this aggregate explicitly; nothing here is module-level.
    All methods assume the caller already serializes access (see
    ``GameStateController``).
    """

    config: GameplayConfig
    board: Board
    store: CacheStore
    player: PlayerState

    @classmethod
    def create(cls, config: GameplayConfig | None = None) -> "GameState":
        resolved = config if config is not None else GameplayConfig()
        return cls(
            config=resolved,
            board=Board(tile_width=resolved.tile_degrees, visibility_radius=resolved.neighborhood_size),
            store=CacheStore(
                spawn_probability=resolved.cache_spawn_probability,
                max_coins_per_cache=resolved.max_coins_per_cache,
            ),
            player=PlayerState.starting_at(resolved.origin),
        )

    def current_cell(self) -> Cell:
        return self.board.cell_for_point(self.player.location)

    def visible_cells(self) -> list[Cell]:
        return self.board.cells_near_point(self.player.location)

    def visible_caches(self) -> list[tuple[Cell, Cache]]:
        """Restore or spawn every cache around the player.

        Returned caches are disposable views; write changes back through
        ``collect_coin`` / ``deposit_coin``.
        """
        visible: list[tuple[Cell, Cache]] = []
        for cell in self.visible_cells():
            cache = self.store.get_or_spawn_cache(cell.i, cell.j)
            if cache is not None:
                visible.append((cell, cache))
        return visible

    def move_player(self, location: LatLng) -> None:
        self.player.move_to(location)
        if self.config.cell_cache_radius > 0:
            self.board.evict_cells_outside(self.current_cell(), self.config.cell_cache_radius)

    def step_player(self, direction: str) -> LatLng:
        destination = step_location(self.player.location, direction, self.config.tile_degrees)
        self.move_player(destination)
        return destination

    def collect_coin(self, i: int, j: int, coin: Coin) -> bool:
        cache = self.store.get_cache(i, j)
        if cache is None or not cache.remove_coin(coin):
            logger.debug("collect ignored: coin %s not in cache %d,%d", coin, i, j)
            return False
        self.player.collect(coin)
        self.store.set_cache(i, j, cache)
        logger.debug("collected %s from %s", coin, cache.key)
        return True

    def deposit_coin(self, i: int, j: int) -> Coin | None:
        cache = self.store.get_cache(i, j)
        if cache is None:
            logger.debug("deposit ignored: no cache at %d,%d", i, j)
            return None
        coin = self.player.deposit()
        if coin is None:
            logger.debug("deposit ignored: inventory empty")
            return None
        cache.add_coin(coin)
        self.store.set_cache(i, j, cache)
        logger.debug("deposited %s into %s", coin, cache.key)
        return coin

    def return_inventory_to_origins(self) -> int:
        returned = 0
        for coin in self.player.inventory:
            cache = self.store.get_cache(coin.i, coin.j)
            if cache is None:
                logger.warning("origin cache %d,%d missing; recreating it for coin %s", coin.i, coin.j, coin)
                cache = Cache(i=coin.i, j=coin.j)
            cache.add_coin(coin)
            self.store.set_cache(coin.i, coin.j, cache)
            returned += 1
        self.player.inventory = []
        return returned

    def total_coins(self) -> int:
        return self.store.total_coins() + len(self.player.inventory)

    def snapshot_payload(self) -> dict[str, Any]:
        return {
            "player": self.player.to_dict(),
            "caches": self.store.cache_entries(),
        }

    def restore_snapshot(self, payload: dict[str, Any]) -> None:
        self.player = PlayerState.from_dict(payload["player"])
        self.store.clear()
        self.store.install_entries(payload["caches"])

    def restore_defaults(self) -> None:
        self.player = PlayerState.starting_at(self.config.origin)
        self.store.clear()
