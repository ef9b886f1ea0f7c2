from __future__ import annotations

import json
import logging
import threading

from geocoin.content.config import GameplayConfig
from geocoin.content.io import KeyValueStorage, MemoryStorage
from geocoin.content.schema import validate_snapshot_payload
from geocoin.sim.cache import Cache, Coin
from geocoin.sim.game import GameState
from geocoin.sim.grid import Cell, LatLng
from geocoin.sim.sensors import ConfirmProvider, PositionSource, Unsubscribe

SNAPSHOT_SEPARATORS = (",", ":")
RESET_PROMPT = "Reset the game? All coins return to their home caches and your history is erased."

logger = logging.getLogger(__name__)

VisibleCaches = list[tuple[Cell, Cache]]


class GameStateController:
    """Owns the game aggregate and the persisted snapshot.

    Every public handler takes the controller lock for its whole body, so a
    position callback arriving from another thread cannot interleave with a
    collect, deposit or reset. Handlers that change state persist the
    snapshot before returning when ``autosave`` is enabled.
    """

    def __init__(self, state: GameState, storage: KeyValueStorage, *, autosave: bool = True) -> None:
        self.state = state
        self.storage = storage
        self.autosave = autosave
        self._lock = threading.RLock()
        self._unsubscribe: Unsubscribe | None = None

    @classmethod
    def create(
        cls,
        config: GameplayConfig | None = None,
        storage: KeyValueStorage | None = None,
        *,
        autosave: bool = True,
        load: bool = True,
    ) -> "GameStateController":
        controller = cls(
            GameState.create(config),
            storage if storage is not None else MemoryStorage(),
            autosave=autosave,
        )
        if load:
            controller.load()
        return controller

    @property
    def storage_key(self) -> str:
        return self.state.config.storage_key

    def save(self) -> None:
        with self._lock:
            payload = self.state.snapshot_payload()
            self.storage.set(self.storage_key, json.dumps(payload, separators=SNAPSHOT_SEPARATORS))
            logger.info("saved game state: %d caches, %d coins in inventory", len(payload["caches"]), len(payload["player"]["inventory"]))

    def load(self) -> bool:
        """Restore the persisted snapshot; fall back to a fresh game when absent or unparsable."""
        with self._lock:
            raw = self.storage.get(self.storage_key)
            if raw is None:
                logger.info("no saved game under %s; starting fresh", self.storage_key)
                self.state.restore_defaults()
                return False
            try:
                payload = json.loads(raw)
                validate_snapshot_payload(payload)
            except (ValueError, RecursionError) as exc:
                logger.warning("saved game under %s is unparsable (%s); starting fresh", self.storage_key, exc)
                self.state.restore_defaults()
                return False
            self.state.restore_snapshot(payload)
            logger.info("loaded game state: %d caches", len(self.state.store))
            return True

    def reset(self, origin: LatLng | None = None, confirm: ConfirmProvider | None = None) -> bool:
        if confirm is not None and not confirm(RESET_PROMPT):
            logger.info("reset declined")
            return False
        with self._lock:
            target = origin if origin is not None else self.state.config.origin
            returned = self.state.return_inventory_to_origins()
            self.state.player.reset(target)
            self.storage.clear()
            logger.info("reset game: %d coins returned, player at %.6f,%.6f", returned, target.lat, target.lng)
            return True

    def refresh(self) -> VisibleCaches:
        with self._lock:
            visible = self.state.visible_caches()
            self._persist()
            return visible

    def move(self, direction: str) -> VisibleCaches:
        with self._lock:
            self.state.step_player(direction)
            return self.refresh()

    def move_to(self, lat: float, lng: float) -> VisibleCaches:
        with self._lock:
            self.state.move_player(LatLng(lat=lat, lng=lng))
            return self.refresh()

    def on_position_update(self, lat: float, lng: float) -> None:
        self.move_to(lat, lng)

    def collect(self, i: int, j: int, coin: Coin) -> bool:
        with self._lock:
            collected = self.state.collect_coin(i, j, coin)
            if collected:
                self._persist()
            return collected

    def deposit(self, i: int, j: int) -> Coin | None:
        with self._lock:
            coin = self.state.deposit_coin(i, j)
            if coin is not None:
                self._persist()
            return coin

    def follow(self, source: PositionSource) -> None:
        with self._lock:
            self.stop_following()
            self._unsubscribe = source.subscribe(self.on_position_update)

    def stop_following(self) -> None:
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None

    @property
    def following(self) -> bool:
        with self._lock:
            return self._unsubscribe is not None

    def _persist(self) -> None:
        if self.autosave:
            self.save()
