from geocoin.content.config import GameplayConfig
from geocoin.content.io import MemoryStorage
from geocoin.sim.cache import Cache, Coin
from geocoin.sim.game import GameState
from geocoin.sim.grid import LatLng
from geocoin.sim.sensors import always_confirm, never_confirm
from geocoin.sim.state import RESET_PROMPT, GameStateController


def _seed_cache(state: GameState, i: int, j: int, *serials: int) -> None:
    state.store.set_cache(i, j, Cache(i=i, j=j, coins=[Coin(i=i, j=j, serial=serial) for serial in serials]))


def _cache_serials(state: GameState, i: int, j: int) -> list[int]:
    cache = state.store.get_cache(i, j)
    assert cache is not None
    return [coin.serial for coin in cache.coins]


def test_collect_then_deposit_moves_coin_between_cache_and_inventory() -> None:
    state = GameState.create()
    _seed_cache(state, 7, 8, 0, 1, 2)

    assert state.collect_coin(7, 8, Coin(i=7, j=8, serial=1)) is True
    assert _cache_serials(state, 7, 8) == [0, 2]
    assert state.player.inventory == [Coin(i=7, j=8, serial=1)]

    assert state.deposit_coin(7, 8) == Coin(i=7, j=8, serial=1)
    assert _cache_serials(state, 7, 8) == [0, 2, 1]
    assert state.player.inventory == []


def test_collect_of_missing_coin_changes_nothing() -> None:
    state = GameState.create()
    _seed_cache(state, 7, 8, 0)

    assert state.collect_coin(7, 8, Coin(i=7, j=8, serial=5)) is False
    assert state.collect_coin(7, 8, Coin(i=1, j=1, serial=0)) is False
    assert state.collect_coin(99, 99, Coin(i=99, j=99, serial=0)) is False
    assert _cache_serials(state, 7, 8) == [0]
    assert state.player.inventory == []


def test_deposit_with_empty_inventory_or_no_cache_returns_none() -> None:
    state = GameState.create()
    _seed_cache(state, 7, 8, 0)

    assert state.deposit_coin(7, 8) is None
    assert _cache_serials(state, 7, 8) == [0]

    state.player.collect(Coin(i=7, j=8, serial=3))
    assert state.deposit_coin(99, 99) is None
    assert state.player.inventory == [Coin(i=7, j=8, serial=3)]


def test_visible_caches_cover_neighborhood_when_every_cell_spawns() -> None:
    state = GameState.create(GameplayConfig(neighborhood_size=1, cache_spawn_probability=1.0))

    visible = state.visible_caches()

    assert len(visible) == 9
    assert len(state.store) == 9
    assert all(cell.key == cache.key for cell, cache in visible)


def test_move_with_cell_cache_radius_bounds_interned_cells() -> None:
    state = GameState.create(GameplayConfig(neighborhood_size=1, cell_cache_radius=2))

    for _ in range(6):
        state.step_player("east")
        state.visible_cells()

    assert len(state.board) <= 25


def test_returning_inventory_recreates_missing_origin_cache() -> None:
    state = GameState.create()
    coin = Coin(i=50, j=50, serial=0)
    state.player.collect(coin)

    returned = state.return_inventory_to_origins()

    assert returned == 1
    assert state.player.inventory == []
    assert _cache_serials(state, 50, 50) == [0]


def test_reset_conserves_coins_and_returns_player_to_origin() -> None:
    storage = MemoryStorage()
    controller = GameStateController.create(storage=storage)
    state = controller.state
    _seed_cache(state, 1, 1, 0, 1)
    _seed_cache(state, 2, 2, 0)
    controller.collect(1, 1, Coin(i=1, j=1, serial=1))
    controller.collect(2, 2, Coin(i=2, j=2, serial=0))
    controller.move("north")
    before = state.total_coins()

    assert controller.reset(confirm=always_confirm) is True

    assert state.total_coins() == before
    assert state.player.inventory == []
    assert state.player.location == state.config.origin
    assert state.player.move_history == []
    assert _cache_serials(state, 1, 1) == [0, 1]
    assert _cache_serials(state, 2, 2) == [0]
    assert storage.records == {}


def test_declined_reset_leaves_state_untouched() -> None:
    storage = MemoryStorage()
    controller = GameStateController.create(storage=storage)
    _seed_cache(controller.state, 1, 1, 0)
    controller.collect(1, 1, Coin(i=1, j=1, serial=0))
    saved = dict(storage.records)

    assert controller.reset(confirm=never_confirm) is False

    assert controller.state.player.inventory == [Coin(i=1, j=1, serial=0)]
    assert storage.records == saved


def test_reset_prompt_is_passed_to_confirmation() -> None:
    prompts: list[str] = []

    def confirm(prompt: str) -> bool:
        prompts.append(prompt)
        return False

    GameStateController.create().reset(confirm=confirm)

    assert prompts == [RESET_PROMPT]


def test_reset_to_explicit_origin() -> None:
    controller = GameStateController.create()
    target = LatLng(lat=1.0, lng=2.0)

    controller.reset(origin=target)

    assert controller.state.player.location == target
