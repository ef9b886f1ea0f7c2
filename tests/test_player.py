from geocoin.sim.cache import Coin
from geocoin.sim.grid import LatLng
from geocoin.sim.player import PlayerState

ORIGIN = LatLng(lat=36.98949379578401, lng=-122.06277128548504)


def test_new_player_starts_at_origin_with_origin_in_history() -> None:
    player = PlayerState.starting_at(ORIGIN)

    assert player.location == ORIGIN
    assert player.inventory == []
    assert player.move_history == [ORIGIN]


def test_move_to_updates_location_and_appends_history() -> None:
    player = PlayerState.starting_at(ORIGIN)
    destination = LatLng(lat=37.0, lng=-122.0)

    player.move_to(destination)

    assert player.location == destination
    assert player.move_history == [ORIGIN, destination]


def test_deposit_pops_most_recent_coin() -> None:
    player = PlayerState.starting_at(ORIGIN)
    player.collect(Coin(i=0, j=0, serial=1))
    player.collect(Coin(i=2, j=3, serial=0))

    assert player.deposit() == Coin(i=2, j=3, serial=0)
    assert player.inventory == [Coin(i=0, j=0, serial=1)]


def test_deposit_on_empty_inventory_returns_none() -> None:
    player = PlayerState.starting_at(ORIGIN)

    assert player.deposit() is None
    assert player.inventory == []


def test_reset_clears_inventory_and_history() -> None:
    player = PlayerState.starting_at(ORIGIN)
    player.move_to(LatLng(lat=1.0, lng=1.0))
    player.collect(Coin(i=0, j=0, serial=0))

    player.reset(ORIGIN)

    assert player.location == ORIGIN
    assert player.inventory == []
    assert player.move_history == []


def test_inventory_text_lists_coins_in_collection_order() -> None:
    player = PlayerState.starting_at(ORIGIN)
    player.collect(Coin(i=0, j=0, serial=1))
    player.collect(Coin(i=2, j=3, serial=0))

    assert player.inventory_text() == "(0:0#1), (2:3#0)"


def test_payload_uses_persisted_field_names_and_round_trips() -> None:
    player = PlayerState.starting_at(ORIGIN)
    player.move_to(LatLng(lat=1.5, lng=-2.5))
    player.collect(Coin(i=4, j=5, serial=6))

    payload = player.to_dict()

    assert set(payload) == {"location", "inventory", "moveHistory"}
    assert payload["inventory"] == [{"i": 4, "j": 5, "serial": 6}]
    assert PlayerState.from_dict(payload) == player
