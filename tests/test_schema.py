import pytest

from geocoin.content.schema import validate_player_payload, validate_snapshot_payload


def _player_payload() -> dict:
    return {
        "location": {"lat": 36.9895, "lng": -122.0628},
        "inventory": [{"i": 1, "j": 2, "serial": 0}],
        "moveHistory": [{"lat": 36.9895, "lng": -122.0628}],
    }


def test_valid_snapshot_passes() -> None:
    validate_snapshot_payload({"player": _player_payload(), "caches": [{"key": "1,2", "momento": "{}"}]})


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda p: p.pop("moveHistory"), "player missing fields"),
        (lambda p: p.update(location={"lat": "north", "lng": 0}), "player.location.lat must be numeric"),
        (lambda p: p.update(inventory={}), "player.inventory must be a list"),
        (lambda p: p["inventory"].append({"i": 1, "j": 2}), r"player.inventory\[1\] missing fields"),
        (lambda p: p["inventory"].append({"i": 1, "j": 2, "serial": "0"}), r"player.inventory\[1\].serial"),
        (lambda p: p["moveHistory"].append({"lat": True, "lng": 0}), r"player.moveHistory\[1\].lat"),
    ],
)
def test_player_payload_errors_name_the_field(mutate, message: str) -> None:
    payload = _player_payload()
    mutate(payload)

    with pytest.raises(ValueError, match=message):
        validate_player_payload(payload)


@pytest.mark.parametrize(
    ("caches", "message"),
    [
        ({}, "caches must be a list"),
        (["1,2"], r"caches\[0\] must be an object"),
        ([{"key": "", "momento": "{}"}], r"caches\[0\].key"),
        ([{"key": "1,2", "momento": {}}], r"caches\[0\].momento must be a string"),
    ],
)
def test_cache_entry_errors_name_the_field(caches, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        validate_snapshot_payload({"player": _player_payload(), "caches": caches})


def test_snapshot_must_be_object_with_both_sections() -> None:
    with pytest.raises(ValueError, match="snapshot payload must be an object"):
        validate_snapshot_payload([])
    with pytest.raises(ValueError, match="snapshot missing fields"):
        validate_snapshot_payload({"player": _player_payload()})
