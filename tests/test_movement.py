import pytest

from geocoin.sim.grid import Board, LatLng
from geocoin.sim.movement import normalize_direction, step_location

START = LatLng(lat=0.00005, lng=0.00005)


def test_aliases_and_case_normalize_to_cardinal_names() -> None:
    assert normalize_direction("n") == "north"
    assert normalize_direction(" East ") == "east"
    assert normalize_direction("w") == "west"


def test_unknown_direction_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown direction"):
        normalize_direction("up")


@pytest.mark.parametrize(
    ("direction", "expected_cell"),
    [("north", (1, 0)), ("south", (-1, 0)), ("east", (0, 1)), ("west", (0, -1))],
)
def test_one_step_moves_exactly_one_cell(direction: str, expected_cell: tuple[int, int]) -> None:
    board = Board(tile_width=1e-4)

    destination = step_location(START, direction, 1e-4)
    cell = board.cell_for_point(destination)

    assert (cell.i, cell.j) == expected_cell


def test_step_changes_only_one_axis() -> None:
    destination = step_location(START, "north", 1e-4)

    assert destination.lng == START.lng
    assert destination.lat == pytest.approx(START.lat + 1e-4)
