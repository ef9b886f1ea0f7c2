import pytest

from geocoin.sim.grid import Board, Cell, LatLng


def test_canonical_cell_lookup_returns_identical_instance() -> None:
    board = Board()

    first = board.get_canonical_cell(3, 4)
    second = board.get_canonical_cell(3, 4)

    assert first is second
    assert len(board) == 1


def test_points_in_the_same_square_share_one_cell_object() -> None:
    board = Board(tile_width=1e-4)

    a = board.cell_for_point(LatLng(lat=0.00021, lng=0.00031))
    b = board.cell_for_point(LatLng(lat=0.00029, lng=0.00039))

    assert a is b
    assert (a.i, a.j) == (2, 3)


def test_classroom_point_resolves_with_floor_semantics() -> None:
    board = Board(tile_width=1e-4)

    cell = board.cell_for_point(LatLng(lat=36.9895, lng=-122.0628))

    assert (cell.i, cell.j) == (369895, -1220628)


def test_negative_coordinates_floor_away_from_zero() -> None:
    board = Board(tile_width=1e-4)

    cell = board.cell_for_point(LatLng(lat=0.00005, lng=-0.00015))

    assert cell.i == 0
    assert cell.j == -2


def test_per_call_tile_width_overrides_board_default() -> None:
    board = Board(tile_width=1e-4)

    cell = board.cell_for_point(LatLng(lat=0.0025, lng=0.0035), tile_width=1e-3)

    assert (cell.i, cell.j) == (2, 3)


def test_cell_bounds_span_one_tile_from_south_west_corner() -> None:
    board = Board(tile_width=1e-4)

    bounds = board.cell_bounds(Cell(i=1, j=-2))

    assert bounds.south_west.lat == pytest.approx(1e-4)
    assert bounds.south_west.lng == pytest.approx(-2e-4)
    assert bounds.north_east.lat == pytest.approx(2e-4)
    assert bounds.north_east.lng == pytest.approx(-1e-4)
    assert bounds.contains(bounds.center)


def test_point_lies_inside_bounds_of_its_own_cell() -> None:
    board = Board(tile_width=1e-4)
    point = LatLng(lat=0.00025, lng=0.00035)

    assert board.cell_bounds(board.cell_for_point(point)).contains(point)


def test_neighborhood_contains_every_cell_within_radius_exactly_once() -> None:
    board = Board(tile_width=1e-4, visibility_radius=8)
    point = LatLng(lat=36.9895, lng=-122.0628)
    origin = board.cell_for_point(point)

    cells = board.cells_near_point(point)

    assert len(cells) == 17 * 17
    assert len({(cell.i, cell.j) for cell in cells}) == 17 * 17
    assert all(cell.chebyshev_distance(origin) <= 8 for cell in cells)
    assert any(cell is origin for cell in cells)


def test_neighborhood_is_row_major_from_south_west() -> None:
    board = Board(tile_width=1e-4)
    point = LatLng(lat=0.00005, lng=0.00005)

    cells = board.cells_near_point(point, radius=1)

    assert [(cell.i, cell.j) for cell in cells] == [
        (-1, -1), (-1, 0), (-1, 1),
        (0, -1), (0, 0), (0, 1),
        (1, -1), (1, 0), (1, 1),
    ]


def test_radius_zero_returns_only_the_player_cell() -> None:
    board = Board()
    point = LatLng(lat=0.00005, lng=0.00005)

    assert board.cells_near_point(point, radius=0) == [board.cell_for_point(point)]


def test_eviction_drops_cells_beyond_keep_radius() -> None:
    board = Board(tile_width=1e-4)
    point = LatLng(lat=0.00005, lng=0.00005)
    board.cells_near_point(point, radius=2)
    center = board.get_canonical_cell(0, 0)
    far = board.get_canonical_cell(2, 2)

    evicted = board.evict_cells_outside(center, keep_radius=1)

    assert evicted == 16
    assert len(board) == 9
    assert board.get_canonical_cell(0, 0) is center
    replacement = board.get_canonical_cell(2, 2)
    assert replacement == far
    assert replacement is not far


def test_board_rejects_non_positive_tile_width() -> None:
    with pytest.raises(ValueError, match="tile_width"):
        Board(tile_width=0)
