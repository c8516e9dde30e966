import pytest

from levelforge.layout.grid import ABSENT, GridModel
from levelforge.layout.tiles import EMPTY, FILLED


def test_new_grid_is_empty():
    g = GridModel(3, 4)
    assert g.filled_count == 0
    assert g.seed_cell is None
    assert all(g.get((x, y)) == EMPTY for x in range(3) for y in range(4))


def test_out_of_bounds_lookups_return_absent():
    g = GridModel(2, 2)
    for cell in [(-1, 0), (0, -1), (2, 0), (0, 2)]:
        assert g.get(cell) is ABSENT
        assert not g.is_filled(cell)
        assert not g.is_open(cell)


def test_fill_records_order_and_is_idempotent():
    g = GridModel(3, 3)
    g.fill((1, 1))
    g.fill((0, 1))
    g.fill((1, 1))
    assert g.filled_order == [(1, 1), (0, 1)]
    assert g.seed_cell == (1, 1)
    assert g.get((0, 1)) == FILLED


def test_fill_outside_grid_raises():
    g = GridModel(2, 2)
    with pytest.raises(IndexError):
        g.fill((2, 2))


def test_iter_filled_is_row_major():
    g = GridModel(3, 3)
    for c in [(2, 0), (0, 2), (0, 0), (1, 1)]:
        g.fill(c)
    assert list(g.iter_filled()) == [(0, 0), (0, 2), (1, 1), (2, 0)]


def test_format_matrix_one_row_per_x():
    g = GridModel(2, 3)
    g.fill((1, 2))
    assert g.format_matrix() == "0 0 0\n0 0 1"
    assert g.to_dict()["filled_order"] == [[1, 2]]
