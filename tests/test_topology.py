import pytest

from levelforge.layout.errors import InvariantViolation
from levelforge.layout.geometry import Direction
from levelforge.layout.topology import ShapeCategory, classify, shape_category
from tests.layout_test_utils import grid_of

T, L, R, D = Direction.TOP, Direction.LEFT, Direction.RIGHT, Direction.DOWN


def test_single_room_has_no_neighbors():
    g = grid_of([(1, 1)], 4, 4)
    topo = classify(g, (1, 1))
    assert topo.count == 0
    with pytest.raises(InvariantViolation):
        topo.category


def test_linear_and_curve_two_door_shapes():
    g = grid_of([(2, 2), (2, 3), (2, 1)])
    assert classify(g, (2, 2)).directions == {T, D}
    assert classify(g, (2, 2)).category is ShapeCategory.TWO_DOOR_LINEAR
    g = grid_of([(2, 2), (2, 3), (3, 2)])
    assert classify(g, (2, 2)).category is ShapeCategory.TWO_DOOR_CURVE


def test_three_and_four_neighbors():
    g = grid_of([(2, 2), (1, 2), (3, 2), (2, 3)])
    topo = classify(g, (2, 2))
    assert topo.count == 3 and topo.category is ShapeCategory.THREE_DOOR
    g.fill((2, 1))
    assert classify(g, (2, 2)).category is ShapeCategory.FOUR_DOOR


def test_edge_of_grid_neighbors_count_as_absent():
    g = grid_of([(0, 0), (1, 0)], 2, 1)
    topo = classify(g, (0, 0))
    assert topo.count == 1
    assert topo.directions == {R}


def test_ignored_cells_are_treated_as_empty():
    g = grid_of([(2, 2), (2, 3), (3, 2)])
    topo = classify(g, (2, 2), ignore={(3, 2)})
    assert topo.directions == {T}


def test_classify_is_idempotent():
    g = grid_of([(2, 2), (1, 2), (2, 1)])
    assert classify(g, (2, 2)) == classify(g, (2, 2))


def test_shape_category_requires_a_direction():
    with pytest.raises(InvariantViolation):
        shape_category([])
    assert shape_category([L, R]) is ShapeCategory.TWO_DOOR_LINEAR
