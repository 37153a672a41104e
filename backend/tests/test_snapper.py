"""Tests for grid snapping."""

import pytest

from floorplan.services.snapper import round_half_away, snap_to_grid


def test_snap_small_vertical_jitter():
    """Dragging (95, 5) with a 90px grid moves one column and no rows."""
    assert snap_to_grid(95, 5, 0, 0, 90) == (1, 0)
    assert snap_to_grid(95, 5, 2, 1, 90) == (3, 1)


def test_snap_half_cell_rounds_away_from_zero():
    """Exactly half a cell snaps to the next cell in the drag direction."""
    assert snap_to_grid(45, 0, 2, 2, 90) == (3, 2)
    assert snap_to_grid(-45, 0, 2, 2, 90) == (1, 2)
    assert snap_to_grid(44, -44, 2, 2, 90) == (2, 2)


def test_snap_clamps_at_zero():
    """Dragging past the top-left edge never produces negative cells."""
    assert snap_to_grid(-1000, -1000, 1, 1, 90) == (0, 0)
    assert snap_to_grid(-90, 270, 0, 0, 90) == (0, 3)


@pytest.mark.parametrize("dx,dy", [(0, 0), (13.7, -88.2), (-400, 512), (135, 135)])
def test_snap_is_deterministic_and_non_negative(dx, dy):
    """Identical inputs give identical, non-negative cells."""
    first = snap_to_grid(dx, dy, 1, 2, 90)
    second = snap_to_grid(dx, dy, 1, 2, 90)
    assert first == second
    assert first[0] >= 0 and first[1] >= 0


def test_snap_rejects_non_positive_grid():
    with pytest.raises(ValueError, match="grid_size"):
        snap_to_grid(10, 10, 0, 0, 0)


def test_round_half_away():
    assert round_half_away(0.5) == 1
    assert round_half_away(-0.5) == -1
    assert round_half_away(1.49) == 1
    assert round_half_away(-0.2) == 0
    assert round_half_away(2.5) == 3
