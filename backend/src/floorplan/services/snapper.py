"""Convert raw pointer deltas into grid cell positions."""

import math
from typing import Tuple


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (0.5 -> 1, -0.5 -> -1)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def snap_to_grid(
    dx: float,
    dy: float,
    start_col: int,
    start_row: int,
    grid_size: int,
) -> Tuple[int, int]:
    """Return the cell reached by dragging ``(dx, dy)`` pixels from a start cell.

    Args:
        dx: Horizontal pixel delta since the gesture started.
        dy: Vertical pixel delta since the gesture started.
        start_col: Column of the table when the gesture started.
        start_row: Row of the table when the gesture started.
        grid_size: Cell size in pixels.

    Returns:
        Tuple[int, int]: The new ``(col, row)``, clamped at zero.
    """
    if grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {grid_size}")

    col = max(0, start_col + round_half_away(dx / grid_size))
    row = max(0, start_row + round_half_away(dy / grid_size))
    return col, row
