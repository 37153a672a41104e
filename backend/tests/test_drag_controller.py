"""Tests for the drag session controller."""

from unittest.mock import MagicMock

import pytest

from floorplan.models.layout import Table
from floorplan.services.drag_controller import DragController, DragPhase
from floorplan.services.input_surface import (
    MOUSE_DOWN,
    MOUSE_MOVE,
    MOUSE_UP,
    TOUCH_END,
    TOUCH_MOVE,
    TOUCH_START,
    MouseInput,
    TouchInput,
    TouchPoint,
    to_pointer_event,
)


class FakeStore:
    """Minimal table positions keyed by id."""

    def __init__(self):
        self.cells = {1: (0, 0), 2: (2, 1)}
        self.moves = []

    def cell(self, table_id):
        return self.cells.get(table_id)

    def move(self, table_id, col, row):
        self.cells[table_id] = (col, row)
        self.moves.append((table_id, col, row))

    def table(self, table_id):
        col, row = self.cells[table_id]
        return Table(id=table_id, number=table_id, col=col, row=row)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def controller(surface, store):
    return DragController(surface, 90, current_cell=store.cell, on_move=store.move)


def _mouse(x, y):
    return MouseInput(clientX=x, clientY=y)


def _press(controller, store, table_id, x=100, y=100, edit_mode=True):
    event = to_pointer_event(MOUSE_DOWN, _mouse(x, y))
    return controller.press(store.table(table_id), event, edit_mode)


def test_press_outside_edit_mode_does_nothing(controller, store, surface):
    assert _press(controller, store, 1, edit_mode=False) is False
    assert controller.phase == DragPhase.IDLE
    assert surface.listener_count() == 0


def test_drag_moves_table_by_snapped_delta(controller, store, surface):
    """A (95, 5) pixel drag moves the table one column right."""
    assert _press(controller, store, 1) is True
    assert controller.phase == DragPhase.DRAGGING
    assert surface.listener_count() == 4

    event = surface.dispatch(MOUSE_MOVE, _mouse(195, 105))

    assert event.default_prevented is True
    assert store.cells[1] == (1, 0)

    surface.dispatch(MOUSE_UP, _mouse(195, 105))

    assert controller.phase == DragPhase.IDLE
    assert surface.listener_count() == 0


def test_move_within_same_cell_is_not_applied(controller, store, surface):
    _press(controller, store, 2)

    surface.dispatch(MOUSE_MOVE, _mouse(120, 130))
    surface.dispatch(MOUSE_MOVE, _mouse(280, 100))
    surface.dispatch(MOUSE_MOVE, _mouse(285, 100))

    assert store.moves == [(2, 4, 1)]


def test_drag_clamps_to_non_negative(controller, store, surface):
    _press(controller, store, 2)

    for x, y in [(-500, -500), (-1000, 40), (-200, -900)]:
        surface.dispatch(MOUSE_MOVE, _mouse(x, y))
        col, row = store.cells[2]
        assert col >= 0 and row >= 0

    assert store.cells[2] == (0, 0)


def test_touch_drag(controller, store, surface):
    """Touch gestures drive the same session as mouse gestures."""
    start = to_pointer_event(TOUCH_START, TouchInput(touches=[TouchPoint(clientX=10, clientY=10)]))
    controller.press(store.table(1), start, True)

    event = surface.dispatch(TOUCH_MOVE, TouchInput(touches=[TouchPoint(clientX=190, clientY=100)]))
    assert event.default_prevented is True
    assert store.cells[1] == (2, 1)

    surface.dispatch(TOUCH_END, TouchInput())
    assert controller.phase == DragPhase.IDLE
    assert surface.listener_count() == 0


def test_release_does_not_compute_position(controller, store, surface):
    _press(controller, store, 1)
    surface.dispatch(MOUSE_UP, _mouse(1000, 1000))

    assert store.moves == []


def test_abandon_stops_further_moves(controller, store, surface):
    """After abandoning, move events no longer reach the store."""
    _press(controller, store, 1)
    surface.dispatch(MOUSE_MOVE, _mouse(190, 100))
    controller.abandon()

    surface.dispatch(MOUSE_MOVE, _mouse(500, 500))

    assert store.cells[1] == (1, 0)
    assert controller.phase == DragPhase.IDLE
    assert surface.listener_count() == 0


def test_click_suppressed_after_moving_drag(controller, store, surface):
    _press(controller, store, 1)
    assert controller.should_suppress_click(1) is True

    surface.dispatch(MOUSE_MOVE, _mouse(190, 100))
    surface.dispatch(MOUSE_UP, _mouse(190, 100))

    assert controller.should_suppress_click(1) is True
    # consumed by the first click
    assert controller.should_suppress_click(1) is False


def test_click_not_suppressed_after_press_without_move(controller, store, surface):
    _press(controller, store, 1)
    surface.dispatch(MOUSE_UP, _mouse(100, 100))

    assert controller.should_suppress_click(1) is False


def test_click_on_other_table_after_drag_is_not_suppressed(controller, store, surface):
    """Only the dragged table's click is swallowed, and any click consumes it."""
    _press(controller, store, 1)
    surface.dispatch(MOUSE_MOVE, _mouse(190, 100))
    surface.dispatch(MOUSE_UP, _mouse(190, 100))

    assert controller.should_suppress_click(2) is False
    assert controller.should_suppress_click(1) is False


def test_next_press_clears_pending_suppression(controller, store, surface):
    """A release with no click does not leak into the next gesture."""
    _press(controller, store, 1)
    surface.dispatch(MOUSE_MOVE, _mouse(190, 100))
    surface.dispatch(MOUSE_UP, _mouse(190, 100))

    _press(controller, store, 1, edit_mode=False)

    assert controller.should_suppress_click(1) is False


def test_abandon_when_idle_clears_pending_suppression(controller, store, surface):
    _press(controller, store, 1)
    surface.dispatch(MOUSE_MOVE, _mouse(190, 100))
    surface.dispatch(MOUSE_UP, _mouse(190, 100))

    controller.abandon()

    assert controller.should_suppress_click(1) is False


def test_second_press_restarts_session(controller, store, surface):
    _press(controller, store, 1)
    _press(controller, store, 2)

    assert controller.session.table_id == 2
    assert surface.listener_count() == 4


def test_table_removed_during_drag_is_ignored(surface):
    on_move = MagicMock()
    controller = DragController(surface, 90, current_cell=lambda table_id: None, on_move=on_move)
    controller.press(Table(id=9, number=9, col=0, row=0), to_pointer_event(MOUSE_DOWN, _mouse(0, 0)), True)

    surface.dispatch(MOUSE_MOVE, _mouse(300, 300))

    on_move.assert_not_called()
