"""Drag session controller for moving tables on the grid.

A session starts when a press lands on a table in edit mode, follows move
events on the global input surface and ends on release or when it is
abandoned. Move and release listeners are held in an ``ExitStack`` so every
way out of a session unsubscribes them.
"""

import logging
from contextlib import ExitStack
from enum import Enum
from typing import Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from floorplan.models.layout import Table
from floorplan.services.input_surface import (
    MOVE_EVENTS,
    RELEASE_EVENTS,
    InputSurface,
    PointerEvent,
)
from floorplan.services.snapper import snap_to_grid

logger = logging.getLogger(__name__)

CellLookup = Callable[[int], Optional[Tuple[int, int]]]
MoveCallback = Callable[[int, int, int], None]


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragSession(BaseModel):
    """Origin of an in-progress drag."""

    model_config = ConfigDict(frozen=True)

    table_id: int
    start_col: int
    start_row: int
    start_x: float
    start_y: float


class DragController:
    """Turns press/move/release gestures into table moves."""

    def __init__(
        self,
        surface: InputSurface,
        grid_size: int,
        current_cell: CellLookup,
        on_move: MoveCallback,
    ):
        """Create a controller.

        Args:
            surface: Global input surface that move and release listeners join.
            grid_size: Cell size in pixels.
            current_cell: Returns the current ``(col, row)`` of a table id in
                the active area, or ``None`` if it is not there.
            on_move: Called with ``(table_id, col, row)`` when the snapped cell
                differs from the current one.
        """
        self.surface = surface
        self.grid_size = grid_size
        self._current_cell = current_cell
        self._on_move = on_move
        self._session: Optional[DragSession] = None
        self._subscriptions: Optional[ExitStack] = None
        self._moved = False
        self._suppress_table: Optional[int] = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.DRAGGING if self._session is not None else DragPhase.IDLE

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    def press(self, table: Table, event: PointerEvent, edit_mode: bool) -> bool:
        """Start dragging ``table``. Returns False when no session was started."""
        # a new press is a new gesture
        self._suppress_table = None
        if not edit_mode or not event.has_position:
            return False
        if self._session is not None:
            logger.info(f"Press during drag of table {self._session.table_id}, restarting")
            self._finish()

        self._session = DragSession(
            table_id=table.id,
            start_col=table.col,
            start_row=table.row,
            start_x=event.client_x,
            start_y=event.client_y,
        )
        self._moved = False

        stack = ExitStack()
        stack.enter_context(self.surface.listening(MOVE_EVENTS, self._handle_move))
        stack.enter_context(self.surface.listening(RELEASE_EVENTS, self._handle_release))
        self._subscriptions = stack

        logger.debug(f"Drag started for table {table.id} at {table.cell}")
        return True

    def abandon(self) -> None:
        """Drop the current session without applying anything further."""
        self.clear_click_suppression()
        if self._session is None:
            return
        logger.info(f"Abandoning drag of table {self._session.table_id}")
        self._finish()

    def clear_click_suppression(self) -> None:
        self._suppress_table = None

    def should_suppress_click(self, table_id: int) -> bool:
        """Whether a click on ``table_id`` belongs to a drag and must be ignored.

        True while a session is active, or for the first click right after a
        session that moved this same table. Any click consumes the pending
        suppression.
        """
        if self._session is not None:
            return True
        suppress = self._suppress_table == table_id
        self._suppress_table = None
        return suppress

    def _handle_move(self, event: PointerEvent) -> None:
        session = self._session
        if session is None:
            return
        event.prevent_default()  # no page scroll while dragging on touch
        if not event.has_position:
            return

        col, row = snap_to_grid(
            event.client_x - session.start_x,
            event.client_y - session.start_y,
            session.start_col,
            session.start_row,
            self.grid_size,
        )

        current = self._current_cell(session.table_id)
        if current is None or current == (col, row):
            return
        self._on_move(session.table_id, col, row)
        self._moved = True

    def _handle_release(self, event: PointerEvent) -> None:
        if self._session is None:
            return
        logger.debug(f"Drag of table {self._session.table_id} released")
        self._suppress_table = self._session.table_id if self._moved else None
        self._finish()

    def _finish(self) -> None:
        self._session = None
        subscriptions, self._subscriptions = self._subscriptions, None
        if subscriptions is not None:
            subscriptions.close()
