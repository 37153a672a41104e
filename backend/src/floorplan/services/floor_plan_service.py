"""Floor plan service: the single owner of the area registry snapshot.

All mutations go through this service. Each one replaces the registry with a
new snapshot and, when the snapshot actually changed, writes it through the
persistence service.
"""

import logging
from typing import Callable, List, Optional, Tuple

from floorplan.core.config import Settings
from floorplan.core.errors import ImageDecodeFailure, UnknownAreaError
from floorplan.models.editor import CLOSED, EditorState, NumberEditor, ServiceEditor
from floorplan.models.layout import AreaLayout, AreaRegistry, Table
from floorplan.services import area_registry, table_store
from floorplan.services.drag_controller import DragController
from floorplan.services.image_intake import encode_background_image
from floorplan.services.input_surface import (
    MOUSE_DOWN,
    InputSurface,
    NativeInput,
    PointerEvent,
    to_pointer_event,
)
from floorplan.services.layout_persistence_service import LayoutPersistenceService

logger = logging.getLogger(__name__)


class FloorPlanService:
    """Floor plan state and the operations that change it."""

    def __init__(
        self,
        persistence: LayoutPersistenceService,
        settings: Settings,
        surface: Optional[InputSurface] = None,
    ):
        """Load the registry and set up the drag controller.

        Args:
            persistence: Durable slot the registry is loaded from and saved to.
            settings: Application settings (areas, grid size, upload limits).
            surface: Global input surface; a new one is created if omitted.
        """
        self.persistence = persistence
        self.settings = settings
        self.surface = surface or InputSurface()

        self._registry = area_registry.ensure_areas(persistence.load(), settings.areas)
        self._active_area = settings.areas[0]
        self._edit_mode = False
        self._editor: EditorState = CLOSED
        self._drag_area: Optional[str] = None

        self.drag = DragController(
            self.surface,
            settings.grid_size,
            current_cell=self._dragged_cell,
            on_move=self._move_dragged,
        )

        logger.info(f"Floor plan ready with areas {self.area_names}, active: {self._active_area}")

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @property
    def registry(self) -> AreaRegistry:
        return self._registry

    @property
    def area_names(self) -> List[str]:
        return self._registry.names

    @property
    def active_area(self) -> str:
        return self._active_area

    @property
    def active_layout(self) -> AreaLayout:
        return self._registry.layout(self._active_area)

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    @property
    def editor(self) -> EditorState:
        return self._editor

    def layout(self, name: str) -> AreaLayout:
        if name not in self._registry.areas:
            raise UnknownAreaError(name)
        return self._registry.layout(name)

    def find_table(self, table_id: int) -> Optional[Table]:
        return table_store.find_table(self.active_layout, table_id)

    # ------------------------------------------------------------------
    # Registry updates
    # ------------------------------------------------------------------

    def _commit(self, registry: AreaRegistry) -> bool:
        if registry is self._registry:
            return False
        self._registry = registry
        self.persistence.save(registry)
        return True

    def _update_area(self, name: str, update: Callable[[AreaLayout], AreaLayout]) -> AreaLayout:
        layout = update(self.layout(name))
        self._commit(area_registry.replace_layout(self._registry, name, layout))
        return layout

    def switch_area(self, name: str) -> AreaLayout:
        """Make ``name`` the active area and close any open editor.

        A drag in progress stays bound to the area it started in.
        """
        self._active_area = area_registry.switch_area(self._registry, name)
        self._editor = CLOSED
        self.drag.clear_click_suppression()
        logger.info(f"Switched to area {name!r}")
        return self.active_layout

    def set_edit_mode(self, enabled: bool) -> bool:
        """Enter or leave layout edit mode. Leaving abandons an active drag."""
        self._edit_mode = enabled
        self._editor = CLOSED
        if not enabled:
            self.drag.abandon()
            self._drag_area = None
        logger.info(f"Edit mode {'on' if enabled else 'off'}")
        return self._edit_mode

    def toggle_edit_mode(self) -> bool:
        return self.set_edit_mode(not self._edit_mode)

    def cycle_status(self, table_id: int) -> AreaLayout:
        return self._update_area(
            self._active_area, lambda layout: table_store.cycle_status(layout, table_id)
        )

    def set_server(self, table_id: int, name: str) -> AreaLayout:
        return self._update_area(
            self._active_area, lambda layout: table_store.set_server(layout, table_id, name)
        )

    def set_number(self, table_id: int, number_text: str) -> AreaLayout:
        return self._update_area(
            self._active_area,
            lambda layout: table_store.set_number(layout, table_id, number_text),
        )

    def move_table(
        self, table_id: int, col: int, row: int, area: Optional[str] = None
    ) -> AreaLayout:
        return self._update_area(
            area or self._active_area,
            lambda layout: table_store.move_table(layout, table_id, col, row),
        )

    def set_background(self, name: str, encoded_image: Optional[str]) -> AreaLayout:
        self._commit(area_registry.set_background(self._registry, name, encoded_image))
        return self.layout(name)

    async def upload_background(
        self, blob: bytes, content_type: Optional[str] = None, area: Optional[str] = None
    ) -> bool:
        """Encode an uploaded image and attach it to an area.

        The target area is fixed before decoding starts, so switching areas
        while the image decodes does not redirect it. Returns False when the
        image is rejected; nothing is changed in that case.
        """
        name = area or self._active_area
        if name not in self._registry.areas:
            raise UnknownAreaError(name)

        if len(blob) > self.settings.max_background_bytes:
            logger.warning(
                f"Background for {name!r} rejected: {len(blob)} bytes exceeds "
                f"{self.settings.max_background_bytes}"
            )
            return False

        try:
            encoded = await encode_background_image(blob, content_type)
        except ImageDecodeFailure as e:
            logger.warning(f"Background for {name!r} skipped: {e}")
            return False

        self.set_background(name, encoded)
        logger.info(f"Background updated for area {name!r}")
        return True

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def _dragged_cell(self, table_id: int) -> Optional[Tuple[int, int]]:
        if self._drag_area is None:
            return None
        table = table_store.find_table(self.layout(self._drag_area), table_id)
        return table.cell if table else None

    def _move_dragged(self, table_id: int, col: int, row: int) -> None:
        if self._drag_area is not None:
            self.move_table(table_id, col, row, area=self._drag_area)

    def press_table(
        self, table_id: int, native: NativeInput, event_type: str = MOUSE_DOWN
    ) -> bool:
        """Handle a press on a table. Starts a drag in edit mode."""
        table = self.find_table(table_id)
        if table is None:
            logger.debug(f"Press on unknown table {table_id} ignored")
            self.drag.clear_click_suppression()
            return False

        event = to_pointer_event(event_type, native)
        started = self.drag.press(table, event, self._edit_mode)
        if started:
            self._drag_area = self._active_area
        return started

    def dispatch_pointer(self, event_type: str, native: NativeInput) -> PointerEvent:
        """Feed a move or release event to the global input surface."""
        return self.surface.dispatch(event_type, native)

    def click_table(self, table_id: int) -> EditorState:
        """Open the editor for the current mode unless the click ends a drag."""
        if self.drag.should_suppress_click(table_id):
            logger.debug(f"Click on table {table_id} suppressed after drag")
            return self._editor
        if self._edit_mode:
            return self.open_number_editor(table_id)
        return self.open_service_editor(table_id)

    # ------------------------------------------------------------------
    # Editors
    # ------------------------------------------------------------------

    def open_service_editor(self, table_id: int) -> EditorState:
        table = self.find_table(table_id)
        if table is not None:
            self._editor = ServiceEditor(table_id=table.id, draft_server=table.server)
        return self._editor

    def open_number_editor(self, table_id: int) -> EditorState:
        table = self.find_table(table_id)
        if table is not None:
            self._editor = NumberEditor(table_id=table.id, draft_number=str(table.number))
        return self._editor

    def close_editor(self) -> EditorState:
        self._editor = CLOSED
        return self._editor

    def editor_cycle_status(self) -> EditorState:
        """Cycle the status of the table in the open service editor; it stays open."""
        if isinstance(self._editor, ServiceEditor):
            self.cycle_status(self._editor.table_id)
        return self._editor

    def save_server(self, name: Optional[str] = None) -> EditorState:
        """Save the service editor's server name and close it."""
        editor = self._editor
        if not isinstance(editor, ServiceEditor):
            return editor
        self.set_server(editor.table_id, editor.draft_server if name is None else name)
        return self.close_editor()

    def save_number(self, number_text: Optional[str] = None) -> EditorState:
        """Save the number editor's entry and close it, even if the entry is invalid."""
        editor = self._editor
        if not isinstance(editor, NumberEditor):
            return editor
        self.set_number(editor.table_id, editor.draft_number if number_text is None else number_text)
        return self.close_editor()
