"""API endpoints for floor plan operations."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, HTTPException, Path, UploadFile, status
from pydantic import ValidationError

from floorplan.core.dependencies import get_floor_plan_service
from floorplan.core.errors import UnknownAreaError, UnknownEntityReference
from floorplan.schemas.floor_plan_api import (
    ActiveAreaRequest,
    AreaListResponse,
    BackgroundResponse,
    EditModeRequest,
    EditorNumberSave,
    EditorResponse,
    EditorServerSave,
    LayoutResponse,
    NumberUpdate,
    PointerResponse,
    PressRequest,
    ServerUpdate,
)
from floorplan.services.drag_controller import DragPhase
from floorplan.services.floor_plan_service import FloorPlanService
from floorplan.services.input_surface import EVENT_TYPES, parse_native

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_table(service: FloorPlanService, table_id: int) -> None:
    if service.find_table(table_id) is None:
        error = UnknownEntityReference(table_id, service.active_area)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


def _layout_response(service: FloorPlanService) -> LayoutResponse:
    return LayoutResponse(area=service.active_area, layout=service.active_layout)


def _editor_response(service: FloorPlanService) -> EditorResponse:
    return EditorResponse(
        editor=service.editor,
        edit_mode=service.edit_mode,
        layout=service.active_layout,
    )


def _parse_event(event_type: str, payload: Dict[str, Any]):
    try:
        return parse_native(event_type, payload)
    except (ValueError, ValidationError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid {event_type} event: {e}",
        )


@router.get(
    "/areas",
    response_model=AreaListResponse,
    summary="List areas",
    description="List the configured areas and the active one.",
)
async def list_areas(
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> AreaListResponse:
    """List areas."""
    return AreaListResponse(
        areas=service.area_names,
        active_area=service.active_area,
        edit_mode=service.edit_mode,
    )


@router.get(
    "/areas/{area}",
    response_model=LayoutResponse,
    summary="Get an area's layout",
)
async def get_area_layout(
    area: str = Path(..., description="The area name"),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> LayoutResponse:
    """Get the layout of any area."""
    try:
        layout = service.layout(area)
    except UnknownAreaError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return LayoutResponse(area=area, layout=layout)


@router.get("/layout", response_model=LayoutResponse, summary="Get the active layout")
async def get_active_layout(
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> LayoutResponse:
    """Get the active area's layout."""
    return _layout_response(service)


@router.put("/active-area", response_model=LayoutResponse, summary="Switch area")
async def switch_area(
    request: ActiveAreaRequest,
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> LayoutResponse:
    """Switch the active area; closes any open editor."""
    try:
        service.switch_area(request.area)
    except UnknownAreaError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _layout_response(service)


@router.put("/edit-mode", response_model=EditorResponse, summary="Set edit mode")
async def set_edit_mode(
    request: EditModeRequest,
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> EditorResponse:
    """Enter or leave layout edit mode."""
    service.set_edit_mode(request.enabled)
    return _editor_response(service)


@router.post("/tables/{table_id}/cycle-status", response_model=LayoutResponse)
async def cycle_table_status(
    table_id: int = Path(..., description="The table id"),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> LayoutResponse:
    """Advance a table's status."""
    _require_table(service, table_id)
    service.cycle_status(table_id)
    return _layout_response(service)


@router.put("/tables/{table_id}/server", response_model=LayoutResponse)
async def set_table_server(
    request: ServerUpdate,
    table_id: int = Path(..., description="The table id"),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> LayoutResponse:
    """Assign a server to a table."""
    _require_table(service, table_id)
    service.set_server(table_id, request.server)
    return _layout_response(service)


@router.put("/tables/{table_id}/number", response_model=LayoutResponse)
async def set_table_number(
    request: NumberUpdate,
    table_id: int = Path(..., description="The table id"),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> LayoutResponse:
    """Set a table number; invalid entries are discarded."""
    _require_table(service, table_id)
    service.set_number(table_id, request.number)
    return _layout_response(service)


@router.post("/tables/{table_id}/press", response_model=PointerResponse)
async def press_table(
    request: PressRequest,
    table_id: int = Path(..., description="The table id"),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> PointerResponse:
    """Press on a table; starts a drag in edit mode."""
    _require_table(service, table_id)
    native = _parse_event(request.event_type, request.event)
    service.press_table(table_id, native, request.event_type)
    return PointerResponse(
        dragging=service.drag.phase == DragPhase.DRAGGING,
        layout=service.active_layout,
    )


@router.post("/pointer/{event_type}", response_model=PointerResponse)
async def dispatch_pointer(
    payload: Dict[str, Any],
    event_type: str = Path(..., description=f"One of {', '.join(EVENT_TYPES)}"),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> PointerResponse:
    """Feed a move or release event to the input surface."""
    native = _parse_event(event_type, payload)
    event = service.dispatch_pointer(event_type, native)
    return PointerResponse(
        dragging=service.drag.phase == DragPhase.DRAGGING,
        default_prevented=event.default_prevented,
        layout=service.active_layout,
    )


@router.post("/tables/{table_id}/click", response_model=EditorResponse)
async def click_table(
    table_id: int = Path(..., description="The table id"),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> EditorResponse:
    """Click a table: opens the editor for the current mode unless it ends a drag."""
    service.click_table(table_id)
    return _editor_response(service)


@router.get("/editor", response_model=EditorResponse)
async def get_editor(
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> EditorResponse:
    """Get the editor state."""
    return _editor_response(service)


@router.post("/editor/cycle-status", response_model=EditorResponse)
async def editor_cycle_status(
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> EditorResponse:
    """Cycle the status of the table in the open service editor."""
    service.editor_cycle_status()
    return _editor_response(service)


@router.put("/editor/server", response_model=EditorResponse)
async def save_editor_server(
    request: EditorServerSave,
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> EditorResponse:
    """Save the service editor and close it."""
    service.save_server(request.server)
    return _editor_response(service)


@router.put("/editor/number", response_model=EditorResponse)
async def save_editor_number(
    request: EditorNumberSave,
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> EditorResponse:
    """Save the number editor and close it."""
    service.save_number(request.number)
    return _editor_response(service)


@router.delete("/editor", response_model=EditorResponse)
async def close_editor(
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> EditorResponse:
    """Close the editor without saving."""
    service.close_editor()
    return _editor_response(service)


@router.post("/areas/{area}/background", response_model=BackgroundResponse)
async def upload_background(
    area: str = Path(..., description="The area name"),
    file: UploadFile = File(...),
    service: FloorPlanService = Depends(get_floor_plan_service),
) -> BackgroundResponse:
    """Upload a background image for an area."""
    logger.info(f"Background upload for {area!r}: {file.filename}, content type: {file.content_type}")

    # one byte past the limit is enough for the service to reject it
    content = await file.read(service.settings.max_background_bytes + 1)
    try:
        applied = await service.upload_background(content, file.content_type, area=area)
    except UnknownAreaError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if not applied:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Image could not be used as a background",
        )

    return BackgroundResponse(area=area, applied=applied, layout=service.layout(area))
