"""API schemas for floor plan operations."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from floorplan.models.editor import EditorState
from floorplan.models.layout import AreaLayout


class AreaListResponse(BaseModel):
    """Schema for the list of areas."""

    areas: List[str]
    active_area: str
    edit_mode: bool


class LayoutResponse(BaseModel):
    """Schema for one area's layout snapshot."""

    area: str
    layout: AreaLayout


class ActiveAreaRequest(BaseModel):
    """Schema for switching the active area."""

    area: str


class EditModeRequest(BaseModel):
    """Schema for entering or leaving layout edit mode."""

    enabled: bool


class ServerUpdate(BaseModel):
    """Schema for assigning a server; empty unassigns."""

    server: str = ""


class NumberUpdate(BaseModel):
    """Schema for a table number entry, as typed by the user."""

    number: str


class EditorServerSave(BaseModel):
    """Schema for saving the service editor; omitted keeps the draft."""

    server: Optional[str] = None


class EditorNumberSave(BaseModel):
    """Schema for saving the number editor; omitted keeps the draft."""

    number: Optional[str] = None


class EditorResponse(BaseModel):
    """Schema for the editor state."""

    editor: EditorState
    edit_mode: bool
    layout: AreaLayout


class PressRequest(BaseModel):
    """Schema for a press on a table."""

    event_type: Literal["mousedown", "touchstart"] = "mousedown"
    event: Dict[str, Any] = Field(default_factory=dict)


class PointerResponse(BaseModel):
    """Schema for the result of a gesture event."""

    dragging: bool
    default_prevented: bool = False
    layout: AreaLayout


class BackgroundResponse(BaseModel):
    """Schema for a background upload result."""

    area: str
    applied: bool
    layout: AreaLayout
