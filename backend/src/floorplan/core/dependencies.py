"""Dependencies for the application using FastAPI app state for singletons."""

import logging

from fastapi import Request

from floorplan.core.config import Settings, get_settings
from floorplan.services.floor_plan_service import FloorPlanService

logger = logging.getLogger(__name__)


def get_floor_plan_service(request: Request) -> FloorPlanService:
    """Get the floor plan service from application state."""
    if not hasattr(request.app.state, "floor_plan_service"):
        raise ValueError("Floor plan service not initialized in application state")

    return request.app.state.floor_plan_service


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()
