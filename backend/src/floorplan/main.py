"""Main module for the Floor Plan Tracker API service."""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from floorplan.api.v1.api import api_router
from floorplan.core.config import Settings, get_settings
from floorplan.core.dependencies import get_app_settings
from floorplan.services.floor_plan_service import FloorPlanService
from floorplan.services.input_surface import InputSurface
from floorplan.services.layout_persistence_service import LayoutPersistenceService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; ``settings`` defaults to the environment settings."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.project_name,
        openapi_url=f"{settings.api_v1_str}/openapi.json",
        redirect_slashes=False,  # Disable automatic redirects for trailing slashes
    )
    app.state.settings = settings
    app.state.services_initialized = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    app.include_router(api_router, prefix=settings.api_v1_str)

    @app.on_event("startup")
    async def startup_event():
        """Load the saved floor plan once at application startup."""
        logger.info("Initializing application services...")

        try:
            persistence = LayoutPersistenceService(
                settings.layout_db_uri, settings.storage_key, settings.areas
            )
            app.state.floor_plan_service = FloorPlanService(
                persistence, settings, surface=InputSurface()
            )
            app.state.services_initialized = True
            logger.info("All application services initialized successfully")
        except Exception as e:
            logger.error(f"Error initializing services: {str(e)}", exc_info=True)
            app.state.services_initialized = False

    @app.get("/ping")
    async def pong(settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
        """Ping the API to check if it's running."""
        return {
            "ping": "pong!",
            "environment": settings.environment,
            "testing": settings.testing,
        }

    return app


app = create_app()
