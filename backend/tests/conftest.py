"""Shared fixtures for the floor plan tests."""

import io

import pytest
from PIL import Image

from floorplan.core.config import Settings
from floorplan.services.floor_plan_service import FloorPlanService
from floorplan.services.input_surface import InputSurface
from floorplan.services.layout_persistence_service import LayoutPersistenceService


@pytest.fixture
def settings(tmp_path):
    """Create a settings object for testing."""
    return Settings(
        environment="test",
        testing=True,
        layout_db_uri=str(tmp_path / "layout.db"),
        storage_key="test_areas",
        grid_size=90,
        areas=["Main Bar", "Bowling", "Dining", "Patio"],
        auth_password=None,
    )


@pytest.fixture
def persistence(settings):
    """Create a persistence service backed by a temporary database."""
    return LayoutPersistenceService(settings.layout_db_uri, settings.storage_key, settings.areas)


@pytest.fixture
def surface():
    return InputSurface()


@pytest.fixture
def service(persistence, settings, surface):
    """Create a floor plan service with a fresh registry."""
    return FloorPlanService(persistence, settings, surface=surface)


@pytest.fixture
def png_bytes():
    """A small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 3), (200, 10, 10)).save(buffer, format="PNG")
    return buffer.getvalue()
