"""Configuration settings for the application.

This module defines the configuration settings using Pydantic's
SettingsConfigDict to load environment variables from a .env file.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("uvicorn")

DEFAULT_AREAS = ["Main Bar", "Bowling", "Dining", "Patio"]


class Settings(BaseSettings):
    """Settings class for the application."""

    # ENVIRONMENT CONFIG
    environment: str = "dev"
    testing: bool = bool(0)

    # API CONFIG
    project_name: str = "Floor Plan Tracker API"
    api_v1_str: str = "/api/v1"
    backend_cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # FLOOR CONFIG
    grid_size: int = Field(default=90, gt=0)  # pixels per grid cell
    areas: List[str] = Field(default_factory=lambda: list(DEFAULT_AREAS))

    # STORAGE CONFIG
    layout_db_uri: str = "data/floor_layout.db"
    storage_key: str = "tableTracker_areas_v1"
    max_background_bytes: int = 8 * 1024 * 1024

    # AUTHENTICATION CONFIG
    auth_password: Optional[str] = None
    jwt_secret: str = "floorplan-jwt-secret-key"
    jwt_expiration_days: int = 30

    model_config = SettingsConfigDict(
        env_prefix="FLOORPLAN_",
        env_file=["../.env", ".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("areas")
    @classmethod
    def _areas_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one area must be configured")
        if len(set(value)) != len(value):
            raise ValueError(f"Area names must be unique: {value}")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Get the settings for the application."""
    logger.info("Loading config settings from the environment...")

    settings = Settings()

    if settings.auth_password:
        logger.info("Password authentication is enabled")
    else:
        logger.warning("FLOORPLAN_AUTH_PASSWORD is not set, API is unauthenticated")

    logger.info(f"Areas: {settings.areas}, grid size: {settings.grid_size}px")

    return settings
