"""API for the floor plan tracker."""

from fastapi import APIRouter, Depends

from floorplan.api.v1.endpoints import auth, floor_plan
from floorplan.core.auth import jwt_auth

api_router = APIRouter()
api_router.include_router(
    auth.router, prefix="/auth", tags=["auth"]
)
api_router.include_router(
    floor_plan.router,
    prefix="/floor",
    tags=["floor"],
    dependencies=[Depends(jwt_auth)],
)
