"""Authentication endpoints for the API."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from floorplan.core.auth import Token, auth_enabled, create_access_token, jwt_auth, verify_password
from floorplan.core.config import Settings
from floorplan.core.dependencies import get_app_settings

router = APIRouter()


class PasswordRequest(BaseModel):
    """Password request model."""
    password: str


@router.post("/login", response_model=Token)
async def login(
    request: PasswordRequest,
    settings: Settings = Depends(get_app_settings),
) -> Token:
    """Authenticate with password and return a JWT token.

    Raises:
        HTTPException: If the password is incorrect.
    """
    if not verify_password(request.password, settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(access_token=create_access_token(settings))


@router.post("/verify", dependencies=[Depends(jwt_auth)])
async def verify_token(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Verify that the token is valid.

    Returns:
        dict: A success message.
    """
    return {
        "status": "authenticated" if auth_enabled(settings) else "open",
        "services_initialized": getattr(request.app.state, "services_initialized", False),
    }
