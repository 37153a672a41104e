"""Authentication module for the application.

This module provides functions for password verification and JWT token generation.
Authentication is only enforced when a password is configured.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt
from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from floorplan.core.config import Settings
from floorplan.core.dependencies import get_app_settings

JWT_ALGORITHM = "HS256"


class Token(BaseModel):
    """Token response model."""
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Token data model."""
    exp: int


def auth_enabled(settings: Settings) -> bool:
    return bool(settings.auth_password)


def verify_password(password: str, settings: Settings) -> bool:
    """Verify if the provided password matches the configured password.

    Args:
        password: The password to verify.
        settings: Settings holding the configured password.

    Returns:
        bool: True if the password is correct, False otherwise.
    """
    if not auth_enabled(settings):
        return True
    return password == settings.auth_password


def create_access_token(settings: Settings) -> str:
    """Create a new JWT access token.

    Returns:
        str: The JWT access token.
    """
    expire = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiration_days)
    to_encode = {"exp": int(expire.timestamp())}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, settings: Settings) -> Optional[Dict]:
    """Decode and validate a JWT token.

    Args:
        token: The JWT token to decode.
        settings: Settings holding the signing secret.

    Returns:
        Optional[Dict]: The decoded token payload if valid, None otherwise.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])

        # Check if token has expired
        if payload["exp"] < time.time():
            return None

        return payload
    except jwt.PyJWTError:
        return None


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication, a no-op when no password is configured."""

    def __init__(self, auto_error: bool = True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request: Request) -> Optional[TokenData]:
        """Validate the JWT token in the Authorization header.

        Raises:
            HTTPException: If the token is invalid or missing.
        """
        settings = get_app_settings(request)
        if not auth_enabled(settings):
            return None

        credentials: HTTPAuthorizationCredentials = await super().__call__(request)
        if not credentials or credentials.scheme != "Bearer":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid authentication scheme."
            )

        payload = decode_token(credentials.credentials, settings)
        if payload is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid or expired token."
            )

        return TokenData(exp=payload["exp"])


# Dependency for protected routes
jwt_auth = JWTBearer()
