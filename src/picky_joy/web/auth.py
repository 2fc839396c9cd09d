"""
Authentication utilities for FastAPI routes.

Shared auth dependency used by all route modules. Tokens are Supabase
JWTs validated with the service-role client.
"""

import logging

from fastapi import Header
from pydantic import BaseModel

from picky_joy.db.client import get_service_client
from picky_joy.errors import AuthError

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Authenticated user info from Supabase JWT."""
    id: str
    email: str | None
    access_token: str


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    if not authorization:
        raise AuthError("Missing authorization header")

    if not authorization.startswith("Bearer "):
        raise AuthError("Invalid authorization format")

    access_token = authorization[7:].strip()  # Remove "Bearer " prefix
    if not access_token:
        raise AuthError("Missing access token")
    return access_token


async def authenticate(authorization: str | None) -> AuthenticatedUser:
    """
    Validate a bearer header against Supabase Auth.

    Raises AuthError for a missing/invalid token, ConfigurationError when
    Supabase is not configured.
    """
    access_token = parse_bearer(authorization)

    client = get_service_client()
    try:
        user_response = client.auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Auth validation failed: {e}")
        raise AuthError("Invalid or expired token")

    if not user_response or not user_response.user:
        raise AuthError("Invalid or expired token")

    user = user_response.user
    return AuthenticatedUser(
        id=str(user.id),
        email=user.email,
        access_token=access_token,
    )


async def get_current_user(authorization: str | None = Header(None)) -> AuthenticatedUser:
    """FastAPI dependency: the caller behind the Authorization header."""
    return await authenticate(authorization)
