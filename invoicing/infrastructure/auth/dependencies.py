"""
Authentication dependencies for FastAPI.
"""

from typing import Annotated, Any, Dict
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from invoicing.infrastructure.auth.jwt_handler import JWTHandler
from invoicing.domain.models.base import ValidationError


# Security scheme
security = HTTPBearer()

jwt_handler = JWTHandler()


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


async def get_current_user_payload(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> Dict[str, Any]:
    """
    FastAPI dependency to get current user's full token payload.

    Raises:
        HTTPException: 401 if the token is invalid
    """
    try:
        return jwt_handler.verify_token(credentials.credentials)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user_id(
    payload: Annotated[Dict[str, Any], Depends(get_current_user_payload)]
) -> str:
    """FastAPI dependency to get current authenticated user ID."""
    return payload["sub"]


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
