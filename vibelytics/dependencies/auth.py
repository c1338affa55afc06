"""
Authentication dependencies.

This module contains the dependency that guards every protected route:
it extracts the bearer token, verifies it and resolves the user.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.core.exceptions import TokenExpired, TokenInvalid, Unauthenticated, UserNotFound
from vibelytics.crud.user import user as user_crud
from vibelytics.database import get_db
from vibelytics.models.user import User
from vibelytics.utils.logging_config import get_logger
from vibelytics.utils.security import TokenStatus, verify_token

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def get_bearer_token(request: Request) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    Args:
        request: FastAPI request object

    Returns:
        Raw token string

    Raises:
        Unauthenticated: If the header is missing or not exactly ``Bearer <token>``
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise Unauthenticated(detail={"hasHeader": False, "expectedFormat": "Bearer <token>"})

    token = auth_header[len(BEARER_PREFIX):] if auth_header.startswith(BEARER_PREFIX) else ""
    if not token or any(ch.isspace() for ch in token):
        raise Unauthenticated(
            detail={"hasHeader": True, "expectedFormat": "Bearer <token>"}
        )
    return token


async def get_current_user(
    request: Request,
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a stored user.

    The user and its id are also attached to ``request.state`` for
    downstream handlers.

    Raises:
        TokenExpired: If the token is past its expiry
        TokenInvalid: If the token is malformed or tampered with
        UserNotFound: If the token's user no longer exists
        ConfigurationError: If JWT_SECRET is not set
    """
    verification = verify_token(token)
    if verification.status is TokenStatus.EXPIRED:
        raise TokenExpired()
    if verification.status is not TokenStatus.VALID:
        raise TokenInvalid()

    user_obj = await user_crud.get(db, id=verification.user_id)
    if user_obj is None:
        logger.info(f"Token for missing user {verification.user_id}")
        raise UserNotFound()

    request.state.user = user_obj
    request.state.user_id = user_obj.id
    return user_obj
