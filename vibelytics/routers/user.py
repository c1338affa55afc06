"""
User router.
"""

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from vibelytics.config import settings
from vibelytics.dependencies.auth import get_current_user
from vibelytics.models.user import User
from vibelytics.schemas.auth import User as UserSchema
from vibelytics.schemas.base import DataResponse

router = APIRouter(
    prefix="/user",
    tags=["user"],
    responses={401: {"description": "Unauthorized"}},
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("/me", response_model=DataResponse[UserSchema])
@limiter.limit("100/minute")
async def get_me(
    request: Request,
    current_user: User = Depends(get_current_user)
):
    """
    Get the authenticated user's profile.

    Rate limit: 100 requests per minute
    """
    return DataResponse[UserSchema](data=UserSchema.model_validate(current_user))
