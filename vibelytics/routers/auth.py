"""
Authentication router.

This module contains signup and signin endpoints. Both return a bearer
token and the public user profile.
"""

from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.config import settings
from vibelytics.core.exceptions import ValidationError
from vibelytics.database import get_db
from vibelytics.schemas.auth import AuthResponse, SigninRequest, User as UserSchema, UserCreate
from vibelytics.services import accounts
from vibelytics.services.identity import GoogleIdentityVerifier, get_identity_verifier
from vibelytics.utils.security import create_access_token

router = APIRouter(
    tags=["authentication"],
    responses={401: {"description": "Unauthorized"}},
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/hour")
async def signup(
    request: Request,
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user and return an access token.

    Rate limit: 10 requests per hour

    Raises:
        ValidationError: Missing fields or email already registered (400)
    """
    new_user = await accounts.register_user(db, user_in)
    token = create_access_token(new_user.id)

    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserSchema.model_validate(new_user),
    )


@router.post("/signin", response_model=AuthResponse)
@limiter.limit("20/minute")
async def signin(
    request: Request,
    credentials: SigninRequest,
    db: AsyncSession = Depends(get_db),
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
):
    """
    Sign in with email + password or with a Google ID token.

    Rate limit: 20 requests per minute

    Raises:
        ValidationError: Neither credential form supplied (400)
        InvalidCredentials: Bad email/password or rejected federated token (401)
    """
    if credentials.federated_token:
        user_obj = await accounts.authenticate_federated(
            db, verifier, token=credentials.federated_token
        )
    elif credentials.email and credentials.password:
        user_obj = await accounts.authenticate_password(
            db, email=credentials.email, password=credentials.password
        )
    else:
        raise ValidationError("Please provide email and password")

    token = create_access_token(user_obj.id)

    return AuthResponse(
        message="Sign in successful",
        token=token,
        user=UserSchema.model_validate(user_obj),
    )
