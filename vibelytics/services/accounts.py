"""
Account operations behind signup and signin.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.core.exceptions import InvalidCredentials, ValidationError
from vibelytics.crud.user import user as user_crud
from vibelytics.models.user import User
from vibelytics.schemas.auth import UserCreate
from vibelytics.services.identity import GoogleIdentityVerifier
from vibelytics.utils.logging_config import get_logger
from vibelytics.utils.security import ensure_signing_secret, verify_password

logger = get_logger(__name__)

DUPLICATE_EMAIL = "User with this email already exists"


async def register_user(db: AsyncSession, user_in: UserCreate) -> User:
    """
    Create a local account.

    Raises:
        ValidationError: If the email is already registered
        ConfigurationError: If JWT_SECRET is not set; nothing is written
    """
    ensure_signing_secret()
    if await user_crud.get_by_email(db, email=user_in.email):
        raise ValidationError(DUPLICATE_EMAIL)
    try:
        new_user = await user_crud.create(db, obj_in=user_in)
    except IntegrityError as exc:
        # Lost a race with a concurrent signup for the same email.
        raise ValidationError(DUPLICATE_EMAIL) from exc
    logger.info(f"Registered user {new_user.id}")
    return new_user


async def authenticate_password(db: AsyncSession, *, email: str, password: str) -> User:
    """
    Check email + password.

    Raises:
        InvalidCredentials: On any mismatch, without saying which
    """
    user_obj = await user_crud.get_by_email(db, email=email)
    hashed = user_obj.hashed_password if user_obj else None
    if not verify_password(password, hashed) or user_obj is None:
        raise InvalidCredentials()
    return user_obj


async def authenticate_federated(
    db: AsyncSession, verifier: GoogleIdentityVerifier, *, token: str
) -> User:
    """
    Verify a Google ID token and resolve it to a local account.

    Raises:
        InvalidCredentials: If the token is rejected
        ConfigurationError: If JWT_SECRET is not set; nothing is written
    """
    ensure_signing_secret()
    identity = await verifier.verify(token)
    user_obj = await user_crud.get_or_create_federated(
        db,
        google_id=identity.subject,
        email=identity.email,
        name=identity.name,
    )
    logger.info(f"Federated sign-in for user {user_obj.id}")
    return user_obj
