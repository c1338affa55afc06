"""
Security utilities.

This module contains password hashing and the bearer token primitives used
by the authentication gate.
"""

import enum
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from vibelytics.config import settings
from vibelytics.core.exceptions import ConfigurationError
from vibelytics.utils.dates import utcnow

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenStatus(str, enum.Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of ``verify_token``; ``user_id`` is set only when VALID."""

    status: TokenStatus
    user_id: Optional[int] = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


def ensure_signing_secret() -> str:
    """
    Return the token signing secret.

    Raises:
        ConfigurationError: If JWT_SECRET is not set
    """
    if not settings.JWT_SECRET:
        raise ConfigurationError(detail="JWT_SECRET is not configured")
    return settings.JWT_SECRET


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed bearer token for a user.

    Args:
        user_id: ID of the authenticated user
        expires_delta: Token lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT token

    Raises:
        ConfigurationError: If JWT_SECRET is not set
    """
    secret = ensure_signing_secret()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    now = utcnow()
    to_encode = {"sub": str(user_id), "iat": now, "exp": now + expires_delta}
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> TokenVerification:
    """
    Verify signature and expiry of a bearer token.

    Args:
        token: JWT token to verify

    Returns:
        TokenVerification tagged VALID (with user_id), EXPIRED or MALFORMED

    Raises:
        ConfigurationError: If JWT_SECRET is not set
    """
    secret = ensure_signing_secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        return TokenVerification(TokenStatus.EXPIRED)
    except JWTError:
        return TokenVerification(TokenStatus.MALFORMED)

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        return TokenVerification(TokenStatus.MALFORMED)
    return TokenVerification(TokenStatus.VALID, user_id)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a password against its hash.

    Accounts without a password (Google-only) never match.
    """
    if not hashed_password:
        # Burn the same time as a real comparison.
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt."""
    return pwd_context.hash(password)
