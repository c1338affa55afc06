"""
Authentication schemas.

This module contains Pydantic schemas for signup, signin and user payloads.
"""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from vibelytics.schemas.base import BaseSchema, IDSchema


class UserBase(BaseSchema):
    """Base user schema."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserCreate(UserBase):
    """Schema for creating a new user (signup body)."""
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return v


class User(UserBase, IDSchema):
    """Public user profile."""


class SigninRequest(BaseSchema):
    """
    Signin body.

    Either ``email`` + ``password`` or ``federatedToken`` (a Google ID token).
    """
    email: Optional[str] = None
    password: Optional[str] = None
    federated_token: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


class AuthResponse(BaseSchema):
    """Response schema for signup and signin."""
    success: bool = True
    message: str
    token: str
    user: User
