"""
User CRUD operations.

This module contains CRUD operations specific to user management.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vibelytics.core.exceptions import PersistenceError
from vibelytics.crud.base import CRUDBase
from vibelytics.models.user import User
from vibelytics.schemas.auth import UserCreate
from vibelytics.utils.logging_config import get_logger
from vibelytics.utils.security import get_password_hash

logger = get_logger(__name__)


class CRUDUser(CRUDBase[User, UserCreate]):
    """
    CRUD operations for User model.
    """

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> User:
        """
        Create a new user with a hashed password.

        Args:
            db: Database session
            obj_in: User creation data

        Returns:
            Created user instance

        Raises:
            IntegrityError: If the email is already registered
        """
        db_obj = User(
            name=obj_in.name,
            email=obj_in.email,
            hashed_password=get_password_hash(obj_in.password),
        )
        db.add(db_obj)
        return await self.save(db, db_obj)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            db: Database session
            email: User email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalars().first()

    async def get_by_google_id(self, db: AsyncSession, *, google_id: str) -> Optional[User]:
        """
        Get user by linked Google account id.

        Args:
            db: Database session
            google_id: Google ``sub`` claim

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.google_id == google_id))
        return result.scalars().first()

    async def get_or_create_federated(
        self,
        db: AsyncSession,
        *,
        google_id: str,
        email: str,
        name: str,
    ) -> User:
        """
        Resolve a Google identity to a local user.

        Lookup order is google_id, then email (linking the google_id to the
        existing account), then a new account. A unique-constraint violation
        means a concurrent request won the race; its row is returned instead.

        Args:
            db: Database session
            google_id: Google ``sub`` claim
            email: Verified email from the ID token
            name: Display name from the ID token

        Returns:
            The resolved User
        """
        email = email.strip().lower()

        user_obj = await self.get_by_google_id(db, google_id=google_id)
        if user_obj:
            return user_obj

        user_obj = await self.get_by_email(db, email=email)
        if user_obj:
            if user_obj.google_id is None:
                user_obj.google_id = google_id
                try:
                    return await self.save(db, user_obj)
                except IntegrityError:
                    logger.info(f"google_id {google_id} linked concurrently, re-reading")
                    return await self._reload_federated(db, google_id=google_id, email=email)
            return user_obj

        db_obj = User(name=name, email=email, google_id=google_id, hashed_password=None)
        db.add(db_obj)
        try:
            return await self.save(db, db_obj)
        except IntegrityError:
            logger.info(f"Concurrent first sign-in for google_id {google_id}, re-reading")
            return await self._reload_federated(db, google_id=google_id, email=email)

    async def _reload_federated(self, db: AsyncSession, *, google_id: str, email: str) -> User:
        user_obj = await self.get_by_google_id(db, google_id=google_id)
        if user_obj is None:
            user_obj = await self.get_by_email(db, email=email)
        if user_obj is None:
            raise PersistenceError(
                "Could not resolve federated account",
                detail=f"google_id {google_id} conflicted but no matching row was found",
            )
        return user_obj


# Create instance of CRUDUser
user = CRUDUser(User)
