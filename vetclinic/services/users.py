"""
User Accounts
Registration, credential checks and admin-side account management
"""

import uuid
from typing import List, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.core.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    ValidationException,
)
from vetclinic.core.guard import Principal
from vetclinic.core.logging import get_logger
from vetclinic.core.permissions import Role
from vetclinic.core.security import get_password_hash, verify_password
from vetclinic.db.base import utcnow
from vetclinic.db.models import User

logger = get_logger(__name__)


class UserService:
    """Account operations on top of one async session"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, username: str, email: str, password: str, role: Role = Role.USER) -> User:
        """
        Create an account

        Raises:
            ConflictException: Username or email already taken
        """
        email = email.lower()
        result = await self.db.execute(
            select(User).where(or_(User.username == username, User.email == email))
        )
        existing = result.scalars().first()
        if existing:
            field = "username" if existing.username == username else "email"
            raise ConflictException(
                message=f"{field.capitalize()} already registered",
                details={field: username if field == "username" else email},
            )

        user = User(
            id=uuid.uuid4(),
            username=username,
            email=email,
            hashed_password=get_password_hash(password),
            role=role.value,
            is_active=True,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException(message="Username or email already registered")

        logger.info(f"User created: {user.username} ({user.role})")
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """
        Check a username/password pair and stamp the login time

        Raises:
            AuthenticationException: Unknown user, wrong password or inactive account
        """
        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for username: {username}")
            raise AuthenticationException(message="Invalid username or password")

        if not user.is_active:
            logger.warning(f"Login attempt on inactive account: {username}")
            raise AuthenticationException(message="Account is disabled")

        user.last_login_at = utcnow()
        await self.db.commit()

        logger.info(f"User logged in: {user.username}")
        return user

    async def get(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFoundException("User")
        return user

    async def list(self, limit: int = 50, offset: int = 0) -> Tuple[List[User], int]:
        total = await self.db.scalar(select(func.count()).select_from(User))
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), total or 0

    async def change_password(self, user_id: uuid.UUID, old_password: str, new_password: str) -> None:
        user = await self.get(user_id)

        if not verify_password(old_password, user.hashed_password):
            raise ValidationException(
                message="Incorrect current password",
                details={"field": "old_password"},
            )

        if verify_password(new_password, user.hashed_password):
            raise ValidationException(
                message="New password must be different from old password",
                details={"field": "new_password"},
            )

        user.hashed_password = get_password_hash(new_password)
        await self.db.commit()
        logger.info(f"Password changed for user: {user.username}")

    async def set_role(self, actor: Principal, user_id: uuid.UUID, role: Role) -> User:
        user = await self.get(user_id)

        if user.id == actor.id and role != Role.ADMIN:
            raise ValidationException(message="Administrators cannot demote themselves")

        user.role = role.value
        await self.db.commit()
        logger.info(f"Role of {user.username} set to {role.value} by {actor.username}")
        return user

    async def set_active(self, actor: Principal, user_id: uuid.UUID, is_active: bool) -> User:
        user = await self.get(user_id)

        if user.id == actor.id and not is_active:
            raise ValidationException(message="Administrators cannot deactivate themselves")

        user.is_active = is_active
        await self.db.commit()
        logger.info(f"User {user.username} {'activated' if is_active else 'deactivated'} by {actor.username}")
        return user

    async def delete(self, actor: Principal, user_id: uuid.UUID) -> None:
        user = await self.get(user_id)

        if user.id == actor.id:
            raise ValidationException(message="Administrators cannot delete themselves")

        await self.db.delete(user)
        await self.db.commit()
        logger.info(f"User {user.username} deleted by {actor.username}")

    async def count(self) -> int:
        return await self.db.scalar(select(func.count()).select_from(User)) or 0

    async def ensure_admin(self, username: str, email: str, password: str) -> User:
        """
        Create the bootstrap administrator, or restore an existing account to it

        Self-registration only ever yields the user role, so the first admin
        has to come from here.
        """
        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()

        if user is None:
            return await self.create(username, email, password, role=Role.ADMIN)

        user.role = Role.ADMIN.value
        user.is_active = True
        user.hashed_password = get_password_hash(password)
        await self.db.commit()
        logger.info(f"Admin account restored: {user.username}")
        return user
