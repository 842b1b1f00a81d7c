"""
Unit Tests for User Accounts
Tests for vetclinic/services/users.py
"""

import pytest

from vetclinic.core.exceptions import AuthenticationException, ConflictException, ValidationException
from vetclinic.core.guard import Principal
from vetclinic.core.permissions import Role
from vetclinic.core.security import verify_password
from vetclinic.services.users import UserService


class TestUserService:
    """Test account operations"""

    @pytest.mark.asyncio
    async def test_create_defaults_to_user_role(self, db):
        """Test new accounts get the user role and a hashed password"""
        user = await UserService(db).create("alice", "Alice@Example.com", "password_123")

        assert user.role == "user"
        assert user.email == "alice@example.com"
        assert user.hashed_password != "password_123"
        assert verify_password("password_123", user.hashed_password)

    @pytest.mark.asyncio
    async def test_create_conflict(self, db):
        """Test usernames are unique"""
        service = UserService(db)
        await service.create("alice", "alice@example.com", "password_123")

        with pytest.raises(ConflictException) as exc_info:
            await service.create("alice", "other@example.com", "password_123")
        assert exc_info.value.details == {"username": "alice"}

    @pytest.mark.asyncio
    async def test_authenticate(self, db):
        """Test credential checks stamp the login time"""
        service = UserService(db)
        await service.create("alice", "alice@example.com", "password_123")

        user = await service.authenticate("alice", "password_123")

        assert user.last_login_at is not None
        with pytest.raises(AuthenticationException):
            await service.authenticate("alice", "wrong_password")
        with pytest.raises(AuthenticationException):
            await service.authenticate("nobody", "password_123")

    @pytest.mark.asyncio
    async def test_admin_cannot_lock_themselves_out(self, db, admin_user):
        """Test self-demotion, self-deactivation and self-deletion are refused"""
        service = UserService(db)
        actor = Principal.from_user(admin_user)

        with pytest.raises(ValidationException):
            await service.set_role(actor, admin_user.id, Role.STAFF)
        with pytest.raises(ValidationException):
            await service.set_active(actor, admin_user.id, False)
        with pytest.raises(ValidationException):
            await service.delete(actor, admin_user.id)

    @pytest.mark.asyncio
    async def test_ensure_admin_creates(self, db):
        """Test the bootstrap admin is created when missing"""
        user = await UserService(db).ensure_admin("root", "root@example.com", "bootstrap_pw")

        assert user.role == "admin"
        assert user.is_active is True

    @pytest.mark.asyncio
    async def test_ensure_admin_restores(self, db, make_user):
        """Test an existing account is promoted, reactivated and given the new password"""
        existing = await make_user("user", is_active=False)

        user = await UserService(db).ensure_admin(existing.username, existing.email, "bootstrap_pw")

        assert user.id == existing.id
        assert user.role == "admin"
        assert user.is_active is True
        assert verify_password("bootstrap_pw", user.hashed_password)
