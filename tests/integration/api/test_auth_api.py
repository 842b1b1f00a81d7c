"""
Integration Tests for Authentication Endpoints
"""

import pytest

from tests.conftest import TEST_PASSWORD, auth_headers
from vetclinic.core.permissions import Role, permissions_for

REGISTRATION = {
    "username": "new_user",
    "email": "new.user@example.com",
    "password": "secure_password_1",
}


class TestRegister:
    """Test POST /api/v1/auth/register"""

    @pytest.mark.asyncio
    async def test_register_success(self, client):
        """Test self-registration returns a token for a user-role account"""
        response = await client.post("/api/v1/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "Bearer"
        assert data["access_token"]
        assert data["user"]["username"] == "new_user"
        assert data["user"]["role"] == "user"

    @pytest.mark.asyncio
    async def test_register_cannot_choose_role(self, client):
        """Test a requested role is ignored"""
        response = await client.post("/api/v1/auth/register", json=dict(REGISTRATION, role="admin"))

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "user"

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client):
        """Test usernames and emails are unique"""
        await client.post("/api/v1/auth/register", json=REGISTRATION)

        same_username = await client.post(
            "/api/v1/auth/register", json=dict(REGISTRATION, email="other@example.com")
        )
        same_email = await client.post(
            "/api/v1/auth/register", json=dict(REGISTRATION, username="other_user")
        )

        assert same_username.status_code == 409
        assert same_email.status_code == 409

    @pytest.mark.asyncio
    async def test_register_short_password(self, client):
        """Test passwords under 8 characters are rejected"""
        response = await client.post("/api/v1/auth/register", json=dict(REGISTRATION, password="short"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"


class TestLogin:
    """Test POST /api/v1/auth/login"""

    @pytest.mark.asyncio
    async def test_login_success(self, client, staff_user):
        """Test valid credentials return a working token"""
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": staff_user.username, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["role"] == "staff"
        assert data["user"]["last_login_at"] is not None

        me = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert me.status_code == 200

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, staff_user):
        """Test a wrong password is rejected"""
        response = await client.post(
            "/api/v1/auth/login",
            json={"username": staff_user.username, "password": "wrong_password"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "authentication_error"

    @pytest.mark.asyncio
    async def test_login_inactive(self, client, make_user):
        """Test deactivated accounts cannot log in"""
        user = await make_user("staff", is_active=False)

        response = await client.post(
            "/api/v1/auth/login",
            json={"username": user.username, "password": TEST_PASSWORD},
        )

        assert response.status_code == 401


class TestCurrentUser:
    """Test GET /api/v1/auth/me"""

    @pytest.mark.asyncio
    async def test_me_lists_role_permissions(self, client, basic_user, user_headers):
        """Test the current user carries exactly the role's permissions"""
        response = await client.get("/api/v1/auth/me", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(basic_user.id)
        assert data["permissions"] == sorted(p.value for p in permissions_for(Role.USER))

    @pytest.mark.asyncio
    async def test_me_without_token(self, client):
        """Test missing credentials return 401"""
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_garbage_token(self, client):
        """Test unverifiable tokens return 401"""
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_inactive_principal(self, client, make_user):
        """Test a valid token of a deactivated account is rejected as inactive"""
        user = await make_user("admin", is_active=False)

        response = await client.get("/api/v1/auth/me", headers=auth_headers(user))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "inactive_principal"


class TestChangePassword:
    """Test POST /api/v1/auth/change-password"""

    @pytest.mark.asyncio
    async def test_change_password(self, client, basic_user, user_headers):
        """Test the new password works and the old one no longer does"""
        response = await client.post(
            "/api/v1/auth/change-password",
            json={"old_password": TEST_PASSWORD, "new_password": "brand_new_password"},
            headers=user_headers,
        )
        assert response.status_code == 200

        old = await client.post(
            "/api/v1/auth/login",
            json={"username": basic_user.username, "password": TEST_PASSWORD},
        )
        new = await client.post(
            "/api/v1/auth/login",
            json={"username": basic_user.username, "password": "brand_new_password"},
        )
        assert old.status_code == 401
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, client, user_headers):
        """Test the current password must match"""
        response = await client.post(
            "/api/v1/auth/change-password",
            json={"old_password": "not_my_password", "new_password": "brand_new_password"},
            headers=user_headers,
        )

        assert response.status_code == 400
