"""
Pytest Configuration and Fixtures
Shared fixtures and configuration for all tests
"""

import os
import uuid

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-vetclinic-0123456789abcdef")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("ENABLE_METRICS", "true")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from vetclinic.core.security import create_access_token, get_password_hash
from vetclinic.db import session as db_session
from vetclinic.db.base import Base
from vetclinic.db.models import User
from vetclinic.main import app

TEST_PASSWORD = "test_password_123"


# ============================================
# PYTEST CONFIGURATION
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (medium speed)"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add default markers"""
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


# ============================================
# DATABASE FIXTURES
# ============================================

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Fresh SQLite database per test, wired into the application's session factory"""
    await db_session.init_db(f"sqlite+aiosqlite:///{tmp_path / 'vetclinic_test.db'}")

    yield db_session.engine

    async with db_session.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await db_session.close_db()


@pytest_asyncio.fixture
async def db(db_engine):
    """Session for arranging and inspecting data directly"""
    async with db_session.async_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine):
    """HTTP client against the ASGI app"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================
# USER FIXTURES
# ============================================

def auth_headers(user: User) -> dict:
    """Authorization header carrying a fresh access token for the user"""
    token = create_access_token({"sub": str(user.id), "username": user.username, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db):
    """Factory creating committed users"""

    async def _make_user(role: str = "user", is_active: bool = True, password: str = TEST_PASSWORD) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            id=uuid.uuid4(),
            username=f"{role}_{suffix}",
            email=f"{role}_{suffix}@example.com",
            hashed_password=get_password_hash(password),
            role=role,
            is_active=is_active,
        )
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest_asyncio.fixture
async def admin_user(make_user):
    return await make_user("admin")


@pytest_asyncio.fixture
async def staff_user(make_user):
    return await make_user("staff")


@pytest_asyncio.fixture
async def basic_user(make_user):
    return await make_user("user")


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def staff_headers(staff_user):
    return auth_headers(staff_user)


@pytest.fixture
def user_headers(basic_user):
    return auth_headers(basic_user)


# ============================================
# PAYLOAD FIXTURES
# ============================================

@pytest.fixture
def sample_pdf():
    """Minimal PDF bytes"""
    return b"%PDF-1.4\n1 0 obj\n<<\n/Type /Catalog\n/Pages 2 0 R\n>>\nendobj\n"


@pytest.fixture
def make_pdf():
    """Factory for PDF payloads of a given size"""

    def _make_pdf(size_bytes: int, marker: bytes = b"") -> bytes:
        header = b"%PDF-1.4\n" + marker
        return header + b"0" * max(0, size_bytes - len(header))

    return _make_pdf
