"""Shared test fixtures for pytest"""
import os
import tempfile
from dataclasses import dataclass
from datetime import timedelta
from unittest.mock import AsyncMock

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production-0123456789abcdef"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="workboard-tests-")
os.environ["REDIS_ENABLED"] = "false"
os.environ["SMTP_FROM_EMAIL"] = "noreply@example.com"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.pool import StaticPool

from main import app
from src.application.services.session_manager import (CLAIM_COMPANY_ID,
                                                      CLAIM_EMAIL, CLAIM_ROLE,
                                                      CLAIM_ROLE_ID,
                                                      CLAIM_USER_ID)
from src.domain.entities.actor import Actor
from src.domain.enums import RoleId
from src.infrastructure.cache.local_cache import LocalTTLCache
from src.infrastructure.external.storage.local_storage import \
    LocalStorageService
from src.infrastructure.persistence.database import (Base, get_db,
                                                     get_db_transactional)
from src.infrastructure.persistence.models import Company, Role, User
from src.infrastructure.security.jwt import create_access_token
from src.infrastructure.security.password import get_password_hash
from src.presentation.api.dependencies import (get_cache_service,
                                               get_notifier,
                                               get_storage_service)
from src.presentation.middleware.rate_limit import limiter

TEST_PASSWORD = "Str0ng!Pass"

ROLE_NAMES = {
    RoleId.SUPER_ADMIN: "SuperAdmin",
    RoleId.COMPANY_ADMIN: "CompanyAdmin",
    RoleId.EMPLOYEE: "Employee",
    RoleId.DEPARTMENT_HEAD: "DepartmentHead",
}


@dataclass(frozen=True)
class SeededUser:
    id: int
    email: str
    role_id: int | None
    company_id: int | None

    @property
    def actor(self) -> Actor:
        return Actor(
            user_id=self.id,
            role_id=self.role_id,
            company_id=self.company_id,
            email=self.email,
        )


@dataclass(frozen=True)
class Seed:
    """Two companies (7 and 9) and one user per role"""

    super_admin: SeededUser
    admin_7: SeededUser
    head_7: SeededUser
    employee_7: SeededUser
    other_employee_7: SeededUser
    admin_9: SeededUser
    employee_9: SeededUser


@pytest.fixture(scope="session")
def password_hash() -> str:
    """One bcrypt hash shared by every seeded user (hashing is slow on purpose)"""
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def test_engine():
    """In-memory SQLite engine; StaticPool keeps one connection so the schema survives"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


@pytest.fixture
async def test_db(session_factory):
    """Create test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seed(test_db, password_hash) -> Seed:
    """Companies 7 and 9, the four platform roles, and users in each role"""
    test_db.add_all(
        [
            Company(id=7, name="Acme", is_active=True),
            Company(id=9, name="Globex", is_active=True),
        ]
    )
    test_db.add_all(
        [Role(id=int(role_id), name=name, is_admin=False) for role_id, name in ROLE_NAMES.items()]
    )
    await test_db.flush()

    rows = [
        (1, "root@example.com", RoleId.SUPER_ADMIN, None),
        (2, "admin@acme.example.com", RoleId.COMPANY_ADMIN, 7),
        (3, "head@acme.example.com", RoleId.DEPARTMENT_HEAD, 7),
        (4, "alice@acme.example.com", RoleId.EMPLOYEE, 7),
        (5, "bob@acme.example.com", RoleId.EMPLOYEE, 7),
        (6, "admin@globex.example.com", RoleId.COMPANY_ADMIN, 9),
        (7, "carol@globex.example.com", RoleId.EMPLOYEE, 9),
    ]
    test_db.add_all(
        [
            User(
                id=user_id,
                email=email,
                full_name=email.split("@")[0].title(),
                password_hash=password_hash,
                is_active=True,
                role_id=int(role_id),
                company_id=company_id,
            )
            for user_id, email, role_id, company_id in rows
        ]
    )
    await test_db.commit()

    users = [SeededUser(user_id, email, int(role_id), company_id) for user_id, email, role_id, company_id in rows]
    return Seed(*users)


@pytest.fixture
def bearer():
    """Build Authorization headers for a seeded user"""

    def _bearer(user: SeededUser, expires_delta: timedelta | None = None) -> dict[str, str]:
        claims = {
            CLAIM_USER_ID: user.id,
            CLAIM_EMAIL: user.email,
            CLAIM_ROLE: ROLE_NAMES.get(user.role_id, "User"),
            CLAIM_ROLE_ID: user.role_id,
            CLAIM_COMPANY_ID: user.company_id,
        }
        token = create_access_token(claims, expires_delta=expires_delta)
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(storage_root=str(tmp_path / "uploads"), max_upload_size=1024 * 1024)


@pytest.fixture
def notifier():
    fake = AsyncMock()
    fake.send_password_reset = AsyncMock(return_value=True)
    return fake


@pytest.fixture
async def client(session_factory, storage, notifier):
    """HTTP client for API testing"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    cache = LocalTTLCache()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_transactional] = override_get_db_transactional
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_cache_service] = lambda: cache
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
