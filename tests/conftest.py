"""
Pytest fixtures for credential service tests.

Settings are pinned through the environment before any webauth module is
imported: a temp-file SQLite database (in-memory is per-connection) and the
minimum bcrypt cost so hashing stays fast.
"""

import os
import tempfile
from typing import AsyncGenerator

_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["JWT_ISSUER"] = "test-issuer"
os.environ["JWT_AUDIENCE"] = "test-audience"

from webauth.config import get_settings
get_settings.cache_clear()

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from webauth.database import async_session_maker, engine
from webauth.kernel.identity.account_kinds import JWT_ACCOUNT, SIMPLE_ACCOUNT
from webauth.kernel.identity.identity_service import IdentityService
from webauth.kernel.identity.jwt import TokenService
from webauth.kernel.models import Base


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp DB file after test run."""
    for suffix in ("", "-wal", "-shm"):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            os.unlink(path)


@pytest_asyncio.fixture
async def db_engine():
    """Create all tables for one test and drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker:
    return async_session_maker


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def token_service() -> TokenService:
    """Create a token service for tests."""
    return TokenService(
        secret_key="test-secret-key-for-testing-only-0123456789",
        issuer="test-issuer",
        audience="test-audience",
        expire_minutes=30,
    )


@pytest.fixture
def user_service(db_session: AsyncSession, token_service: TokenService) -> IdentityService:
    return IdentityService(db_session, SIMPLE_ACCOUNT, token_service=token_service)


@pytest.fixture
def jwt_user_service(db_session: AsyncSession, token_service: TokenService) -> IdentityService:
    return IdentityService(db_session, JWT_ACCOUNT, token_service=token_service)


@pytest.fixture
def alice() -> dict:
    """Registration data for a simple account."""
    return {
        "key": "Alice@Example.com",
        "password": "Secr3t!23",
        "first_name": "Alice",
        "last_name": "Liddell",
    }
