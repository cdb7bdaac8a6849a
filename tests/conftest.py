"""Shared test fixtures for tokengate."""

import logging
import os

# Set test JWT secret before any import triggers Settings() validation.
os.environ.setdefault("TOKENGATE_JWT_SECRET_KEY", "test-secret-for-unit-tests-0123456789abcdef")

from collections.abc import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from tests.helpers.token_factory import TEST_SECRET  # noqa: E402
from tokengate.auth.authenticator import Authenticator, create_authenticator  # noqa: E402
from tokengate.auth.claims import UserInfo  # noqa: E402
from tokengate.auth.revocation import RedisRevocationStore  # noqa: E402
from tokengate.config import Settings  # noqa: E402
from tokengate.utils.logging import HANDLER_NAME  # noqa: E402


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo handlers and levels installed by setup_logging."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
    root.setLevel(level)

# ---------------------------------------------------------------------------
# Settings / identity
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings() -> Settings:
    return Settings(jwt_secret_key=TEST_SECRET)


@pytest.fixture()
def user() -> UserInfo:
    return UserInfo(
        user_id="user-123",
        user_name="alice",
        account="alice@example.com",
        roles=["admin", "analyst"],
        domain="example.com",
        attributes={"tenant": "t-1", "mfa": True},
    )


# ---------------------------------------------------------------------------
# Revocation stores
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture()
async def fake_redis() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
    """fakeredis instance that behaves like redis.asyncio.Redis."""
    redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis
    await redis.aclose()


@pytest.fixture()
def store(fake_redis) -> RedisRevocationStore:
    return RedisRevocationStore(fake_redis)


@pytest.fixture()
def mock_store() -> AsyncMock:
    """Revocation store double for asserting on store calls."""
    store = AsyncMock()
    store.exists = AsyncMock(return_value=False)
    store.set_with_ttl = AsyncMock()
    store.close = AsyncMock()
    return store


# ---------------------------------------------------------------------------
# Authenticator
# ---------------------------------------------------------------------------


@pytest.fixture()
def authenticator(store, settings) -> Authenticator:
    return create_authenticator(store, settings=settings)
