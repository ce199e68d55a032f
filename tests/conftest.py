"""Shared test fixtures."""

import os

# Settings require a JWT secret; tests sign and verify with this one
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402

from config.settings import settings  # noqa: E402
from src.lt_common.enums import AccountRole  # noqa: E402
from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_token():
    """Sign access tokens the way the terminal auth service does."""

    def _make(
        user_id: str,
        role: AccountRole | str,
        expires_in: timedelta = timedelta(minutes=30),
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "role": AccountRole(role).value,
            "type": "access",
            "iat": now,
            "exp": now + expires_in,
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    return _make
