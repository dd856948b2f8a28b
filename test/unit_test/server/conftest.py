from typing import AsyncGenerator, Callable, Dict

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from commerflow.core.database.entities import User
from commerflow.core.security import create_access_token


def bearer(user: User) -> Dict[str, str]:
    token = create_access_token(user.id, {"email": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client whose requests each get a session on the test database."""
    from commerflow.core.database import get_session
    from commerflow.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as request_session:
            yield request_session

    app.dependency_overrides[get_session] = get_session_override

    # ASGITransport does not send lifespan events, so startup never touches the real engine
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_headers() -> Callable[[User], Dict[str, str]]:
    return bearer


@pytest_asyncio.fixture
async def customer_headers(customer) -> Dict[str, str]:
    return bearer(customer)


@pytest_asyncio.fixture
async def admin_headers(admin_user) -> Dict[str, str]:
    return bearer(admin_user)
