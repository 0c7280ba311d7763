"""
DP Travels Backend Tests
Shared fixtures
"""

import pytest
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.rate_limiter import limiter
from app.services.email_service import MailDispatcher, get_mail_dispatcher
from app.services.mail_providers import MockMailProvider


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def sleeps():
    """Delays requested by the dispatcher, recorded instead of slept."""
    return []


@pytest.fixture
def make_dispatcher(sleeps):
    def factory(provider, max_attempts=2, retry_delay=2.0):
        async def fake_sleep(seconds):
            sleeps.append(seconds)

        return MailDispatcher(
            provider=provider,
            sender="bookings@dptravels.in",
            recipient="owner@dptravels.in",
            max_attempts=max_attempts,
            retry_delay=retry_delay,
            sleep=fake_sleep,
        )
    return factory


@pytest.fixture
def mail_provider():
    return MockMailProvider()


@pytest.fixture
def use_dispatcher(make_dispatcher):
    """Route the app's mail through a test dispatcher."""
    def install(provider):
        dispatcher = make_dispatcher(provider)
        app.dependency_overrides[get_mail_dispatcher] = lambda: dispatcher
        return dispatcher

    yield install
    app.dependency_overrides.pop(get_mail_dispatcher, None)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture
async def client():
    """Create test client"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
