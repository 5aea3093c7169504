"""Service test fixtures: fake mail transport, email service, FastAPI test client.

Invariants:
    - No test opens a network connection: the transport is an AsyncMock
    - app.state.email_service is restored after each client test

Design Decisions:
    - ASGITransport does not run lifespan; fixtures set app.state directly
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.services.email_service import EmailService


@pytest.fixture
def fake_transport():
    transport = AsyncMock()
    transport.send = AsyncMock(return_value="<msg-1@x.com>")
    return transport


@pytest.fixture
def email_service(fake_transport):
    return EmailService(fake_transport, "noreply@x.com", "Notifications")


@pytest.fixture
async def client(email_service):
    """FastAPI test client with the fake-backed email service installed."""
    original = getattr(app.state, "email_service", None)
    app.state.email_service = email_service
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.email_service = original
