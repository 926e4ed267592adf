"""Unit tests for the shared gateway lifecycle in src.depends and the app lifespan"""

import pytest
from unittest.mock import AsyncMock, MagicMock

import src.depends as depends
from config import ApplicationConfig
from src.adapter.services.http_authorization_gateway import HttpAuthorizationGateway
from src.api.app import create_app


class _NoSchemaConfig(ApplicationConfig):
    AUTO_CREATE_SCHEMA = False


@pytest.fixture
def reset_gateway(monkeypatch):
    monkeypatch.setattr(depends, "_gateway", None)


@pytest.mark.asyncio
class TestCloseAuthorizationGateway:

    async def test_closes_and_forgets_shared_gateway(self, reset_gateway):
        """
        Given: The lazily built gateway owns an HTTP client
        When: close_authorization_gateway is awaited
        Then: The client is closed and the next lookup builds a fresh gateway
        """
        # Arrange
        gateway = HttpAuthorizationGateway("https://gateway.test/authorize", timeout=1.0)
        depends._gateway = gateway

        # Act
        await depends.close_authorization_gateway()

        # Assert
        assert gateway._client.is_closed
        assert depends._gateway is None

    async def test_noop_when_gateway_never_built(self, reset_gateway):
        await depends.close_authorization_gateway()

        assert depends._gateway is None

    async def test_app_shutdown_closes_gateway(self, reset_gateway):
        gateway = MagicMock()
        gateway.close = AsyncMock()
        app = create_app(_NoSchemaConfig)

        async with app.router.lifespan_context(app):
            depends._gateway = gateway
            gateway.close.assert_not_awaited()

        gateway.close.assert_awaited_once()
        assert depends._gateway is None
