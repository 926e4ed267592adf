"""Shared fixtures for unit tests"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.payment_link import PaymentLink

NOW = datetime(2030, 6, 15, 12, 0, 0)


@pytest.fixture
def now():
    """Fixed evaluation time"""
    return NOW


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_link():
    """Factory for PaymentLink entities with sensible defaults"""
    def _make(**overrides):
        data = {
            "id": 1,
            "link_token": "tok_abc123",
            "owner_id": "merchant_1",
            "amount": Decimal("25.00"),
            "currency": "USD",
            "description": "Workshop ticket",
            "expires_at": None,
            "max_uses": None,
            "current_uses": 0,
            "is_active": True,
            "created_at": NOW,
            "updated_at": NOW,
        }
        data.update(overrides)
        return PaymentLink(**data)

    return _make
