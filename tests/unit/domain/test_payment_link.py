"""Unit tests for PaymentLink domain entity"""

import pytest
from datetime import timedelta
from decimal import Decimal
from sqlalchemy import DateTime

from src.domain.errors import ErrorCode
from src.domain.payment_link import LinkStatus, PaymentLink


class TestPaymentLinkCreation:
    """Test PaymentLink entity creation"""

    def test_defaults(self, make_link):
        """Test a fresh link is active with no uses"""
        # Arrange & Act
        link = make_link()

        # Assert
        assert link.current_uses == 0
        assert link.is_active is True
        assert link.amount == Decimal("25.00")
        assert link.remaining_uses() is None


class TestPaymentLinkDerivedStatus:
    """Test status derivation from stored fields"""

    def test_active_when_no_limits(self, make_link, now):
        link = make_link()

        assert link.status_at(now) == LinkStatus.ACTIVE
        assert link.eligibility_error(now) is None

    def test_inactive_takes_precedence(self, make_link, now):
        """Test an inactive link reports inactive even when also expired and exhausted"""
        # Arrange
        link = make_link(
            is_active=False,
            expires_at=now - timedelta(days=1),
            max_uses=1,
            current_uses=1,
        )

        # Act & Assert
        assert link.status_at(now) == LinkStatus.INACTIVE
        assert link.eligibility_error(now) == ErrorCode.LINK_INACTIVE

    def test_expired_one_second_ago(self, make_link, now):
        link = make_link(expires_at=now - timedelta(seconds=1))

        assert link.is_expired(now) is True
        assert link.eligibility_error(now) == ErrorCode.LINK_EXPIRED

    def test_expiry_equal_to_now_is_expired(self, make_link, now):
        """Test expires_at must be strictly in the future to redeem"""
        link = make_link(expires_at=now)

        assert link.status_at(now) == LinkStatus.EXPIRED

    def test_future_expiry_is_active(self, make_link, now):
        link = make_link(expires_at=now + timedelta(hours=1))

        assert link.status_at(now) == LinkStatus.ACTIVE

    def test_exhausted_when_uses_reach_max(self, make_link, now):
        # Arrange
        link = make_link(max_uses=3, current_uses=3)

        # Act & Assert
        assert link.is_exhausted() is True
        assert link.remaining_uses() == 0
        assert link.eligibility_error(now) == ErrorCode.LINK_EXHAUSTED

    def test_remaining_uses(self, make_link):
        link = make_link(max_uses=5, current_uses=2)

        assert link.is_exhausted() is False
        assert link.remaining_uses() == 3

    def test_expired_reported_before_exhausted(self, make_link, now):
        link = make_link(expires_at=now - timedelta(minutes=5), max_uses=1, current_uses=1)

        assert link.status_at(now) == LinkStatus.EXPIRED


class TestPaymentLinkTable:
    """Test the mapped table definition"""

    @pytest.mark.parametrize("column", ["created_at", "updated_at", "expires_at"])
    def test_timestamps_are_naive_datetimes(self, column):
        mapped = PaymentLink.__table__.c[column]

        assert isinstance(mapped.type, DateTime)
        assert mapped.type.timezone is False

    def test_created_and_updated_are_not_null(self):
        assert PaymentLink.__table__.c.created_at.nullable is False
        assert PaymentLink.__table__.c.updated_at.nullable is False
