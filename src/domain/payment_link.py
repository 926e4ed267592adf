"""Payment Link Domain Entity

A merchant-issued, optionally capped and time-limited link that anonymous
payers redeem through card authorization.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime, Integer, Numeric, String, Text
from src.domain.base import BaseModel
from src.domain.errors import ErrorCode


class LinkStatus(str, Enum):
    """Derived link status, never stored"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"


_INELIGIBLE_ERRORS = {
    LinkStatus.INACTIVE: ErrorCode.LINK_INACTIVE,
    LinkStatus.EXPIRED: ErrorCode.LINK_EXPIRED,
    LinkStatus.EXHAUSTED: ErrorCode.LINK_EXHAUSTED,
}


class PaymentLink(BaseModel, table=True):
    """
    Payment Link - Redeemable payment request issued by an owner

    Domain Rules:
    - link_token is the public identity and is unique
    - amount > 0; amount, currency and owner_id never change after creation
    - current_uses <= max_uses whenever max_uses is set
    - current_uses is only incremented by the redemption coordinator's
      conditional update; description and is_active are owner-editable
    - Links are never deleted, only deactivated
    """

    __tablename__ = "payment_links"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        CheckConstraint("current_uses >= 0", name="current_uses_non_negative"),
        CheckConstraint("max_uses IS NULL OR max_uses >= 1", name="max_uses_positive"),
        CheckConstraint("max_uses IS NULL OR current_uses <= max_uses", name="uses_within_limit"),
        Index("ix_payment_links_owner_created", "owner_id", "created_at"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
        description="Internal link identifier (auto-increment)"
    )

    link_token: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True, index=True),
        description="Opaque public token used in the redemption URL"
    )

    owner_id: str = Field(
        sa_column=Column(String(255), nullable=False, index=True),
        description="Owner (merchant) identifier"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Amount charged per redemption (precision: 12,2)"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Optional description shown to payers"
    )

    expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Expiry timestamp in UTC (None = never expires)"
    )

    max_uses: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
        description="Maximum successful redemptions (None = unlimited)"
    )

    current_uses: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Successful redemptions so far"
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
        description="Owner-controlled activation flag"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Link creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Last update timestamp"
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def is_exhausted(self) -> bool:
        return self.max_uses is not None and self.current_uses >= self.max_uses

    def status_at(self, now: datetime) -> LinkStatus:
        """Derive the link status; inactive wins over expired, expired over exhausted"""
        if not self.is_active:
            return LinkStatus.INACTIVE
        if self.is_expired(now):
            return LinkStatus.EXPIRED
        if self.is_exhausted():
            return LinkStatus.EXHAUSTED
        return LinkStatus.ACTIVE

    def eligibility_error(self, now: datetime) -> Optional[ErrorCode]:
        """Snapshot check used before a redemption; not authoritative for capacity"""
        return _INELIGIBLE_ERRORS.get(self.status_at(now))

    def remaining_uses(self) -> Optional[int]:
        if self.max_uses is None:
            return None
        return max(self.max_uses - self.current_uses, 0)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "link_token": "9f1c2a7be04d4c11",
                "owner_id": "merchant_42",
                "amount": "25.00",
                "currency": "USD",
                "description": "Workshop ticket",
                "expires_at": "2024-02-01T00:00:00Z",
                "max_uses": 10,
                "current_uses": 3,
                "is_active": True,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
