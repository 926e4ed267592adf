"""Request schemas for the Link Management API

Only shapes are checked here. Business rules (positive amount, future
expiry, ...) are validated by the use cases so every violation is reported
in one response.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CreatePaymentLinkRequestSchema(BaseModel):
    """
    Request schema for creating a payment link

    Used for POST /payment-links endpoint.
    """

    amount: Decimal = Field(..., description="Amount per redemption (> 0, two decimals max)")

    currency: str = Field(default="USD", description="3-letter currency code")

    description: Optional[str] = Field(default=None, description="Optional description (max 500 chars)")

    expires_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("expires_at", "expiresAt"),
        description="Optional expiry; must be in the future"
    )

    max_uses: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("max_uses", "maxUses"),
        description="Optional redemption cap (>= 1); omit for unlimited"
    )

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v):
        """Store expiry as naive UTC"""
        return _to_naive_utc(v)

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "25.00",
                "currency": "USD",
                "description": "Workshop ticket",
                "expires_at": "2030-01-01T00:00:00Z",
                "max_uses": 10
            }
        }


class UpdatePaymentLinkRequestSchema(BaseModel):
    """
    Request schema for updating a payment link

    Used for PATCH /payment-links/{token}. Omitted fields are left unchanged.
    """

    description: Optional[str] = Field(default=None, description="New description")

    is_active: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("is_active", "isActive"),
        description="Activate or deactivate the link"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "description": "Workshop ticket (early bird)",
                "is_active": False
            }
        }
