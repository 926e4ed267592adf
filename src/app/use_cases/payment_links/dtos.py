"""Data Transfer Objects for Payment Link Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class CreatePaymentLinkCommandDTO(BaseModel):
    """
    Command DTO for creating a payment link

    Values are validated by the CreatePaymentLink use case so every violated
    field is reported together.
    """

    owner_id: str = Field(..., description="Owner identifier")
    amount: Decimal = Field(..., description="Amount per redemption")
    currency: str = Field(default="USD", description="Currency code (ISO 4217)")
    description: Optional[str] = Field(default=None, description="Optional description")
    expires_at: Optional[datetime] = Field(default=None, description="Expiry in UTC")
    max_uses: Optional[int] = Field(default=None, description="Redemption cap (None = unlimited)")

    class Config:
        json_schema_extra = {
            "example": {
                "owner_id": "merchant_42",
                "amount": "25.00",
                "currency": "USD",
                "description": "Workshop ticket",
                "expires_at": "2024-02-01T00:00:00Z",
                "max_uses": 10
            }
        }


class UpdatePaymentLinkCommandDTO(BaseModel):
    """
    Command DTO for updating owner-editable link fields

    Only fields explicitly set on the DTO are applied.
    """

    description: Optional[str] = Field(default=None, description="New description")
    is_active: Optional[bool] = Field(default=None, description="New activation flag")


class PaymentLinkResponseDTO(BaseModel):
    """Owner-facing view of a payment link"""

    id: int = Field(..., description="Internal link ID")
    link_token: str = Field(..., description="Public link token")
    amount: Decimal = Field(..., description="Amount per redemption")
    currency: str = Field(..., description="Currency code")
    description: Optional[str] = Field(default=None, description="Description")
    expires_at: Optional[datetime] = Field(default=None, description="Expiry timestamp")
    max_uses: Optional[int] = Field(default=None, description="Redemption cap")
    current_uses: int = Field(..., description="Successful redemptions so far")
    is_active: bool = Field(..., description="Activation flag")
    status: str = Field(..., description="Derived status (active, inactive, expired, exhausted)")
    payment_url: str = Field(..., description="Redemption URL to share with payers")
    transaction_count: int = Field(default=0, description="Redemption attempts recorded")
    total_collected: Decimal = Field(default=Decimal("0.00"), description="Sum of completed amounts")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "link_token": "9f1c2a7be04d4c11",
                "amount": "25.00",
                "currency": "USD",
                "description": "Workshop ticket",
                "expires_at": "2024-02-01T00:00:00Z",
                "max_uses": 10,
                "current_uses": 3,
                "is_active": True,
                "status": "active",
                "payment_url": "http://localhost:3000/pay/9f1c2a7be04d4c11",
                "transaction_count": 4,
                "total_collected": "75.00",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }


class ListPaymentLinksResponseDTO(BaseModel):
    """Paginated list of an owner's payment links"""

    payment_links: List[PaymentLinkResponseDTO] = Field(default_factory=list)
    total: int = Field(..., description="Total links matching the filter")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Rows skipped")


class PublicPaymentLinkDTO(BaseModel):
    """Payer-facing view of a redeemable link"""

    link_token: str = Field(..., description="Public link token")
    amount: Decimal = Field(..., description="Amount to pay")
    currency: str = Field(..., description="Currency code")
    description: Optional[str] = Field(default=None, description="Description")
    expires_at: Optional[datetime] = Field(default=None, description="Expiry timestamp")
    max_uses: Optional[int] = Field(default=None, description="Redemption cap")
    current_uses: int = Field(..., description="Successful redemptions so far")
    remaining_uses: Optional[int] = Field(default=None, description="Redemptions left; null when uncapped")
    created_at: datetime = Field(..., description="Creation timestamp")
