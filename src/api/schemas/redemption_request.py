"""Request schema for the public redemption endpoint"""

from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator


class RedeemRequestSchema(BaseModel):
    """
    Request schema for redeeming a payment link

    Used for POST /pay/{token}/redeem. Accepts snake_case or camelCase keys.
    Field rules are checked by the redemption use case.
    """

    payer_email: str = Field(
        default="",
        validation_alias=AliasChoices("payer_email", "payerEmail"),
        description="Payer email"
    )

    payer_name: str = Field(
        default="",
        validation_alias=AliasChoices("payer_name", "payerName"),
        description="Payer name"
    )

    card_number: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("card_number", "cardNumber"),
        description="Card number (13-19 digits, spaces allowed)"
    )

    expiry_month: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("expiry_month", "expiryMonth"),
        description="Expiry month (1-12)"
    )

    expiry_year: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("expiry_year", "expiryYear"),
        description="Expiry year (YYYY or YY)"
    )

    cvv: str = Field(default="", repr=False, description="Card security code (3-4 digits)")

    @field_validator("card_number", "cvv", mode="before")
    @classmethod
    def coerce_digits(cls, v):
        """Accept numeric JSON values for digit strings"""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return "" if v is None else v

    class Config:
        json_schema_extra = {
            "example": {
                "payer_email": "payer@example.com",
                "payer_name": "Ada Lovelace",
                "card_number": "4242 4242 4242 4242",
                "expiry_month": 12,
                "expiry_year": 2030,
                "cvv": "123"
            }
        }
