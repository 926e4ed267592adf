"""Data Transfer Objects for the redemption use case"""

from typing import Optional
from pydantic import BaseModel, Field
from src.app.use_cases.transactions.dtos import TransactionDTO


class RedeemCommandDTO(BaseModel):
    """
    Command DTO for redeeming a payment link

    Fields are deliberately loose; RedeemPaymentLink validates them and
    reports every violated field at once.
    """

    link_token: str = Field(..., description="Public link token")
    payer_email: str = Field(default="", description="Payer email")
    payer_name: str = Field(default="", description="Payer name")
    card_number: str = Field(default="", repr=False, description="Card number")
    expiry_month: Optional[int] = Field(default=None, description="Expiry month (1-12)")
    expiry_year: Optional[int] = Field(default=None, description="Expiry year (4 digits)")
    cvv: str = Field(default="", repr=False, description="Card security code")


class GatewayResponseDTO(BaseModel):
    response_code: Optional[str] = Field(default=None, description="Gateway response code")
    response_message: Optional[str] = Field(default=None, description="Gateway response message")
    failure_reason: Optional[str] = Field(default=None, description="Failure reason")


class RedemptionResponseDTO(BaseModel):
    """Finalized attempt plus the gateway response block"""

    transaction: TransactionDTO
    gateway_response: GatewayResponseDTO

    class Config:
        json_schema_extra = {
            "example": {
                "transaction": {
                    "id": "0b6f6c8e-2f3b-4b7e-9d51-1f0a5c2f9e44",
                    "link_token": "9f1c2a7be04d4c11",
                    "status": "failed",
                    "amount": "25.00",
                    "currency": "USD",
                    "payer_email": "payer@example.com",
                    "payer_name": "Ada Lovelace",
                    "payment_method": "card",
                    "card_brand": "Visa",
                    "card_last4": "4242",
                    "response_code": "APPROVED",
                    "response_message": "Transaction approved",
                    "failure_reason": "LINK_EXHAUSTED_CONCURRENTLY",
                    "processed_at": "2024-01-01T00:00:02Z",
                    "created_at": "2024-01-01T00:00:00Z"
                },
                "gateway_response": {
                    "response_code": "APPROVED",
                    "response_message": "Transaction approved",
                    "failure_reason": "LINK_EXHAUSTED_CONCURRENTLY"
                }
            }
        }
