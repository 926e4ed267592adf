"""Data Transfer Objects for Transaction Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.transaction import Transaction


class TransactionDTO(BaseModel):
    """A redemption attempt as returned to payers and owners"""

    id: str = Field(..., description="Transaction ID")
    link_token: str = Field(..., description="Token of the redeemed link")
    status: str = Field(..., description="pending, processing, completed, failed or cancelled")
    amount: Decimal = Field(..., description="Amount copied from the link")
    currency: str = Field(..., description="Currency copied from the link")
    payer_email: str = Field(..., description="Payer email")
    payer_name: str = Field(..., description="Payer name")
    payment_method: str = Field(default="card", description="Payment method")
    card_brand: Optional[str] = Field(default=None, description="Card brand")
    card_last4: Optional[str] = Field(default=None, description="Last four card digits")
    response_code: Optional[str] = Field(default=None, description="Gateway response code")
    response_message: Optional[str] = Field(default=None, description="Gateway response message")
    failure_reason: Optional[str] = Field(default=None, description="Failure reason")
    processed_at: Optional[datetime] = Field(default=None, description="Finalization timestamp")
    created_at: datetime = Field(..., description="Attempt timestamp")

    @classmethod
    def from_entity(cls, transaction: Transaction, link_token: str) -> "TransactionDTO":
        return cls(
            id=transaction.id,
            link_token=link_token,
            status=transaction.status,
            amount=transaction.amount,
            currency=transaction.currency,
            payer_email=transaction.payer_email,
            payer_name=transaction.payer_name,
            payment_method=transaction.payment_method,
            card_brand=transaction.card_brand,
            card_last4=transaction.card_last4,
            response_code=transaction.response_code,
            response_message=transaction.response_message,
            failure_reason=transaction.failure_reason,
            processed_at=transaction.processed_at,
            created_at=transaction.created_at,
        )


class TransactionListResponseDTO(BaseModel):
    """Paginated list of an owner's transactions"""

    transactions: List[TransactionDTO] = Field(default_factory=list)
    total: int = Field(..., description="Total transactions matching the filter")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Rows skipped")


class SweepResultDTO(BaseModel):
    """Outcome of one stale-attempt sweep"""

    swept_count: int = Field(..., description="Transactions moved to failed")
    transaction_ids: List[str] = Field(default_factory=list)
    cutoff: datetime = Field(..., description="Attempts created before this were swept")
    execution_time_ms: int = Field(..., description="Sweep duration in milliseconds")
