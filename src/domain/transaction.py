"""Transaction Domain Entity

One row per redemption attempt. Inserted in ``processing`` and finalized
exactly once; terminal rows are never rewritten.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class TransactionStatus(str, Enum):
    """Transaction states"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def terminal(cls) -> FrozenSet["TransactionStatus"]:
        return frozenset({cls.COMPLETED, cls.FAILED, cls.CANCELLED})

    @classmethod
    def non_terminal(cls) -> FrozenSet["TransactionStatus"]:
        return frozenset({cls.PENDING, cls.PROCESSING})

    def is_terminal(self) -> bool:
        return self in TransactionStatus.terminal()

    def can_transition_to(self, target: "TransactionStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS[self]

    @classmethod
    def sources_for(cls, target: "TransactionStatus") -> FrozenSet["TransactionStatus"]:
        """States a row may be in for a move to ``target`` to be legal"""
        return frozenset(s for s in cls if s.can_transition_to(target))


_ALLOWED_TRANSITIONS = {
    TransactionStatus.PENDING: frozenset({
        TransactionStatus.PROCESSING,
        TransactionStatus.FAILED,
        TransactionStatus.CANCELLED,
    }),
    TransactionStatus.PROCESSING: frozenset({
        TransactionStatus.COMPLETED,
        TransactionStatus.FAILED,
        TransactionStatus.CANCELLED,
    }),
    TransactionStatus.COMPLETED: frozenset(),
    TransactionStatus.FAILED: frozenset(),
    TransactionStatus.CANCELLED: frozenset(),
}

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in TransactionStatus)


class Transaction(BaseModel, table=True):
    """
    Transaction - Ledger entry for a single redemption attempt

    Domain Rules:
    - amount and currency are copied from the link, never supplied by the payer
    - Only card brand and last four digits are stored
    - pending -> processing -> completed | failed; cancelled from pending/processing
    - No transition out of completed, failed or cancelled
    - Never deleted
    """

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="transaction_amount_positive"),
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="transaction_status_valid"),
        Index("ix_transactions_link_status", "payment_link_id", "status"),
        Index("ix_transactions_created_at", "created_at"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique transaction identifier (UUID)"
    )

    payment_link_id: int = Field(
        sa_column=Column(
            BigInteger().with_variant(Integer, "sqlite"),
            ForeignKey("payment_links.id"),
            nullable=False,
            index=True,
        ),
        description="Foreign key to PaymentLink"
    )

    payer_email: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Payer email address"
    )

    payer_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Payer name"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Amount copied from the link at attempt time"
    )

    currency: str = Field(
        sa_column=Column(String(3), nullable=False),
        description="Currency copied from the link at attempt time"
    )

    status: str = Field(
        default=TransactionStatus.PENDING.value,
        sa_column=Column(String(20), nullable=False, index=True),
        description="Transaction status (pending, processing, completed, failed, cancelled)"
    )

    payment_method: str = Field(
        default="card",
        sa_column=Column(String(50), nullable=False),
        description="Payment method"
    )

    card_brand: Optional[str] = Field(
        default=None,
        sa_column=Column(String(20), nullable=True),
        description="Card brand derived from the leading digits"
    )

    card_last4: Optional[str] = Field(
        default=None,
        sa_column=Column(String(4), nullable=True),
        description="Last four digits of the card"
    )

    response_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Authorization gateway response code"
    )

    response_message: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Authorization gateway response message"
    )

    failure_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="FailureReason for failed or cancelled attempts"
    )

    processed_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="When the attempt reached a terminal state"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="When the attempt was recorded"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Last update timestamp"
    )

    @property
    def current_status(self) -> TransactionStatus:
        return TransactionStatus(self.status)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0b6f6c8e-2f3b-4b7e-9d51-1f0a5c2f9e44",
                "payment_link_id": 1,
                "payer_email": "payer@example.com",
                "payer_name": "Ada Lovelace",
                "amount": "25.00",
                "currency": "USD",
                "status": "completed",
                "payment_method": "card",
                "card_brand": "Visa",
                "card_last4": "4242",
                "response_code": "APPROVED",
                "response_message": "Transaction approved",
                "failure_reason": None,
                "processed_at": "2024-01-01T00:00:02Z",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:02Z"
            }
        }
