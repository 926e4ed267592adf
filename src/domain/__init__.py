from .base import BaseModel, generate_uuid
from .errors import ErrorCode, FailureReason
from .card import CardBrand, detect_card_brand
from .payment_link import PaymentLink, LinkStatus
from .transaction import Transaction, TransactionStatus

__all__ = [
    "BaseModel",
    "generate_uuid",
    "ErrorCode",
    "FailureReason",
    "CardBrand",
    "detect_card_brand",
    "PaymentLink",
    "LinkStatus",
    "Transaction",
    "TransactionStatus",
]
