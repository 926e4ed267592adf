from .payment_link_repository import PaymentLinkRepository, LinkWithStats
from .transaction_repository import TransactionRepository, TransactionWithLink

__all__ = [
    "PaymentLinkRepository",
    "LinkWithStats",
    "TransactionRepository",
    "TransactionWithLink",
]
