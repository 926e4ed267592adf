from .payment_link_repository import SqlAlchemyPaymentLinkRepository
from .transaction_repository import SqlAlchemyTransactionRepository

__all__ = [
    "SqlAlchemyPaymentLinkRepository",
    "SqlAlchemyTransactionRepository",
]
