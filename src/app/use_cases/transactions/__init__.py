"""Transaction history use cases"""
from .list_transactions import ListTransactions
from .get_transaction import GetTransaction
from .sweep_stale_transactions import SweepStaleTransactions
from .dtos import TransactionDTO, TransactionListResponseDTO, SweepResultDTO

__all__ = [
    "ListTransactions",
    "GetTransaction",
    "SweepStaleTransactions",
    "TransactionDTO",
    "TransactionListResponseDTO",
    "SweepResultDTO",
]
