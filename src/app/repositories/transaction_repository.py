"""Transaction Repository Interface

Defines the contract for the redemption ledger. Rows are inserted once and
finalized once; there are no deletes.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from src.domain.errors import FailureReason
from src.domain.transaction import Transaction, TransactionStatus

# (transaction, link_token)
TransactionWithLink = Tuple[Transaction, str]


class TransactionRepository(ABC):
    """Repository interface for Transaction persistence"""

    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        """
        Insert a new transaction

        Args:
            transaction: Transaction entity to persist

        Returns:
            Created Transaction
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve transaction by ID, reloading any cached copy from the database

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def finalize(
        self,
        transaction_id: str,
        status: TransactionStatus,
        response_code: Optional[str],
        response_message: Optional[str],
        failure_reason: Optional[FailureReason],
        processed_at: datetime,
    ) -> bool:
        """
        Move a non-terminal transaction to a terminal status

        The update only applies while the row is still pending/processing.

        Returns:
            True if the row was finalized, False if it was already terminal
        """
        pass

    @abstractmethod
    async def get_owned(self, owner_id: str, transaction_id: str) -> Optional[TransactionWithLink]:
        """
        Retrieve a transaction whose link belongs to owner_id

        Returns:
            (transaction, link_token) or None
        """
        pass

    @abstractmethod
    async def list_for_owner(
        self,
        owner_id: str,
        status: Optional[TransactionStatus] = None,
        link_token: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[TransactionWithLink], int]:
        """
        List transactions across an owner's links, newest first

        Returns:
            Tuple of (page of (transaction, link_token), total count)
        """
        pass

    @abstractmethod
    async def fail_stale(self, cutoff: datetime, processed_at: datetime) -> List[str]:
        """
        Fail every pending/processing transaction created before cutoff

        Returns:
            IDs of the transactions that were failed
        """
        pass
