"""
List Transactions Use Case

Retrieves redemption attempts across an owner's links with pagination.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.transaction import TransactionStatus
from .dtos import TransactionDTO, TransactionListResponseDTO


class ListTransactions:
    """
    Use case: List an owner's transactions

    Transactions are ordered by created_at DESC (most recent first).
    """

    def __init__(self, transaction_repo: TransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(
        self,
        owner_id: str,
        status: Optional[TransactionStatus] = None,
        link_token: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Result[TransactionListResponseDTO]:
        """
        List transactions for an owner.

        Args:
            owner_id: Owner identifier
            status: Optional status filter
            link_token: Optional filter to a single link
            limit: Maximum number of transactions to return (default 10)
            offset: Number of transactions to skip (default 0)

        Returns:
            Result[TransactionListResponseDTO]: Paginated transaction list
        """
        rows, total = await self.transaction_repo.list_for_owner(
            owner_id=owner_id,
            status=status,
            link_token=link_token,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            TransactionListResponseDTO(
                transactions=[TransactionDTO.from_entity(tx, token) for tx, token in rows],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
