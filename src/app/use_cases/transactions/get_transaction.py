"""Get Transaction Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.errors import ErrorCode
from .dtos import TransactionDTO


class GetTransaction:
    """Owner-scoped lookup of one redemption attempt"""

    def __init__(self, transaction_repo: TransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(self, owner_id: str, transaction_id: str) -> Result[TransactionDTO]:
        row = await self.transaction_repo.get_owned(owner_id, transaction_id)
        if row is None:
            return Return.err(
                Error(
                    code=ErrorCode.TRANSACTION_NOT_FOUND,
                    message=f"Transaction {transaction_id} not found",
                )
            )

        transaction, link_token = row
        return Return.ok(TransactionDTO.from_entity(transaction, link_token))
