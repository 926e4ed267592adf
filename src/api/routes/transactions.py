"""Transaction API Routes

Owner-scoped redemption history.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import to_client_error
from src.app.use_cases.transactions import (
    GetTransaction,
    ListTransactions,
    TransactionDTO,
    TransactionListResponseDTO,
)
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.domain.transaction import TransactionStatus
from src.depends import get_owner_id, get_session

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get(
    "",
    response_model=TransactionListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    status_filter: Optional[TransactionStatus] = Query(default=None, alias="status"),
    link_token: Optional[str] = Query(default=None),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
):
    """
    List redemption attempts across the caller's links, newest first.

    **Query parameters:**
    - `status` (optional): pending, processing, completed, failed or cancelled
    - `link_token` (optional): Restrict to one link
    - `limit` / `offset` (optional): Pagination
    """
    transaction_repo = SqlAlchemyTransactionRepository(session)
    result = await ListTransactions(transaction_repo).execute(
        owner_id,
        status=status_filter,
        link_token=link_token,
        limit=limit,
        offset=offset,
    )

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.get(
    "/{transaction_id}",
    response_model=TransactionDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Transaction not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "TRANSACTION_NOT_FOUND",
                            "message": "Transaction 0b6f6c8e-2f3b-4b7e-9d51-1f0a5c2f9e44 not found"
                        }
                    }
                }
            }
        }
    }
)
async def get_transaction(
    transaction_id: str,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
):
    """Get one redemption attempt on one of the caller's links."""
    transaction_repo = SqlAlchemyTransactionRepository(session)
    result = await GetTransaction(transaction_repo).execute(owner_id, transaction_id)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value
