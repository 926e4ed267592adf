"""SQLAlchemy implementation of TransactionRepository

Finalization is a guarded UPDATE that only matches rows whose status may
legally move to the target, so a terminal transaction is never rewritten.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.transaction_repository import TransactionRepository, TransactionWithLink
from src.domain.errors import FailureReason
from src.domain.payment_link import PaymentLink
from src.domain.transaction import Transaction, TransactionStatus


def _source_values(target: TransactionStatus) -> List[str]:
    return [s.value for s in TransactionStatus.sources_for(target)]


class SqlAlchemyTransactionRepository(TransactionRepository):
    """
    SQLAlchemy implementation of TransactionRepository

    Features:
    - Insert-then-update-once access pattern, no deletes
    - Owner scoping through a join on the parent link
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: Transaction) -> Transaction:
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        stmt = (
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def finalize(
        self,
        transaction_id: str,
        status: TransactionStatus,
        response_code: Optional[str],
        response_message: Optional[str],
        failure_reason: Optional[FailureReason],
        processed_at: datetime,
    ) -> bool:
        stmt = (
            update(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.status.in_(_source_values(status)),
            )
            .values(
                status=status.value,
                response_code=response_code,
                response_message=response_message,
                failure_reason=failure_reason.value if failure_reason else None,
                processed_at=processed_at,
                updated_at=processed_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def get_owned(self, owner_id: str, transaction_id: str) -> Optional[TransactionWithLink]:
        stmt = (
            select(Transaction, PaymentLink.link_token)
            .join(PaymentLink, PaymentLink.id == Transaction.payment_link_id)
            .where(Transaction.id == transaction_id, PaymentLink.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        return (row[0], row[1]) if row else None

    async def list_for_owner(
        self,
        owner_id: str,
        status: Optional[TransactionStatus] = None,
        link_token: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[TransactionWithLink], int]:
        filters = [PaymentLink.owner_id == owner_id]
        if status is not None:
            filters.append(Transaction.status == status.value)
        if link_token is not None:
            filters.append(PaymentLink.link_token == link_token)

        count_stmt = (
            select(func.count(Transaction.id))
            .select_from(Transaction)
            .join(PaymentLink, PaymentLink.id == Transaction.payment_link_id)
            .where(*filters)
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Transaction, PaymentLink.link_token)
            .join(PaymentLink, PaymentLink.id == Transaction.payment_link_id)
            .where(*filters)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()], total

    async def fail_stale(self, cutoff: datetime, processed_at: datetime) -> List[str]:
        stmt = (
            update(Transaction)
            .where(
                Transaction.status.in_(_source_values(TransactionStatus.FAILED)),
                Transaction.created_at < cutoff,
            )
            .values(
                status=TransactionStatus.FAILED.value,
                response_code="INTERNAL_ERROR",
                response_message="Redemption attempt abandoned before finalization",
                failure_reason=FailureReason.INTERNAL_ERROR.value,
                processed_at=processed_at,
                updated_at=processed_at,
            )
            .returning(Transaction.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
