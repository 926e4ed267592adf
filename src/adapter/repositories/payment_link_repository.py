"""SQLAlchemy implementation of PaymentLinkRepository

The usage counter is only ever moved by a single conditional UPDATE, so the
database itself enforces current_uses <= max_uses under concurrency.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import and_, case, func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_link_repository import LinkWithStats, PaymentLinkRepository
from src.domain.payment_link import LinkStatus, PaymentLink
from src.domain.transaction import Transaction, TransactionStatus


def _status_condition(status: LinkStatus, now: datetime):
    """SQL equivalent of PaymentLink.status_at(now)"""
    not_expired = or_(PaymentLink.expires_at.is_(None), PaymentLink.expires_at > now)
    has_capacity = or_(PaymentLink.max_uses.is_(None), PaymentLink.current_uses < PaymentLink.max_uses)

    if status == LinkStatus.INACTIVE:
        return PaymentLink.is_active.is_(False)
    if status == LinkStatus.EXPIRED:
        return and_(PaymentLink.is_active.is_(True), PaymentLink.expires_at <= now)
    if status == LinkStatus.EXHAUSTED:
        return and_(
            PaymentLink.is_active.is_(True),
            not_expired,
            PaymentLink.max_uses.is_not(None),
            PaymentLink.current_uses >= PaymentLink.max_uses,
        )
    return and_(PaymentLink.is_active.is_(True), not_expired, has_capacity)


class SqlAlchemyPaymentLinkRepository(PaymentLinkRepository):
    """
    SQLAlchemy implementation of PaymentLinkRepository

    Features:
    - Atomic check-and-increment of current_uses (try_consume_slot)
    - Transaction aggregates computed with one grouped outer join
    - Reads refresh any cached identity so concurrent updates are visible
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, link: PaymentLink) -> PaymentLink:
        self.session.add(link)
        await self.session.flush()
        await self.session.refresh(link)
        return link

    async def get_by_token(self, link_token: str) -> Optional[PaymentLink]:
        stmt = (
            select(PaymentLink)
            .where(PaymentLink.link_token == link_token)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    def _with_stats(self):
        collected = case(
            (Transaction.status == TransactionStatus.COMPLETED.value, Transaction.amount),
            else_=0,
        )
        return (
            select(
                PaymentLink,
                func.count(Transaction.id),
                func.coalesce(func.sum(collected), 0),
            )
            .outerjoin(Transaction, Transaction.payment_link_id == PaymentLink.id)
            .group_by(PaymentLink.id)
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _to_stats(row) -> LinkWithStats:
        link, count, collected = row
        return link, int(count or 0), Decimal(str(collected or 0))

    async def get_owned_with_stats(self, owner_id: str, link_token: str) -> Optional[LinkWithStats]:
        stmt = self._with_stats().where(
            PaymentLink.owner_id == owner_id,
            PaymentLink.link_token == link_token,
        )
        result = await self.session.execute(stmt)
        row = result.first()
        return self._to_stats(row) if row else None

    async def list_for_owner(
        self,
        owner_id: str,
        now: datetime,
        status: Optional[LinkStatus] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[LinkWithStats], int]:
        filters = [PaymentLink.owner_id == owner_id]
        if status is not None:
            filters.append(_status_condition(status, now))

        count_stmt = select(func.count()).select_from(PaymentLink).where(*filters)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            self._with_stats()
            .where(*filters)
            .order_by(PaymentLink.created_at.desc(), PaymentLink.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [self._to_stats(row) for row in result.all()], total

    async def update_metadata(
        self,
        link_id: int,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        update_description: bool = False,
    ) -> None:
        values = {}
        if update_description:
            values["description"] = description
        if is_active is not None:
            values["is_active"] = is_active
        if not values:
            return

        values["updated_at"] = datetime.utcnow()
        stmt = (
            update(PaymentLink)
            .where(PaymentLink.id == link_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def try_consume_slot(self, link_id: int) -> bool:
        """
        Increment current_uses only if capacity remains, in one statement

        Unlimited links are incremented too so current_uses always counts
        completed redemptions.
        """
        stmt = (
            update(PaymentLink)
            .where(
                PaymentLink.id == link_id,
                or_(
                    PaymentLink.max_uses.is_(None),
                    PaymentLink.current_uses < PaymentLink.max_uses,
                ),
            )
            .values(
                current_uses=PaymentLink.current_uses + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
