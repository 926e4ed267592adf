"""Integration tests for the SQLAlchemy repositories"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from src.adapter.repositories.payment_link_repository import SqlAlchemyPaymentLinkRepository
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.domain.errors import FailureReason
from src.domain.payment_link import LinkStatus
from src.domain.transaction import Transaction, TransactionStatus


def _transaction(link_id: int, status: TransactionStatus, created_at: datetime, amount="25.00") -> Transaction:
    return Transaction(
        payment_link_id=link_id,
        payer_email="payer@example.com",
        payer_name="Payer",
        amount=Decimal(amount),
        currency="USD",
        status=status.value,
        card_brand="Visa",
        card_last4="4242",
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.mark.asyncio
class TestPaymentLinkRepository:

    async def test_try_consume_slot_stops_at_max_uses(self, db_session, create_link):
        """
        Given: A link with max_uses=2
        When: try_consume_slot is called three times
        Then: The first two succeed, the third affects no row
        """
        # Arrange
        link = await create_link(link_token="tok_slots", max_uses=2)
        repo = SqlAlchemyPaymentLinkRepository(db_session)

        # Act
        outcomes = []
        for _ in range(3):
            outcomes.append(await repo.try_consume_slot(link.id))
            await db_session.commit()

        # Assert
        assert outcomes == [True, True, False]
        stored = await repo.get_by_token("tok_slots")
        assert stored.current_uses == 2

    async def test_update_metadata_leaves_counter_alone(self, db_session, create_link):
        # Arrange
        link = await create_link(link_token="tok_meta", max_uses=5, current_uses=2)
        repo = SqlAlchemyPaymentLinkRepository(db_session)

        # Act
        await repo.update_metadata(link.id, description="Renamed", is_active=False, update_description=True)
        await db_session.commit()

        # Assert
        stored = await repo.get_by_token("tok_meta")
        assert stored.description == "Renamed"
        assert stored.is_active is False
        assert stored.current_uses == 2
        assert stored.amount == Decimal("25.00")

    async def test_database_rejects_uses_above_max(self, db_session, create_link):
        with pytest.raises(IntegrityError):
            await create_link(link_token="tok_bad", max_uses=1, current_uses=2)

    async def test_aggregates_and_status_filters(self, db_session, create_link):
        """
        Given: Links in every derived status with mixed transactions
        When: list_for_owner is called with each filter
        Then: Only matching links are returned, with counts and completed totals
        """
        # Arrange
        now = datetime.utcnow()
        active = await create_link(link_token="tok_active", max_uses=5, current_uses=1,
                                   created_at=now - timedelta(minutes=4))
        await create_link(link_token="tok_inactive", is_active=False, created_at=now - timedelta(minutes=3))
        await create_link(link_token="tok_expired", expires_at=now - timedelta(minutes=1),
                          created_at=now - timedelta(minutes=2))
        await create_link(link_token="tok_exhausted", max_uses=1, current_uses=1,
                          created_at=now - timedelta(minutes=1))
        await create_link(link_token="tok_other_owner", owner_id="merchant_2")

        db_session.add(_transaction(active.id, TransactionStatus.COMPLETED, now, amount="25.00"))
        db_session.add(_transaction(active.id, TransactionStatus.FAILED, now, amount="25.00"))
        await db_session.commit()

        repo = SqlAlchemyPaymentLinkRepository(db_session)

        # Act
        everything, total = await repo.list_for_owner("merchant_1", now)
        by_status = {}
        for status in LinkStatus:
            rows, _ = await repo.list_for_owner("merchant_1", now, status=status)
            by_status[status] = [link.link_token for link, _, _ in rows]

        # Assert
        assert total == 4
        assert [link.link_token for link, _, _ in everything] == [
            "tok_exhausted", "tok_expired", "tok_inactive", "tok_active"
        ]
        assert by_status == {
            LinkStatus.ACTIVE: ["tok_active"],
            LinkStatus.INACTIVE: ["tok_inactive"],
            LinkStatus.EXPIRED: ["tok_expired"],
            LinkStatus.EXHAUSTED: ["tok_exhausted"],
        }
        _, count, collected = await repo.get_owned_with_stats("merchant_1", "tok_active")
        assert count == 2
        assert collected == Decimal("25.00")

    async def test_owner_scoping(self, db_session, create_link):
        await create_link(link_token="tok_scoped", owner_id="merchant_1")
        repo = SqlAlchemyPaymentLinkRepository(db_session)

        assert await repo.get_owned_with_stats("merchant_2", "tok_scoped") is None
        assert await repo.get_owned_with_stats("merchant_1", "tok_scoped") is not None

    async def test_pagination(self, db_session, create_link):
        now = datetime.utcnow()
        for i in range(5):
            await create_link(link_token=f"tok_page_{i}", created_at=now - timedelta(minutes=i))
        repo = SqlAlchemyPaymentLinkRepository(db_session)

        rows, total = await repo.list_for_owner("merchant_1", now, limit=2, offset=2)

        assert total == 5
        assert [link.link_token for link, _, _ in rows] == ["tok_page_2", "tok_page_3"]


@pytest.mark.asyncio
class TestTransactionRepository:

    async def test_finalize_only_once(self, db_session, create_link):
        """
        Given: A processing transaction
        When: finalize is called twice
        Then: The first call wins and the terminal row is never rewritten
        """
        # Arrange
        link = await create_link(link_token="tok_finalize")
        repo = SqlAlchemyTransactionRepository(db_session)
        created = await repo.create(_transaction(link.id, TransactionStatus.PROCESSING, datetime.utcnow()))
        await db_session.commit()

        # Act
        first = await repo.finalize(
            created.id, TransactionStatus.COMPLETED, "APPROVED", "Transaction approved", None, datetime.utcnow()
        )
        await db_session.commit()
        second = await repo.finalize(
            created.id, TransactionStatus.FAILED, "DECLINED", "Card declined",
            FailureReason.CARD_DECLINED, datetime.utcnow()
        )
        await db_session.commit()

        # Assert
        assert first is True
        assert second is False
        stored = await repo.get_by_id(created.id)
        assert stored.status == TransactionStatus.COMPLETED.value
        assert stored.response_code == "APPROVED"
        assert stored.failure_reason is None

    async def test_fail_stale_only_touches_old_open_rows(self, db_session, create_link):
        # Arrange
        now = datetime.utcnow()
        link = await create_link(link_token="tok_stale", max_uses=3, current_uses=1)
        repo = SqlAlchemyTransactionRepository(db_session)
        old_open = await repo.create(_transaction(link.id, TransactionStatus.PROCESSING, now - timedelta(hours=1)))
        old_done = await repo.create(_transaction(link.id, TransactionStatus.COMPLETED, now - timedelta(hours=1)))
        fresh_open = await repo.create(_transaction(link.id, TransactionStatus.PROCESSING, now))
        await db_session.commit()

        # Act
        swept = await repo.fail_stale(cutoff=now - timedelta(minutes=5), processed_at=now)
        await db_session.commit()

        # Assert
        assert swept == [old_open.id]
        assert (await repo.get_by_id(old_open.id)).failure_reason == FailureReason.INTERNAL_ERROR.value
        assert (await repo.get_by_id(old_done.id)).status == TransactionStatus.COMPLETED.value
        assert (await repo.get_by_id(fresh_open.id)).status == TransactionStatus.PROCESSING.value
        link_repo = SqlAlchemyPaymentLinkRepository(db_session)
        assert (await link_repo.get_by_token("tok_stale")).current_uses == 1

    async def test_list_for_owner_filters(self, db_session, create_link):
        # Arrange
        now = datetime.utcnow()
        first = await create_link(link_token="tok_list_a")
        second = await create_link(link_token="tok_list_b")
        other = await create_link(link_token="tok_list_other", owner_id="merchant_2")
        db_session.add(_transaction(first.id, TransactionStatus.COMPLETED, now - timedelta(minutes=2)))
        db_session.add(_transaction(second.id, TransactionStatus.FAILED, now - timedelta(minutes=1)))
        db_session.add(_transaction(other.id, TransactionStatus.COMPLETED, now))
        await db_session.commit()
        repo = SqlAlchemyTransactionRepository(db_session)

        # Act
        rows, total = await repo.list_for_owner("merchant_1")
        completed, completed_total = await repo.list_for_owner("merchant_1", status=TransactionStatus.COMPLETED)
        by_link, _ = await repo.list_for_owner("merchant_1", link_token="tok_list_b")

        # Assert
        assert total == 2
        assert [token for _, token in rows] == ["tok_list_b", "tok_list_a"]
        assert completed_total == 1
        assert completed[0][1] == "tok_list_a"
        assert [tx.status for tx, _ in by_link] == [TransactionStatus.FAILED.value]
