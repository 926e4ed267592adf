"""SweepStaleTransactions Use Case

Fails redemption attempts that never reached a terminal state, e.g. because
the process died between recording the attempt and finalizing it.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.transaction_repository import TransactionRepository
from src.domain.errors import ErrorCode
from .dtos import SweepResultDTO

logger = logging.getLogger(__name__)


class SweepStaleTransactions:
    """
    Use Case: Fail stale pending/processing transactions

    Business Rules:
    1. Only attempts created more than stale_after_seconds ago are touched
    2. They become failed with INTERNAL_ERROR
    3. current_uses is never modified (a stale attempt never consumed a slot)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        transaction_repo: TransactionRepository,
        stale_after_seconds: int = 300,
    ):
        self.uow = uow
        self.transaction_repo = transaction_repo
        self.stale_after_seconds = stale_after_seconds

    async def execute(self, now: Optional[datetime] = None) -> Result[SweepResultDTO]:
        start_time = time.time()
        now = now or datetime.utcnow()
        cutoff = now - timedelta(seconds=self.stale_after_seconds)

        try:
            swept_ids = await self.transaction_repo.fail_stale(cutoff, processed_at=now)
            await self.uow.commit()

            if swept_ids:
                logger.warning(f"Failed {len(swept_ids)} stale transactions created before {cutoff.isoformat()}")

            return Return.ok(
                SweepResultDTO(
                    swept_count=len(swept_ids),
                    transaction_ids=swept_ids,
                    cutoff=cutoff,
                    execution_time_ms=int((time.time() - start_time) * 1000),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Stale transaction sweep failed: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Failed to sweep stale transactions",
                    reason=str(e),
                )
            )
