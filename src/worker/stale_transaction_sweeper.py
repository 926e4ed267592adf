"""Stale Transaction Sweeper Background Worker

Fails redemption attempts stuck in pending/processing, e.g. after the API
process died between recording an attempt and finalizing it.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from config import ApplicationConfig
from src.adapter.database import build_engine, build_session_factory
from src.adapter.repositories.transaction_repository import SqlAlchemyTransactionRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.transactions import SweepResultDTO, SweepStaleTransactions

logger = logging.getLogger(__name__)


class StaleTransactionSweeperWorker:
    """
    Background worker for stale redemption attempts

    Features:
    - Fails attempts older than STALE_PROCESSING_SECONDS with INTERNAL_ERROR
    - Never touches link usage counters
    - Can run once or continuously

    Usage:
        # Run once
        worker = StaleTransactionSweeperWorker()
        result = await worker.run_once()

        # Run continuously
        worker = StaleTransactionSweeperWorker()
        await worker.run_forever(interval_seconds=60)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        stale_after_seconds: Optional[int] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            stale_after_seconds: Age threshold (defaults to ApplicationConfig.STALE_PROCESSING_SECONDS)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.stale_after_seconds = stale_after_seconds or ApplicationConfig.STALE_PROCESSING_SECONDS

        self.engine = build_engine(self.db_uri, ApplicationConfig.DB_BUSY_TIMEOUT_SECONDS)
        self.async_session_factory = build_session_factory(self.engine)

        logger.info("StaleTransactionSweeperWorker initialized")

    async def run_once(self, now: Optional[datetime] = None) -> SweepResultDTO:
        """
        Run one sweep

        Returns:
            SweepResultDTO with the IDs of the swept transactions
        """
        now = now or datetime.utcnow()

        if not ApplicationConfig.SWEEPER_ENABLED:
            logger.info("Stale transaction sweeper is disabled, skipping")
            return SweepResultDTO(swept_count=0, transaction_ids=[], cutoff=now, execution_time_ms=0)

        async with self.async_session_factory() as session:
            use_case = SweepStaleTransactions(
                uow=SqlAlchemyUnitOfWork(session),
                transaction_repo=SqlAlchemyTransactionRepository(session),
                stale_after_seconds=self.stale_after_seconds,
            )

            result = await use_case.execute(now=now)

            if result.is_err():
                logger.error(f"Sweep failed: {result.error.message}")
                raise RuntimeError(f"Sweep failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 60):
        """
        Sweep continuously at the given interval

        Args:
            interval_seconds: Seconds between sweeps (default: 60)
        """
        logger.info(f"Starting stale transaction sweeper with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Sweep complete. Failed {result.swept_count} stale transactions "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Sweep cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("StaleTransactionSweeperWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.stale_transaction_sweeper --once

        # Run continuously (default: SWEEPER_INTERVAL_SECONDS)
        python -m src.worker.stale_transaction_sweeper

        # Run continuously with custom interval (in seconds)
        python -m src.worker.stale_transaction_sweeper --interval 30
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Stale Transaction Sweeper")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.SWEEPER_INTERVAL_SECONDS,
        help="Interval between sweeps in seconds"
    )
    args = parser.parse_args()

    worker = StaleTransactionSweeperWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Sweep complete:")
            print(f"  Cutoff: {result.cutoff.isoformat()}")
            print(f"  Transactions failed: {result.swept_count}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for transaction_id in result.transaction_ids:
                print(f"  - {transaction_id}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
