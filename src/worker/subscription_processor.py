"""Subscription Processor Background Worker

Periodically selects the actionable subscriptions and runs one processing
cycle for each: resolve deferred cancellations, record the installment,
then deactivate or advance. Can be run as a standalone script or
integrated with a scheduler.
"""

import asyncio
import logging
import time
from datetime import date, timedelta
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.installment_repository import SqlAlchemyInstallmentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.clock import SystemClock
from src.app.services.clock import Clock
from src.app.use_cases.subscriptions import (
    ProcessSubscription,
    ResolvePendingCancellation,
    ProcessingResultDTO,
)

logger = logging.getLogger(__name__)


class SubscriptionProcessorWorker:
    """
    Background worker for subscription processing

    Features:
    - Completes pending cancellations whose guard now holds
    - Processes every actionable subscription in its own transaction
    - One failing subscription never stops the run
    - Can run once or continuously

    Usage:
        # Run once for today
        worker = SubscriptionProcessorWorker()
        result = await worker.run_once()

        # Replay a specific date
        result = await worker.run_once(today=date(2024, 2, 1))

        # Run continuously
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        clock: Optional[Clock] = None,
        minimum_notice: Optional[timedelta] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            clock: Source of "today" (defaults to the system clock)
            minimum_notice: Cancellation notice (defaults to config)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.clock = clock or SystemClock()
        self.minimum_notice = minimum_notice or timedelta(
            days=ApplicationConfig.MINIMUM_CANCELLATION_NOTICE_DAYS
        )

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("SubscriptionProcessorWorker initialized")

    async def _resolve_pending_cancellations(self, today: date) -> int:
        async with self.async_session_factory() as session:
            subscriptions = await SqlAlchemySubscriptionRepository(session).get_pending_cancellations()
            subscription_ids = [s.id for s in subscriptions]

        resolved = 0
        for subscription_id in subscription_ids:
            try:
                async with self.async_session_factory() as session:
                    use_case = ResolvePendingCancellation(
                        uow=SqlAlchemyUnitOfWork(session),
                        subscription_repo=SqlAlchemySubscriptionRepository(session),
                        installment_repo=SqlAlchemyInstallmentRepository(session),
                        minimum_notice=self.minimum_notice,
                    )
                    result = await use_case.execute(subscription_id, today)

                if result.is_err():
                    logger.warning(
                        f"Could not resolve cancellation of subscription {subscription_id}: "
                        f"{result.error.message}"
                    )
                elif result.value.applied:
                    resolved += 1
            except Exception as e:
                logger.error(
                    f"Unexpected error resolving cancellation of subscription {subscription_id}: {e}"
                )

        return resolved

    async def run_once(self, today: Optional[date] = None) -> ProcessingResultDTO:
        """
        Run one processing cycle

        Args:
            today: Date to process for (defaults to the clock's today)

        Returns:
            ProcessingResultDTO with summary
        """
        start_time = time.time()
        today = today or self.clock.today()

        logger.info(f"Starting subscription processing for {today.isoformat()}")

        cancellations_resolved = await self._resolve_pending_cancellations(today)

        processed = 0
        deactivated = 0
        failed = 0

        async with self.async_session_factory() as session:
            subscriptions = await SqlAlchemySubscriptionRepository(session).get_actionable(today)
            subscription_ids = [s.id for s in subscriptions]

        total_actionable = len(subscription_ids)
        logger.info(f"Found {total_actionable} actionable subscriptions")

        for subscription_id in subscription_ids:
            try:
                # Isolate each subscription in its own transaction
                async with self.async_session_factory() as session:
                    use_case = ProcessSubscription(
                        uow=SqlAlchemyUnitOfWork(session),
                        subscription_repo=SqlAlchemySubscriptionRepository(session),
                        installment_repo=SqlAlchemyInstallmentRepository(session),
                    )
                    result = await use_case.execute(subscription_id, today)

                if result.is_err():
                    if result.error.code == "NOT_ACTIONABLE":
                        logger.info(f"Subscription {subscription_id} changed since selection, skipped")
                        continue
                    logger.error(
                        f"Failed to process subscription {subscription_id}: {result.error.message}"
                    )
                    failed += 1
                    continue

                processed += 1
                if result.value.deactivated:
                    deactivated += 1

            except Exception as e:
                logger.error(f"Unexpected error processing subscription {subscription_id}: {e}")
                failed += 1

        execution_time_ms = int((time.time() - start_time) * 1000)

        result = ProcessingResultDTO(
            as_of=today,
            total_actionable=total_actionable,
            processed=processed,
            deactivated=deactivated,
            failed=failed,
            cancellations_resolved=cancellations_resolved,
            execution_time_ms=execution_time_ms,
        )

        logger.info(
            f"Subscription processing complete: "
            f"{processed}/{total_actionable} processed, "
            f"{deactivated} deactivated, {failed} failed, "
            f"{cancellations_resolved} cancellations resolved, "
            f"{execution_time_ms}ms"
        )

        return result

    async def run_forever(self, check_interval_seconds: Optional[int] = None):
        """
        Run processing continuously

        Args:
            check_interval_seconds: Seconds between runs (defaults to config)
        """
        interval = check_interval_seconds or ApplicationConfig.PROCESSOR_INTERVAL_SECONDS
        logger.info(f"Starting continuous subscription processing with {interval}s interval")

        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Processing cycle failed: {e}")

            await asyncio.sleep(interval)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("SubscriptionProcessorWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Process today's actionable subscriptions
        python -m src.worker.subscription_processor

        # Process as of a specific date
        python -m src.worker.subscription_processor --today 2024-02-01

        # Run continuously
        python -m src.worker.subscription_processor --continuous
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Subscription Processor Worker")
    parser.add_argument("--today", type=date.fromisoformat, help="Processing date (YYYY-MM-DD)")
    parser.add_argument(
        "--continuous", action="store_true", help="Run continuously"
    )
    args = parser.parse_args()

    if not ApplicationConfig.PROCESSOR_ENABLED:
        logger.info("Subscription processor disabled by configuration")
        return

    worker = SubscriptionProcessorWorker()

    try:
        if args.continuous:
            await worker.run_forever()
        else:
            result = await worker.run_once(today=args.today)
            print(f"Processing complete for {result.as_of.isoformat()}:")
            print(f"  Actionable subscriptions: {result.total_actionable}")
            print(f"  Processed: {result.processed}")
            print(f"  Deactivated: {result.deactivated}")
            print(f"  Failed: {result.failed}")
            print(f"  Cancellations resolved: {result.cancellations_resolved}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
