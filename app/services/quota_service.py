from __future__ import annotations
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.billing.plans import BILLING_PERIOD_DAYS, QuotaResult
from app.models.db.subscription import Subscription
from app.models.db.usage import Usage

logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class QuotaService:
    """
    Per-user analysis quota over a 30-day billing period.

    Called around the batch pipeline by the HTTP layer: ``check_quota`` before
    a batch, ``increment_usage`` once afterwards with the number of items that
    were analyzed successfully.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def check_quota(self, user_id: str) -> QuotaResult:
        now = datetime.now(timezone.utc)
        try:
            async with self._session_factory() as db:
                sub = await self._get_subscription(db, user_id)

                if sub is None:
                    sub = await self._create_free_subscription(db, user_id, now)
                    return QuotaResult.from_usage(
                        plan="free",
                        status="active",
                        used=0,
                        resets_at=sub.current_period_end,
                    )

                if now > _as_utc(sub.current_period_end):
                    await self._start_new_period(db, sub, now)
                    return QuotaResult.from_usage(
                        plan=sub.plan,
                        status=sub.status,
                        used=0,
                        resets_at=sub.current_period_end,
                    )

                usage = await self._get_usage(db, sub)
                return QuotaResult.from_usage(
                    plan=sub.plan,
                    status=sub.status,
                    used=usage.analyses_count if usage else 0,
                    resets_at=_as_utc(sub.current_period_end),
                )
        except Exception as e:
            logger.exception(f"Error checking quota for {user_id}: {e}")
            return QuotaResult.denied(now)

    async def increment_usage(self, user_id: str, count: int = 1) -> bool:
        """
        Add ``count`` analyses to the current period in one atomic UPDATE,
        so concurrent batches for the same user cannot lose increments.
        """
        if count <= 0:
            return True
        try:
            async with self._session_factory() as db:
                sub = await self._get_subscription(db, user_id)
                if sub is None:
                    logger.error(f"No subscription found for user: {user_id}")
                    return False

                result = await db.execute(
                    update(Usage)
                    .where(Usage.user_id == user_id)
                    .where(Usage.period_start >= sub.current_period_start)
                    .where(Usage.period_end <= sub.current_period_end)
                    .values(analyses_count=Usage.analyses_count + count)
                )
                if result.rowcount == 0:
                    db.add(
                        Usage(
                            id=str(uuid4()),
                            user_id=user_id,
                            period_start=sub.current_period_start,
                            period_end=sub.current_period_end,
                            analyses_count=count,
                            feedback_count=0,
                        )
                    )
                await db.commit()
            return True
        except Exception as e:
            logger.exception(f"Error incrementing usage for {user_id}: {e}")
            return False

    # ------------- internals -------------

    @staticmethod
    async def _get_subscription(
        db: AsyncSession, user_id: str
    ) -> Optional[Subscription]:
        result = await db.execute(select(Subscription).filter_by(user_id=user_id))
        return result.scalars().first()

    @staticmethod
    async def _get_usage(db: AsyncSession, sub: Subscription) -> Optional[Usage]:
        result = await db.execute(
            select(Usage)
            .where(Usage.user_id == sub.user_id)
            .where(Usage.period_start >= sub.current_period_start)
            .where(Usage.period_end <= sub.current_period_end)
        )
        return result.scalars().first()

    @staticmethod
    async def _create_free_subscription(
        db: AsyncSession, user_id: str, now: datetime
    ) -> Subscription:
        sub = Subscription(
            id=str(uuid4()),
            user_id=user_id,
            plan="free",
            status="active",
            current_period_start=now,
            current_period_end=now + timedelta(days=BILLING_PERIOD_DAYS),
        )
        db.add(sub)
        await db.commit()
        logger.info(f"Created free subscription for {user_id}")
        return sub

    @staticmethod
    async def _start_new_period(
        db: AsyncSession, sub: Subscription, now: datetime
    ) -> None:
        sub.current_period_start = now
        sub.current_period_end = now + timedelta(days=BILLING_PERIOD_DAYS)
        db.add(
            Usage(
                id=str(uuid4()),
                user_id=sub.user_id,
                period_start=sub.current_period_start,
                period_end=sub.current_period_end,
                analyses_count=0,
                feedback_count=0,
            )
        )
        await db.commit()
