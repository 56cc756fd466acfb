# app/core/store/sqlalchemy_store.py
from __future__ import annotations
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from app.core.batch.types import AnalysisResult
from app.core.store.base import FeedbackStore
from app.models.db.feedback import Feedback
from app.models.db.feedback_analysis import FeedbackAnalysis


class SqlAlchemyFeedbackStore(FeedbackStore):
    """
    Every call opens and commits its own session: the pipeline calls the store
    from many concurrent tasks and an AsyncSession must not be shared between
    them.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def insert_feedback(
        self, user_id: str, text: str, metadata: Dict[str, Any]
    ) -> Optional[Feedback]:
        row = Feedback(
            id=str(uuid4()),
            user_id=user_id,
            text=text,
            rating=metadata.get("rating"),
            source=metadata.get("source"),
            product_id=metadata.get("product_id"),
            username=metadata.get("username"),
        )
        async with self._session_factory() as db:
            db.add(row)
            await db.commit()
        return row

    async def update_embedding(self, feedback_id: str, vector: List[float]) -> bool:
        async with self._session_factory() as db:
            result = await db.execute(
                update(Feedback)
                .where(Feedback.id == feedback_id)
                .values(embedding=list(vector))
            )
            await db.commit()
        return result.rowcount > 0

    async def insert_analysis(
        self, feedback_id: str, analysis: AnalysisResult
    ) -> Optional[FeedbackAnalysis]:
        row = FeedbackAnalysis(
            id=str(uuid4()),
            feedback_id=feedback_id,
            sentiment=analysis.sentiment,
            sentiment_score=analysis.sentiment_score,
            topics=list(analysis.topics),
            summary=analysis.summary,
            recommendation=analysis.recommendation,
        )
        async with self._session_factory() as db:
            db.add(row)
            await db.commit()
        return row

    async def list_recent_feedback(
        self, user_id: str, limit: int = 50
    ) -> List[Feedback]:
        async with self._session_factory() as db:
            result = await db.execute(
                select(Feedback)
                .options(selectinload(Feedback.analysis))
                .where(Feedback.user_id == user_id)
                .order_by(Feedback.created_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())
