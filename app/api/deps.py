from functools import lru_cache
from typing import Optional

from fastapi import Header

from app.core.analysis.analyzer import FeedbackAnalyzer
from app.core.batch.config import BatchConfig
from app.core.config import settings
from app.core.database import async_session
from app.core.llm.openai_client import (
    OpenAICompletionModel,
    OpenAIEmbedder,
    llm_config_from_settings,
)
from app.core.store.sqlalchemy_store import SqlAlchemyFeedbackStore
from app.messages.auth_messages import USER_ID_REQUIRED
from app.services.batch_analysis_service import BatchAnalysisService
from app.services.quota_service import QuotaService
from app.services.upload_service import UploadService
from app.utils.exceptions import UnauthorizedError


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity is asserted upstream and forwarded as X-User-Id."""
    if settings.DISABLE_AUTH:
        return settings.TEST_USER_ID
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError(code="UNAUTHORIZED", message=USER_ID_REQUIRED)
    return x_user_id.strip()


@lru_cache
def _store() -> SqlAlchemyFeedbackStore:
    return SqlAlchemyFeedbackStore(async_session)


@lru_cache
def _embedder() -> OpenAIEmbedder:
    # one AsyncOpenAI client (and connection pool) per process
    return OpenAIEmbedder(llm_config_from_settings(settings))


@lru_cache
def _analyzer() -> FeedbackAnalyzer:
    return FeedbackAnalyzer(OpenAICompletionModel(llm_config_from_settings(settings)))


def get_batch_service() -> BatchAnalysisService:
    return BatchAnalysisService(
        store=_store(),
        embedder=_embedder(),
        analyzer=_analyzer(),
        cfg=BatchConfig(
            max_items=settings.MAX_ITEMS_PER_BATCH,
            embedding_concurrency=settings.EMBEDDING_CONCURRENCY,
            analysis_concurrency=settings.ANALYSIS_CONCURRENCY,
        ),
    )


def get_feedback_store() -> SqlAlchemyFeedbackStore:
    return _store()


def get_quota_service() -> QuotaService:
    return QuotaService(async_session)


def get_upload_service() -> UploadService:
    return UploadService(async_session)
