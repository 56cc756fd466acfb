from typing import Any, List, Sequence
from fastapi import APIRouter, Depends, Request
import logging

from app.api.deps import get_batch_service, get_current_user_id, get_quota_service
from app.core.batch.types import BatchResult, FeedbackItem
from app.core.batch.validator import BatchValidationError
from app.messages.analyze_messages import (
    ANALYSIS_COMPLETED,
    ANALYSIS_FAILED,
    ANALYSIS_PARTIAL,
    ITEMS_REQUIRED,
    QUOTA_EXCEEDED,
)
from app.middlewares.security import limiter
from app.schemas.analyze import AnalyzeRequest, AnalyzeResponse, SingleAnalyzeRequest
from app.services.batch_analysis_service import BatchAnalysisService
from app.services.quota_service import QuotaService
from app.utils.exceptions import (
    APIException,
    BadRequestError,
    ServerError,
    TooManyRequestsError,
)
from app.utils.response_builder import success_response

router = APIRouter(prefix="/api/analyze", tags=["Analyze"])
logger = logging.getLogger(__name__)


async def run_quota_checked_batch(
    user_id: str,
    items: Sequence[Any],
    service: BatchAnalysisService,
    quota: QuotaService,
) -> BatchResult:
    """
    Quota pre-flight, the batch itself, then one usage increment for the
    items that were analyzed. Raises APIException subclasses only.
    """
    quota_status = await quota.check_quota(user_id)
    if not quota_status.allowed:
        logger.info(
            f"⛔ Quota exhausted for {user_id} "
            f"({quota_status.used}/{quota_status.limit}, plan={quota_status.plan})"
        )
        raise TooManyRequestsError(code="QUOTA_EXCEEDED", message=QUOTA_EXCEEDED)

    try:
        result = await service.analyze_batch(user_id, items)
    except BatchValidationError as e:
        raise BadRequestError(code="INVALID_BATCH", message=str(e))
    except Exception as e:
        logger.exception(f"❌ Batch analysis crashed for {user_id}: {e}")
        raise ServerError(code="ANALYSIS_FAILED", message=ANALYSIS_FAILED)

    if result.succeeded > 0:
        await quota.increment_usage(user_id, result.succeeded)

    if not result.success:
        logger.error(f"❌ Batch failed for {user_id}: {result.message}")
        raise ServerError(code="ANALYSIS_FAILED", message=result.message)

    return result


def _message_for(result: BatchResult) -> str:
    return ANALYSIS_COMPLETED if result.failed == 0 else ANALYSIS_PARTIAL


@router.post("", response_model=AnalyzeResponse)
@limiter.limit("30/minute")
async def analyze_batch(
    request: Request,
    req: AnalyzeRequest,
    user_id: str = Depends(get_current_user_id),
    service: BatchAnalysisService = Depends(get_batch_service),
    quota: QuotaService = Depends(get_quota_service),
):
    try:
        if req.items is None:
            raise BadRequestError(code="ITEMS_REQUIRED", message=ITEMS_REQUIRED)

        result = await run_quota_checked_batch(user_id, req.items, service, quota)
        logger.info(f"✅ {result.message} (user={user_id})")
        return success_response(message=_message_for(result), data=result)

    except APIException:
        raise

    except Exception as e:
        logger.exception(f"❌ Unexpected analyze error: {e}")
        raise ServerError(code="ANALYSIS_FAILED", message=ANALYSIS_FAILED)


@router.post("/single", response_model=AnalyzeResponse)
@limiter.limit("60/minute")
async def analyze_single(
    request: Request,
    req: SingleAnalyzeRequest,
    user_id: str = Depends(get_current_user_id),
    service: BatchAnalysisService = Depends(get_batch_service),
    quota: QuotaService = Depends(get_quota_service),
):
    try:
        items: List[FeedbackItem] = [
            FeedbackItem(
                text=req.text,
                rating=req.rating,
                source=req.source,
                product_id=req.product_id,
                username=req.username,
            )
        ]
        result = await run_quota_checked_batch(user_id, items, service, quota)
        return success_response(message=_message_for(result), data=result)

    except APIException:
        raise

    except Exception as e:
        logger.exception(f"❌ Unexpected single analyze error: {e}")
        raise ServerError(code="ANALYSIS_FAILED", message=ANALYSIS_FAILED)
