from fastapi import APIRouter, Depends
import logging

from app.api.deps import get_current_user_id, get_quota_service
from app.messages.quota_messages import QUOTA_FETCH_FAILED, QUOTA_FETCHED
from app.schemas.quota import QuotaData, QuotaResponse
from app.services.quota_service import QuotaService
from app.utils.exceptions import ServerError
from app.utils.response_builder import success_response

router = APIRouter(prefix="/api/quota", tags=["Quota"])
logger = logging.getLogger(__name__)


@router.get("", response_model=QuotaResponse)
async def get_quota(
    user_id: str = Depends(get_current_user_id),
    quota: QuotaService = Depends(get_quota_service),
):
    try:
        result = await quota.check_quota(user_id)
        return success_response(
            message=QUOTA_FETCHED, data=QuotaData.model_validate(result)
        )
    except Exception as e:
        logger.exception(f"❌ Failed to fetch quota for {user_id}: {e}")
        raise ServerError(code="QUOTA_FETCH_FAILED", message=QUOTA_FETCH_FAILED)
