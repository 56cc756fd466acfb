from fastapi import APIRouter, Depends, Query
import logging

from app.api.deps import get_current_user_id, get_feedback_store
from app.core.store.base import FeedbackStore
from app.messages.feedback_messages import FEEDBACK_FETCH_FAILED, FEEDBACK_FETCHED
from app.schemas.feedback import FeedbackListData, FeedbackListResponse, FeedbackOut
from app.utils.exceptions import ServerError
from app.utils.response_builder import success_response

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])
logger = logging.getLogger(__name__)


@router.get("", response_model=FeedbackListResponse)
async def list_feedback(
    limit: int = Query(50, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    store: FeedbackStore = Depends(get_feedback_store),
):
    try:
        rows = await store.list_recent_feedback(user_id, limit=limit)
        items = [FeedbackOut.model_validate(row) for row in rows]
        return success_response(
            message=FEEDBACK_FETCHED,
            data=FeedbackListData(count=len(items), items=items),
        )
    except Exception as e:
        logger.exception(f"❌ Failed to fetch feedback for {user_id}: {e}")
        raise ServerError(code="FEEDBACK_FETCH_FAILED", message=FEEDBACK_FETCH_FAILED)
