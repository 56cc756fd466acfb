from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from app.schemas.common import BaseResponse


class FeedbackAnalysisOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sentiment: Optional[str] = None
    sentiment_score: Optional[float] = None
    topics: List[str] = []
    summary: Optional[str] = None
    recommendation: Optional[str] = None


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    text: str
    source: Optional[str] = None
    product_id: Optional[str] = None
    username: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[datetime] = None
    analysis: Optional[FeedbackAnalysisOut] = None


class FeedbackListData(BaseModel):
    count: int
    items: List[FeedbackOut]


class FeedbackListResponse(BaseResponse):
    data: FeedbackListData
