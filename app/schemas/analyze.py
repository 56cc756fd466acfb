from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from app.schemas.common import BaseResponse


class AnalyzeRequest(BaseModel):
    # item contents are checked by the batch validator, not by pydantic
    items: Optional[List[Any]] = None


class SingleAnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    rating: Optional[float] = None
    source: Optional[str] = None
    product_id: Optional[str] = Field(default=None, alias="productId")
    username: Optional[str] = None


class AnalysisData(BaseModel):
    sentiment: str  # positive|neutral|negative|mixed
    sentiment_score: Optional[float] = None
    topics: List[str]
    summary: str
    recommendation: str


class ItemResultData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    index: int
    success: bool
    feedback_id: Optional[str] = Field(default=None, alias="feedbackId")
    analysis: Optional[AnalysisData] = None
    error: Optional[str] = None


class BatchData(BaseModel):
    success: bool
    message: str
    total: int
    succeeded: int
    failed: int
    results: List[ItemResultData]
    warning: Optional[str] = None


class AnalyzeResponse(BaseResponse):
    data: BatchData
