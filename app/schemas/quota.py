from datetime import datetime
from pydantic import BaseModel, ConfigDict
from app.schemas.common import BaseResponse


class QuotaData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    allowed: bool
    remaining: int
    used: int
    limit: int
    plan: str
    status: str
    resets_at: datetime


class QuotaResponse(BaseResponse):
    data: QuotaData
