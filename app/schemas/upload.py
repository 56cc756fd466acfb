from typing import List
from pydantic import BaseModel
from app.schemas.analyze import BatchData
from app.schemas.common import BaseResponse


class UploadData(BaseModel):
    upload_id: str
    filename: str
    columns: List[str]
    record_count: int
    analyzed_count: int
    batch: BatchData


class UploadResponse(BaseResponse):
    data: UploadData
