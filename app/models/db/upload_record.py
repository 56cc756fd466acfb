# app/models/db/upload_record.py

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from app.core.database import Base


class UploadRecord(Base):
    __tablename__ = "uploads"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    filename = Column(String, nullable=False)
    file_size = Column(Integer, nullable=True)  # bytes
    row_count = Column(Integer, nullable=True)

    status = Column(
        String, default="pending", nullable=False
    )  # "pending", "processing", "completed", "failed"
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
