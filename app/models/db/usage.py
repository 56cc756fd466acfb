# app/models/db/usage.py

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from app.core.database import Base


class Usage(Base):
    __tablename__ = "usage"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    period_start = Column(DateTime(timezone=True), nullable=False)
    period_end = Column(DateTime(timezone=True), nullable=False)

    analyses_count = Column(Integer, nullable=False, default=0)
    feedback_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
