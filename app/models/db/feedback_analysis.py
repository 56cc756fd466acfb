# app/models/db/feedback_analysis.py

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class FeedbackAnalysis(Base):
    __tablename__ = "feedback_analysis"

    id = Column(String, primary_key=True, index=True)
    feedback_id = Column(
        String,
        ForeignKey("feedback.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,  # one analysis per feedback
    )

    sentiment = Column(String, nullable=True)  # positive|neutral|negative|mixed
    sentiment_score = Column(Float, nullable=True)
    topics = Column(JSON, nullable=True)  # ["shipping", "price", ...]
    summary = Column(Text, nullable=True)
    recommendation = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    feedback = relationship("Feedback", back_populates="analysis")
