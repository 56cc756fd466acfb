# app/models/db/feedback.py

from sqlalchemy import JSON, Column, DateTime, Float, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    source = Column(String, nullable=True)  # e.g. "survey", "email", "social"
    product_id = Column(String, nullable=True, index=True)
    username = Column(String, nullable=True)
    rating = Column(Float, nullable=True)

    text = Column(Text, nullable=False)

    # text-embedding-3-small vector (1536 floats), filled in after insert
    embedding = Column(JSON, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    analysis = relationship(
        "FeedbackAnalysis",
        back_populates="feedback",
        uselist=False,
        cascade="all, delete-orphan",
    )
