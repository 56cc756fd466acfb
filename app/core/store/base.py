from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.core.batch.types import AnalysisResult
from app.models.db.feedback import Feedback
from app.models.db.feedback_analysis import FeedbackAnalysis


class FeedbackStore(ABC):
    """Persistence for feedback rows, their embeddings, and their analyses."""

    @abstractmethod
    async def insert_feedback(
        self, user_id: str, text: str, metadata: Dict[str, Any]
    ) -> Optional[Feedback]: ...

    @abstractmethod
    async def update_embedding(self, feedback_id: str, vector: List[float]) -> bool: ...

    @abstractmethod
    async def insert_analysis(
        self, feedback_id: str, analysis: AnalysisResult
    ) -> Optional[FeedbackAnalysis]: ...

    @abstractmethod
    async def list_recent_feedback(
        self, user_id: str, limit: int = 50
    ) -> List[Feedback]:
        """Newest first, with the analysis relationship loaded."""
        ...
