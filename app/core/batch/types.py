from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

SENTIMENTS = ("positive", "neutral", "negative", "mixed")

# Sentinels substituted when the summary sub-call fails. The aggregator
# looks for them to detect a degraded batch.
FALLBACK_SUMMARY = "Unable to generate summary"
FALLBACK_RECOMMENDATION = "Review feedback manually"


@dataclass(frozen=True)
class FeedbackItem:
    text: str
    rating: Optional[float] = None
    source: Optional[str] = None
    product_id: Optional[str] = None
    username: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FeedbackItem":
        """Build an item from a request body, accepting camelCase keys."""
        product_id = data.get("product_id")
        if product_id is None:
            product_id = data.get("productId")
        return cls(
            text=data.get("text"),
            rating=data.get("rating"),
            source=data.get("source"),
            product_id=product_id,
            username=data.get("username"),
        )

    def metadata(self) -> Dict[str, Any]:
        return {
            "rating": self.rating,
            "source": self.source,
            "product_id": self.product_id,
            "username": self.username,
        }


@dataclass(frozen=True)
class AnalysisResult:
    sentiment: str
    topics: List[str]
    summary: str
    recommendation: str
    sentiment_score: Optional[float] = None

    def uses_fallback_values(self) -> bool:
        return (
            self.summary == FALLBACK_SUMMARY
            and self.recommendation == FALLBACK_RECOMMENDATION
            and len(self.topics) == 0
            and self.sentiment_score is None
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"sentiment": self.sentiment}
        if self.sentiment_score is not None:
            out["sentiment_score"] = self.sentiment_score
        out["topics"] = list(self.topics)
        out["summary"] = self.summary
        out["recommendation"] = self.recommendation
        return out


@dataclass(frozen=True)
class ProcessedItemResult:
    index: int
    success: bool
    feedback_id: Optional[str] = None
    analysis: Optional[AnalysisResult] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"index": self.index, "success": self.success}
        if self.feedback_id is not None:
            out["feedbackId"] = self.feedback_id
        if self.analysis is not None:
            out["analysis"] = self.analysis.to_dict()
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class BatchResult:
    success: bool
    message: str
    total: int
    succeeded: int
    failed: int
    results: List[ProcessedItemResult] = field(default_factory=list)
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }
        if self.warning:
            out["warning"] = self.warning
        out["results"] = [r.to_dict() for r in self.results]
        return out
