# app/core/analysis/analyzer.py
from __future__ import annotations
import logging
import math
import time
from typing import List, Optional, Tuple

from app.core.analysis.json_parser import safe_parse_json
from app.core.analysis.prompts import (
    SENTIMENT_MAX_TOKENS,
    SENTIMENT_PROMPT,
    SUMMARY_MAX_TOKENS,
    SUMMARY_PROMPT,
    TOPICS_MAX_TOKENS,
    TOPICS_PROMPT,
)
from app.core.batch.types import (
    FALLBACK_RECOMMENDATION,
    FALLBACK_SUMMARY,
    SENTIMENTS,
    AnalysisResult,
)
from app.core.llm.base import CompletionModel

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class FeedbackAnalyzer:
    """
    Three model calls per feedback text: sentiment, topics, and
    summary + recommendation. Each call degrades to its own default on
    failure and never affects the other two.
    """

    def __init__(self, model: CompletionModel):
        self.model = model

    async def sentiment(self, text: str) -> Tuple[str, Optional[float]]:
        try:
            raw = await self.model.complete(
                SENTIMENT_PROMPT.format(text=text), SENTIMENT_MAX_TOKENS
            )
        except Exception as e:
            logger.error(f"Sentiment analysis failed: {e}")
            return "neutral", None

        data = safe_parse_json(raw, {})
        if not isinstance(data, dict):
            return "neutral", None

        label = data.get("sentiment")
        sentiment = label if label in SENTIMENTS else "neutral"
        confidence = data.get("confidence")
        score = confidence if _is_number(confidence) else None
        return sentiment, score

    async def topics(self, text: str) -> List[str]:
        try:
            raw = await self.model.complete(
                TOPICS_PROMPT.format(text=text), TOPICS_MAX_TOKENS
            )
        except Exception as e:
            logger.error(f"Topic extraction failed: {e}")
            return []

        data = safe_parse_json(raw, {"topics": []})
        topics = data.get("topics") if isinstance(data, dict) else None
        if not isinstance(topics, list):
            return []
        return [t for t in topics if isinstance(t, str)]

    async def summary(self, text: str) -> Tuple[str, str]:
        try:
            raw = await self.model.complete(
                SUMMARY_PROMPT.format(text=text), SUMMARY_MAX_TOKENS
            )
        except Exception as e:
            logger.error(f"Summary generation failed: {e}")
            return FALLBACK_SUMMARY, FALLBACK_RECOMMENDATION

        data = safe_parse_json(raw, {})
        if not isinstance(data, dict):
            return FALLBACK_SUMMARY, FALLBACK_RECOMMENDATION

        summary = data.get("summary")
        recommendation = data.get("recommendation")
        return (
            summary if isinstance(summary, str) and summary else FALLBACK_SUMMARY,
            recommendation
            if isinstance(recommendation, str) and recommendation
            else FALLBACK_RECOMMENDATION,
        )

    async def analyze(self, text: str) -> AnalysisResult:
        start = time.perf_counter()

        sentiment, score = await self.sentiment(text)
        topics = await self.topics(text)
        summary, recommendation = await self.summary(text)

        logger.info(
            f"✓ analyzeFeedback ({(time.perf_counter() - start) * 1000:.0f}ms) "
            f"text_length={len(text)} sentiment={sentiment} "
            f"topics={len(topics)} has_score={score is not None}"
        )
        return AnalysisResult(
            sentiment=sentiment,
            sentiment_score=score,
            topics=topics,
            summary=summary,
            recommendation=recommendation,
        )
