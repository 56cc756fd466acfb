from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from app.core.analysis.analyzer import FeedbackAnalyzer
from app.core.batch.aggregator import build_batch_result
from app.core.batch.config import BatchConfig
from app.core.batch.types import BatchResult, FeedbackItem, ProcessedItemResult
from app.core.batch.validator import validate_batch
from app.core.concurrency.runner import run_bounded
from app.core.llm.base import Embedder
from app.core.store.base import FeedbackStore
from app.utils.telemetry import astep, count_items

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Ingested:
    index: int
    feedback_id: str
    item: FeedbackItem


def _error_message(e: Exception, fallback: str) -> str:
    return str(e) or fallback


class BatchAnalysisService:
    """
    Validate -> ingest -> embed (best effort) -> analyze -> aggregate.

    ``results`` is an index-addressed list shared by the stages; every slot is
    written exactly once, by ingestion when the insert fails or by analysis
    otherwise.
    """

    def __init__(
        self,
        store: FeedbackStore,
        embedder: Embedder,
        analyzer: FeedbackAnalyzer,
        cfg: BatchConfig = BatchConfig(),
    ):
        self.store = store
        self.embedder = embedder
        self.analyzer = analyzer
        self.cfg = cfg

    async def analyze_batch(
        self,
        user_id: str,
        items: Sequence[Union[FeedbackItem, Mapping[str, Any]]],
    ) -> BatchResult:
        # raises BatchValidationError before anything is written
        validated = validate_batch(user_id, items, max_items=self.cfg.max_items)
        results: List[Optional[ProcessedItemResult]] = [None] * len(validated)

        async with astep("batch.ingest", items=len(validated)):
            ingested = await self._ingest(user_id, validated, results)

        if not ingested:
            return BatchResult(
                success=False,
                message="All feedback insertions failed",
                total=len(results),
                succeeded=0,
                failed=len(results),
                results=results,
            )

        logger.info(
            f"Successfully inserted {len(ingested)}/{len(validated)} feedback records"
        )

        async with astep("batch.embed", items=len(ingested)):
            await run_bounded(ingested, self._embed_one, self.cfg.embedding_concurrency)
        logger.info("Embeddings generation complete")

        async with astep("batch.analyze", items=len(ingested)):
            analyzed = await run_bounded(
                ingested, self._analyze_one, self.cfg.analysis_concurrency
            )
        for record, outcome in zip(ingested, analyzed):
            results[record.index] = outcome
        logger.info("AI analysis complete")

        batch = build_batch_result(results)
        count_items("succeeded", batch.succeeded)
        count_items("failed", batch.failed)
        if batch.warning:
            logger.warning(f"Batch degraded to fallback values for user {user_id}")
        return batch

    # ------------- stages -------------

    async def _ingest(
        self,
        user_id: str,
        items: List[FeedbackItem],
        results: List[Optional[ProcessedItemResult]],
    ) -> List[_Ingested]:
        logger.info(f"Inserting {len(items)} feedback records...")

        async def insert(index: int, item: FeedbackItem) -> Optional[_Ingested]:
            try:
                feedback = await self.store.insert_feedback(
                    user_id, item.text, item.metadata()
                )
            except Exception as e:
                logger.error(f"Error inserting feedback at index {index}: {e}")
                results[index] = ProcessedItemResult(
                    index=index,
                    success=False,
                    error=_error_message(e, "Unknown error during insertion"),
                )
                return None

            if not feedback:
                results[index] = ProcessedItemResult(
                    index=index,
                    success=False,
                    error="Failed to insert feedback into database",
                )
                return None
            return _Ingested(index=index, feedback_id=str(feedback.id), item=item)

        inserted = await asyncio.gather(
            *(insert(i, item) for i, item in enumerate(items))
        )
        return [r for r in inserted if r is not None]

    async def _embed_one(self, record: _Ingested, _: int) -> None:
        try:
            vector = await self.embedder.embed(record.item.text)
            updated = await self.store.update_embedding(record.feedback_id, vector)
            if not updated:
                logger.warning(
                    f"Failed to update embedding for feedback {record.feedback_id}"
                )
        except Exception as e:
            # enrichment only; the item still goes on to analysis
            logger.error(
                f"Error generating embedding for feedback {record.feedback_id}: {e}"
            )

    async def _analyze_one(self, record: _Ingested, _: int) -> ProcessedItemResult:
        try:
            analysis = await self.analyzer.analyze(record.item.text)
            saved = await self.store.insert_analysis(record.feedback_id, analysis)
        except Exception as e:
            logger.error(f"Error analyzing feedback {record.feedback_id}: {e}")
            return ProcessedItemResult(
                index=record.index,
                success=False,
                feedback_id=record.feedback_id,
                error=_error_message(e, "Unknown error during analysis"),
            )

        if not saved:
            return ProcessedItemResult(
                index=record.index,
                success=False,
                feedback_id=record.feedback_id,
                error="Failed to save analysis results",
            )
        return ProcessedItemResult(
            index=record.index,
            success=True,
            feedback_id=record.feedback_id,
            analysis=analysis,
        )
