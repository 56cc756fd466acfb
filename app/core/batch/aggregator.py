from __future__ import annotations
from typing import List, Sequence

from app.core.batch.types import BatchResult, ProcessedItemResult

FALLBACK_WARNING = (
    "Analysis completed with fallback values. This may indicate OpenAI API "
    "quota issues. Check your billing at https://platform.openai.com/usage"
)


def has_fallback_signature(results: Sequence[ProcessedItemResult]) -> bool:
    """True if any successful item came back with every field at its default."""
    return any(
        r.success and r.analysis is not None and r.analysis.uses_fallback_values()
        for r in results
    )


def build_batch_result(results: List[ProcessedItemResult]) -> BatchResult:
    total = len(results)
    succeeded = sum(1 for r in results if r.success)
    failed = total - succeeded

    return BatchResult(
        success=succeeded > 0,
        message=f"Processed {total} items: {succeeded} succeeded, {failed} failed",
        total=total,
        succeeded=succeeded,
        failed=failed,
        results=results,
        warning=FALLBACK_WARNING if has_fallback_signature(results) else None,
    )
