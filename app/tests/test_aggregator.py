from app.core.batch.aggregator import (
    FALLBACK_WARNING,
    build_batch_result,
    has_fallback_signature,
)
from app.core.batch.types import (
    FALLBACK_RECOMMENDATION,
    FALLBACK_SUMMARY,
    AnalysisResult,
    ProcessedItemResult,
)

GOOD = AnalysisResult(
    sentiment="positive",
    sentiment_score=0.8,
    topics=["price"],
    summary="Cheap",
    recommendation="Keep prices",
)
DEFAULTED = AnalysisResult(
    sentiment="neutral",
    topics=[],
    summary=FALLBACK_SUMMARY,
    recommendation=FALLBACK_RECOMMENDATION,
)


def ok(i, analysis=GOOD):
    return ProcessedItemResult(index=i, success=True, feedback_id=f"f{i}", analysis=analysis)


def failed(i):
    return ProcessedItemResult(index=i, success=False, error="nope")


def test_counts_and_message():
    result = build_batch_result([ok(0), failed(1), ok(2)])

    assert result.success is True
    assert (result.total, result.succeeded, result.failed) == (3, 2, 1)
    assert result.message == "Processed 3 items: 2 succeeded, 1 failed"
    assert result.warning is None


def test_no_success_means_batch_failure():
    result = build_batch_result([failed(0), failed(1)])
    assert result.success is False
    assert result.message == "Processed 2 items: 0 succeeded, 2 failed"


def test_single_defaulted_item_triggers_warning():
    result = build_batch_result([ok(0), ok(1, DEFAULTED)])
    assert result.warning == FALLBACK_WARNING


def test_partial_defaults_do_not_trigger_warning():
    # sentiment parsed a score, so this is not the outage signature
    partial = AnalysisResult(
        sentiment="neutral",
        sentiment_score=0.5,
        topics=[],
        summary=FALLBACK_SUMMARY,
        recommendation=FALLBACK_RECOMMENDATION,
    )
    assert not has_fallback_signature([ok(0, partial)])


def test_failed_items_are_not_inspected_for_fallback():
    item = ProcessedItemResult(index=0, success=False, analysis=DEFAULTED, error="x")
    assert not has_fallback_signature([item])
