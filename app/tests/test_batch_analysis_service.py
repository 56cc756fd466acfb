import pytest

from app.core.batch.aggregator import FALLBACK_WARNING
from app.core.batch.config import BatchConfig
from app.core.batch.types import FALLBACK_RECOMMENDATION, FALLBACK_SUMMARY
from app.core.batch.validator import BatchValidationError
from app.tests.fakes import (
    FakeEmbedder,
    FakeStore,
    failing_model,
    good_model,
    make_service,
)


def items(*texts):
    return [{"text": t} for t in texts]


@pytest.mark.asyncio
async def test_happy_batch():
    store = FakeStore()
    service = make_service(store=store)

    result = await service.analyze_batch("u1", items("a", "b", "c"))

    assert result.success is True
    assert (result.total, result.succeeded, result.failed) == (3, 3, 0)
    assert result.message == "Processed 3 items: 3 succeeded, 0 failed"
    assert result.warning is None
    assert [r.index for r in result.results] == [0, 1, 2]
    assert all(r.feedback_id in store.analyses for r in result.results)
    assert len(store.embeddings) == 3


@pytest.mark.asyncio
async def test_results_are_aligned_with_input_under_concurrency():
    texts = [f"feedback {i}" for i in range(25)]
    store = FakeStore()
    service = make_service(
        store=store, cfg=BatchConfig(embedding_concurrency=4, analysis_concurrency=2)
    )

    result = await service.analyze_batch("u1", items(*texts))

    assert [r.index for r in result.results] == list(range(25))
    for i, r in enumerate(result.results):
        assert store.feedback[r.feedback_id].text == texts[i]


@pytest.mark.asyncio
async def test_validation_error_writes_nothing():
    store = FakeStore()
    service = make_service(store=store)

    with pytest.raises(BatchValidationError):
        await service.analyze_batch("u1", items("ok", "  "))

    assert store.insert_calls == 0


@pytest.mark.asyncio
async def test_oversized_batch_is_rejected_before_store_calls():
    store = FakeStore()
    service = make_service(store=store)

    with pytest.raises(BatchValidationError, match="maximum is 200"):
        await service.analyze_batch("u1", items(*[f"t{i}" for i in range(201)]))

    assert store.insert_calls == 0


@pytest.mark.asyncio
async def test_embedding_failure_does_not_fail_items():
    store = FakeStore()
    service = make_service(store=store, embedder=FakeEmbedder(fail=True))

    result = await service.analyze_batch("u1", items("a", "b"))

    assert result.success is True
    assert result.succeeded == 2
    assert store.embeddings == {}


@pytest.mark.asyncio
async def test_partial_insert_failure():
    store = FakeStore(raise_on_texts={"b"}, none_on_texts={"c"})
    service = make_service(store=store)

    result = await service.analyze_batch("u1", items("a", "b", "c"))

    assert result.success is True
    assert (result.succeeded, result.failed) == (1, 2)
    a, b, c = result.results
    assert a.success and a.analysis is not None
    assert not b.success and b.error == "connection reset" and b.feedback_id is None
    assert not c.success and c.error == "Failed to insert feedback into database"


@pytest.mark.asyncio
async def test_all_inserts_failing():
    store = FakeStore(raise_on_texts={"a", "b"})
    embedder = FakeEmbedder()
    model = good_model()
    service = make_service(store=store, embedder=embedder, model=model)

    result = await service.analyze_batch("u1", items("a", "b"))

    assert result.success is False
    assert result.message == "All feedback insertions failed"
    assert (result.total, result.succeeded, result.failed) == (2, 0, 2)
    assert embedder.calls == 0
    assert model.calls == []


@pytest.mark.asyncio
async def test_analysis_save_failure():
    store = FakeStore(fail_analysis_for_texts={"b"})
    service = make_service(store=store)

    result = await service.analyze_batch("u1", items("a", "b"))

    assert result.results[1].success is False
    assert result.results[1].error == "Failed to save analysis results"
    assert result.results[1].feedback_id is not None
    assert result.succeeded == 1


@pytest.mark.asyncio
async def test_analysis_store_exception_marks_item_failed():
    store = FakeStore(raise_on_analysis=True)
    service = make_service(store=store)

    result = await service.analyze_batch("u1", items("a"))

    assert result.success is False
    assert result.results[0].error == "analysis table unavailable"


@pytest.mark.asyncio
async def test_provider_outage_yields_fallback_warning():
    service = make_service(model=failing_model())

    result = await service.analyze_batch("u1", items("a", "b", "c", "d", "e"))

    # items still "succeed" with default values; the warning flags it
    assert result.success is True
    assert (result.total, result.succeeded, result.failed) == (5, 5, 0)
    for r in result.results:
        assert r.analysis.sentiment == "neutral"
        assert r.analysis.sentiment_score is None
        assert r.analysis.topics == []
        assert r.analysis.summary == FALLBACK_SUMMARY
        assert r.analysis.recommendation == FALLBACK_RECOMMENDATION
    assert result.warning == FALLBACK_WARNING
    assert "https://platform.openai.com/usage" in result.warning


@pytest.mark.asyncio
async def test_serialized_shape():
    result = await make_service().analyze_batch("u1", items("a"))
    body = result.to_dict()

    assert set(body) == {"success", "message", "total", "succeeded", "failed", "results"}
    item = body["results"][0]
    assert item["index"] == 0
    assert "feedbackId" in item
    assert item["analysis"]["sentiment_score"] == 0.9
