import pytest

from app.core.batch.types import FeedbackItem
from app.core.batch.validator import (
    MAX_ITEMS_PER_BATCH,
    BatchValidationError,
    validate_batch,
)


def test_requires_user_id():
    with pytest.raises(BatchValidationError, match="user_id is required"):
        validate_batch("", [{"text": "hi"}])


def test_rejects_empty_batch():
    with pytest.raises(BatchValidationError, match="Empty items array"):
        validate_batch("u1", [])


def test_rejects_oversized_batch():
    items = [{"text": f"item {i}"} for i in range(MAX_ITEMS_PER_BATCH + 1)]

    with pytest.raises(BatchValidationError) as exc:
        validate_batch("u1", items)

    assert "201 items provided" in str(exc.value)
    assert "maximum is 200" in str(exc.value)


def test_accepts_exactly_max_items():
    items = [{"text": f"item {i}"} for i in range(MAX_ITEMS_PER_BATCH)]
    assert len(validate_batch("u1", items)) == MAX_ITEMS_PER_BATCH


@pytest.mark.parametrize("bad", [{"text": "   "}, {"text": ""}, {"text": 42}, {}, "x"])
def test_reports_first_invalid_item_index(bad):
    with pytest.raises(BatchValidationError) as exc:
        validate_batch("u1", [{"text": "fine"}, bad])

    assert str(exc.value) == (
        "Invalid item at index 1: text is required and must be a non-empty string"
    )


def test_normalizes_mappings_and_camel_case_product_id():
    items = validate_batch(
        "u1",
        [
            {"text": "Great", "rating": 5, "productId": "sku-1", "username": "ann"},
            FeedbackItem(text="Meh", source="email"),
        ],
    )

    assert items[0] == FeedbackItem(
        text="Great", rating=5, product_id="sku-1", username="ann"
    )
    assert items[1].source == "email"


def test_custom_max_items():
    with pytest.raises(BatchValidationError, match="maximum is 2"):
        validate_batch("u1", [{"text": "a"}, {"text": "b"}, {"text": "c"}], max_items=2)
