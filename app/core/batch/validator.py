from __future__ import annotations
from typing import Any, List, Mapping, Optional, Sequence, Union

from app.core.batch.types import FeedbackItem

MAX_ITEMS_PER_BATCH = 200


class BatchValidationError(ValueError):
    """The batch is structurally invalid; nothing has been written."""


def _item_text(item: Union[FeedbackItem, Mapping[str, Any]]) -> Any:
    if isinstance(item, FeedbackItem):
        return item.text
    if isinstance(item, Mapping):
        return item.get("text")
    return None


def validate_batch(
    user_id: Optional[str],
    items: Sequence[Union[FeedbackItem, Mapping[str, Any]]],
    max_items: int = MAX_ITEMS_PER_BATCH,
) -> List[FeedbackItem]:
    """
    Whole-batch checks. Either every item passes and the normalized items are
    returned, or BatchValidationError is raised for the first problem found.
    """
    if not user_id:
        raise BatchValidationError("user_id is required")

    if items is None or len(items) == 0:
        raise BatchValidationError("Empty items array: at least one item is required")

    if len(items) > max_items:
        raise BatchValidationError(
            f"Batch size exceeds maximum: {len(items)} items provided, "
            f"maximum is {max_items}"
        )

    for i, item in enumerate(items):
        text = _item_text(item)
        if not isinstance(text, str) or not text.strip():
            raise BatchValidationError(
                f"Invalid item at index {i}: text is required and must be a non-empty string"
            )

    return [
        item if isinstance(item, FeedbackItem) else FeedbackItem.from_mapping(item)
        for item in items
    ]
