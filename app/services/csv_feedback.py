from __future__ import annotations
import math
from typing import List, Optional

import pandas as pd

from app.core.batch.types import FeedbackItem

# Checked in order; the first column is used when none of them is present.
TEXT_COLUMN_NAMES = [
    "text",
    "feedback",
    "content",
    "comment",
    "review",
    "message",
    "description",
]


def find_text_column(columns: List[str]) -> Optional[str]:
    lowered = [str(c).lower().strip() for c in columns]
    for name in TEXT_COLUMN_NAMES:
        if name in lowered:
            return columns[lowered.index(name)]
    return columns[0] if columns else None


def _cell(row: pd.Series, *names: str) -> Optional[str]:
    for name in names:
        if name in row.index:
            value = str(row[name]).strip()
            if value:
                return value
    return None


def _rating(row: pd.Series) -> Optional[float]:
    raw = _cell(row, "rating")
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def rows_to_feedback_items(df: pd.DataFrame) -> List[FeedbackItem]:
    """
    Convert parsed CSV rows into feedback items. Rows whose text cell is blank
    are skipped rather than failing the whole upload.
    """
    columns = list(df.columns)
    text_col = find_text_column(columns)
    if text_col is None:
        raise ValueError("Could not find text column in CSV")

    items: List[FeedbackItem] = []
    for _, row in df.iterrows():
        text = str(row[text_col]).strip()
        if not text:
            continue
        items.append(
            FeedbackItem(
                text=text,
                rating=_rating(row),
                source=_cell(row, "source"),
                product_id=_cell(row, "product_id", "productId"),
                username=_cell(row, "username", "user_name", "user"),
            )
        )
    return items
