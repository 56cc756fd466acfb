from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class BatchConfig:
    max_items: int = 200
    embedding_concurrency: int = 5
    # lower than embedding: every analysis unit issues three model calls
    analysis_concurrency: int = 3
