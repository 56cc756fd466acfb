from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LLMConfig:
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"  # 1536 dims
    temperature: float = 0.3
    # the pipeline does not retry; keep the SDK from retrying behind its back
    max_retries: int = 0
