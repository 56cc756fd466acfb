# app/core/llm/openai_client.py
from __future__ import annotations
import logging
import time
from typing import List, Optional

from openai import AsyncOpenAI

from app.core.llm.base import CompletionModel, Embedder
from app.core.llm.config import LLMConfig
from app.utils.telemetry import astep

logger = logging.getLogger(__name__)


class _OpenAIBase:
    def __init__(self, cfg: LLMConfig):
        self.cfg = cfg
        self._client: Optional[AsyncOpenAI] = None  # lazy

    def _ensure_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        if not self.cfg.api_key:
            raise ValueError("OpenAI API key not configured")
        self._client = AsyncOpenAI(
            api_key=self.cfg.api_key, max_retries=self.cfg.max_retries
        )
        return self._client


class OpenAICompletionModel(_OpenAIBase, CompletionModel):
    async def complete(self, prompt: str, max_output_tokens: int) -> str:
        client = self._ensure_client()
        start = time.perf_counter()
        async with astep("llm.complete", model=self.cfg.model):
            try:
                response = await client.chat.completions.create(
                    model=self.cfg.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=self.cfg.temperature,
                    max_tokens=max_output_tokens,
                )
            except Exception as e:
                logger.error(
                    f"✗ completion failed after {time.perf_counter() - start:.2f}s: {e}"
                )
                raise

        content = response.choices[0].message.content or ""
        logger.debug(
            f"✓ completion ({time.perf_counter() - start:.2f}s, {len(content)} chars)"
        )
        return content


class OpenAIEmbedder(_OpenAIBase, Embedder):
    async def embed(self, text: str) -> List[float]:
        client = self._ensure_client()
        start = time.perf_counter()
        async with astep("llm.embed", model=self.cfg.embedding_model):
            response = await client.embeddings.create(
                model=self.cfg.embedding_model, input=text
            )

        embedding = list(response.data[0].embedding)
        logger.debug(
            f"✓ embedding ({time.perf_counter() - start:.2f}s, "
            f"text_length={len(text)}, dimensions={len(embedding)})"
        )
        return embedding


def llm_config_from_settings(settings) -> LLMConfig:
    return LLMConfig(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        embedding_model=settings.OPENAI_EMBEDDING_MODEL,
        temperature=settings.OPENAI_TEMPERATURE,
    )
