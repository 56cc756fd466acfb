from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List


class CompletionModel(ABC):
    @abstractmethod
    async def complete(self, prompt: str, max_output_tokens: int) -> str:
        """Return the raw text of a single completion; raise on provider errors."""
        ...


class Embedder(ABC):
    @abstractmethod
    async def embed(self, text: str) -> List[float]: ...
