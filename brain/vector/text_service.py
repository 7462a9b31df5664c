"""
Text service capability: embeddings plus suggestion/refinement helpers.

The dispatcher only needs generate_embedding; suggestion and refinement are
part of the capability contract for other callers.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.types import AiSuggestion
from ..util.logging import logger
from .embeddings import IEmbeddingProvider, fit_to_dimension


class TextService(ABC):
    """Abstract text service consumed by action handlers."""

    @abstractmethod
    async def generate_embedding(self, text: str) -> List[float]:
        """Embed text into a fixed-length vector."""
        pass

    @abstractmethod
    async def generate_suggestion(self, content: str, hint: Optional[str] = None) -> Optional[AiSuggestion]:
        """Suggest a follow-up for content, or None when there is nothing to suggest."""
        pass

    @abstractmethod
    async def refine_content(self, content: str, prompt: str) -> str:
        """Rewrite content according to prompt."""
        pass


class StubTextService(TextService):
    """Offline text service: canned suggestions, provider-backed embeddings."""

    def __init__(self, provider: IEmbeddingProvider, dimension: int = 384):
        self.provider = provider
        self.dimension = dimension

    async def generate_embedding(self, text: str) -> List[float]:
        # Model-backed providers are CPU bound; keep them off the event loop
        vector = await asyncio.to_thread(self.provider.embed_text, text)

        if len(vector) != self.dimension:
            logger.warning(
                f"Embedding dimension mismatch from {self.provider.__class__.__name__}: "
                f"expected {self.dimension}, got {len(vector)}. Padding/truncating."
            )
        return fit_to_dimension(vector, self.dimension)

    async def generate_suggestion(self, content: str, hint: Optional[str] = None) -> Optional[AiSuggestion]:
        if hint:
            suggestion = f'Based on "{content}", consider: {hint}'
        else:
            suggestion = f'Consider expanding on: "{content}"'

        return AiSuggestion(suggestion=suggestion, confidence=0.75)

    async def refine_content(self, content: str, prompt: str) -> str:
        return f"{content}\n[Refined with: {prompt}]"
