"""
Embedding providers: a deterministic stub for tests and offline use, and a
sentence-transformers provider for real semantic similarity.
"""

import math
from abc import ABC, abstractmethod
from typing import List


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic character-folding embedding provider.

    Each character code is folded into slot ``i % dimension`` by averaging,
    then the vector is L2-normalized. Texts sharing characters at the same
    positions land close together, which is enough for demos and tests
    without model downloads. All components are non-negative, so any two
    non-empty texts have positive cosine similarity.
    """

    def __init__(self, dimension: int = 384):
        self.dimension = dimension

    def embed_text(self, text: str) -> List[float]:
        vector = [0.0] * self.dimension

        for i, char in enumerate(text):
            slot = i % self.dimension
            vector[slot] = (vector[slot] + ord(char) / 255) / 2

        # Normalize
        magnitude = math.sqrt(sum(value * value for value in vector))
        if magnitude > 0:
            vector = [value / magnitude for value in vector]

        return vector

    def get_dimension(self) -> int:
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    Defaults to all-MiniLM-L6-v2, whose 384-dimension output matches the
    store's fixed embedding size. The model is loaded on first use.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector using sentence transformers."""
        embedding = self.model.encode(text, convert_to_tensor=False)
        return [float(value) for value in embedding]

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            # Get dimension by encoding a dummy string
            dummy_embedding = self.model.encode("test", convert_to_tensor=False)
            self._dimension = len(dummy_embedding)
        return self._dimension


def fit_to_dimension(vector: List[float], dimension: int = 384) -> List[float]:
    """Zero-pad or truncate a vector to exactly ``dimension`` components."""
    values = [float(value) for value in vector]
    if len(values) < dimension:
        values.extend([0.0] * (dimension - len(values)))
    return values[:dimension]
