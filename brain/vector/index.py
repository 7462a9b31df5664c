"""
Vector index interface and a numpy brute-force implementation.

Indexes hold node ids and embeddings only; node content lives in the store.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np

from .types import QueryResult, VectorRecord


class IVectorIndex(ABC):
    """Abstract interface for vector index operations."""

    @abstractmethod
    def add(self, record: VectorRecord) -> None:
        """Add (or replace) a single vector record."""
        pass

    @abstractmethod
    def batch_add(self, records: List[VectorRecord]) -> None:
        """Add multiple vector records."""
        pass

    @abstractmethod
    def search(self, query_vector: Sequence[float], top_k: int = 10) -> List[QueryResult]:
        """Return up to top_k records, most similar first."""
        pass

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Delete a vector record by ID."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all records from the index."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class SimpleInMemoryVectorIndex(IVectorIndex):
    """In-memory IVectorIndex using cosine similarity.

    Zero vectors (the store default for nodes without an embedding) are kept
    and score 0.0, so they still rank behind any positive match. Equal scores
    keep insertion order.
    """

    def __init__(self):
        self._index = {}  # record_id -> normalized vector

    def add(self, record: VectorRecord) -> None:
        vector = np.asarray(record.vector, dtype=np.float64)

        # Store normalized vector for similarity calculations
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm

        # Re-adding an id moves it to the end of the insertion order
        self._index.pop(record.id, None)
        self._index[record.id] = vector

    def batch_add(self, records: List[VectorRecord]) -> None:
        for record in records:
            self.add(record)

    def search(self, query_vector: Sequence[float], top_k: int = 10) -> List[QueryResult]:
        if not self._index or top_k <= 0:
            return []

        query = np.asarray(query_vector, dtype=np.float64)
        norm = np.linalg.norm(query)
        if norm > 0:
            query = query / norm

        # Calculate cosine similarities
        similarities = []
        for record_id, stored_vector in self._index.items():
            if stored_vector.shape != query.shape:
                raise ValueError(
                    f"Vector dimension {query.shape[0]} does not match indexed dimension {stored_vector.shape[0]}"
                )
            similarities.append((record_id, float(np.dot(query, stored_vector))))

        # Sort by similarity (descending); sorted() is stable so ties keep insertion order
        ranked = sorted(similarities, key=lambda x: x[1], reverse=True)

        return [QueryResult(id=record_id, score=score) for record_id, score in ranked[:top_k]]

    def delete(self, record_id: str) -> None:
        self._index.pop(record_id, None)

    def clear(self) -> None:
        self._index.clear()

    def __len__(self) -> int:
        return len(self._index)
