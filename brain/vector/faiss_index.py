"""
FAISS-backed vector index (inner product over normalized vectors).
"""

from typing import Dict, List, Sequence

import numpy as np

from .index import IVectorIndex
from .types import QueryResult, VectorRecord


class FaissVectorIndex(IVectorIndex):
    """FAISS-backed implementation of IVectorIndex.

    IndexFlatIP has no cheap removal, so deletes and replacements mark the
    index dirty and it is rebuilt from the retained vectors on the next search.
    """

    def __init__(self, dimension: int = 384):
        """
        Initialize FAISS vector index.

        Args:
            dimension: Dimension of the vectors (default: 384 for hash embeddings)
        """
        import faiss
        self.faiss = faiss
        self.dimension = dimension

        # Create a flat index (inner product metric for cosine similarity)
        self.index = faiss.IndexFlatIP(dimension)

        # Normalized vectors by record ID, in insertion order
        self._vectors: Dict[str, np.ndarray] = {}
        self.vector_id_map: Dict[int, str] = {}  # FAISS row -> record ID
        self._dirty = False

    def _normalize(self, vector: Sequence[float]) -> np.ndarray:
        array = np.asarray(vector, dtype=np.float32)
        if array.shape != (self.dimension,):
            raise ValueError(f"Vector dimension {array.size} does not match expected dimension {self.dimension}")

        norm = np.linalg.norm(array)
        if norm > 0:
            array = array / norm
        return array

    def add(self, record: VectorRecord) -> None:
        vector = self._normalize(record.vector)

        if record.id in self._vectors:
            # Replacing a vector means the existing row is stale
            del self._vectors[record.id]
            self._dirty = True

        self._vectors[record.id] = vector
        if not self._dirty:
            self.vector_id_map[self.index.ntotal] = record.id
            self.index.add(vector.reshape(1, -1))

    def batch_add(self, records: List[VectorRecord]) -> None:
        for record in records:
            self.add(record)

    def _rebuild(self) -> None:
        self.index = self.faiss.IndexFlatIP(self.dimension)
        self.vector_id_map = {}

        if self._vectors:
            ids = list(self._vectors.keys())
            batch_vectors = np.vstack([self._vectors[i] for i in ids]).astype(np.float32)
            self.index.add(batch_vectors)
            self.vector_id_map = dict(enumerate(ids))

        self._dirty = False

    def search(self, query_vector: Sequence[float], top_k: int = 10) -> List[QueryResult]:
        if self._dirty:
            self._rebuild()

        if not self.index.ntotal or top_k <= 0:
            return []

        query_array = self._normalize(query_vector).reshape(1, -1)

        scores, indices = self.index.search(query_array, min(top_k, self.index.ntotal))

        query_results = []
        for score, vector_index in zip(scores[0], indices[0]):
            # FAISS pads with -1 when fewer results exist
            if vector_index < 0:
                continue
            query_results.append(QueryResult(id=self.vector_id_map[int(vector_index)], score=float(score)))

        return query_results

    def delete(self, record_id: str) -> None:
        if record_id in self._vectors:
            del self._vectors[record_id]
            self._dirty = True

    def clear(self) -> None:
        self.index = self.faiss.IndexFlatIP(self.dimension)
        self._vectors.clear()
        self.vector_id_map.clear()
        self._dirty = False

    def __len__(self) -> int:
        return len(self._vectors)
