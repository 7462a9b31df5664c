"""
Vector indexes, embedding providers and the text service.
"""

from .embeddings import DeterministicHashEmbedding, IEmbeddingProvider, SentenceTransformerEmbedding
from .faiss_index import FaissVectorIndex
from .index import IVectorIndex, SimpleInMemoryVectorIndex
from .text_service import StubTextService, TextService
from .types import QueryResult, VectorRecord

__all__ = [
    'IVectorIndex',
    'SimpleInMemoryVectorIndex',
    'FaissVectorIndex',
    'VectorRecord',
    'QueryResult',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'TextService',
    'StubTextService',
]
