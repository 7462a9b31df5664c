"""
Record types exchanged with vector indexes.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class VectorRecord:
    """A vector keyed by the node id it belongs to."""

    id: str
    """Node identifier"""

    vector: List[float]
    """Embedding of the node content"""


@dataclass
class QueryResult:
    """Represents a search result from a vector index."""

    id: str
    """Identifier for the matching record"""

    score: float
    """Cosine similarity of the match (-1 to 1); zero vectors score 0"""
