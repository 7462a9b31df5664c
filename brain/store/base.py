"""
Node/edge store capability consumed by the dispatcher and its handlers.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..core.types import Edge, Node, NodeInput, NodeUpdate
from ..vector.embeddings import fit_to_dimension

INTERPRETED_FILTER_KEYS = ("type", "content")


def utc_now() -> str:
    """ISO-8601 UTC timestamp used for created_at/updated_at."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def normalize_embedding(vector: Optional[List[float]], dimension: int = 384) -> List[float]:
    """Apply the store boundary policy: missing -> zeros, short -> zero-padded, long -> truncated."""
    if vector is None:
        return [0.0] * dimension
    return fit_to_dimension(vector, dimension)


def matches_filter(node: Node, filter: Dict[str, Any]) -> bool:
    """Equality match on type and content; other filter keys are ignored."""
    for key in INTERPRETED_FILTER_KEYS:
        expected = filter.get(key)
        # Falsy values mean "no constraint", as with an omitted key
        if expected and getattr(node, key) != expected:
            return False
    return True


def ignored_filter_keys(filter: Dict[str, Any]) -> List[str]:
    return [key for key in filter if key not in INTERPRETED_FILTER_KEYS]


class NodeStore(ABC):
    """Abstract node/edge store.

    All methods are coroutines. Implementations assign ids and timestamps,
    apply the embedding dimension policy, and are safe to call from
    concurrent dispatches on one event loop.
    """

    dimension: int = 384

    @abstractmethod
    async def create_node(self, data: NodeInput) -> Node:
        """Persist a new node and return it with id and timestamps assigned."""
        pass

    @abstractmethod
    async def update_node(self, node_id: str, data: NodeUpdate) -> Node:
        """Merge-patch a node; raises NodeNotFoundError for unknown ids."""
        pass

    @abstractmethod
    async def get_node(self, node_id: str) -> Optional[Node]:
        pass

    @abstractmethod
    async def query_nodes(self, filter: Dict[str, Any]) -> List[Node]:
        """Return nodes matching filter in store order; empty filter matches all."""
        pass

    @abstractmethod
    async def query_nodes_by_vector(self, vector: List[float], limit: int = 10) -> List[Node]:
        """Return up to limit nodes, nearest first. Scores are not reported."""
        pass

    @abstractmethod
    async def create_edge(self, from_id: str, to_id: str, type: str) -> None:
        pass

    @abstractmethod
    async def list_edges(self, from_id: Optional[str] = None, to_id: Optional[str] = None,
                         type: Optional[str] = None) -> List[Edge]:
        """List edges, optionally restricted by endpoint and type."""
        pass

    @abstractmethod
    async def count_nodes(self) -> int:
        pass

    def _coerce_input(self, data) -> NodeInput:
        return data if isinstance(data, NodeInput) else NodeInput.model_validate(data)

    def _coerce_update(self, data) -> NodeUpdate:
        return data if isinstance(data, NodeUpdate) else NodeUpdate.model_validate(data)
