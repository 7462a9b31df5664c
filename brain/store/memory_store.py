"""
In-memory node store. Used by tests and the STORE_PROVIDER=memory setting.
"""

from typing import Any, Dict, List, Optional

from ..core.errors import NodeNotFoundError
from ..core.types import Edge, Node, NodeInput, NodeUpdate
from ..util.logging import logger
from ..vector.index import IVectorIndex, SimpleInMemoryVectorIndex
from ..vector.types import VectorRecord
from .base import NodeStore, ignored_filter_keys, matches_filter, new_id, normalize_embedding, utc_now


class InMemoryNodeStore(NodeStore):
    """Dict-backed NodeStore; nodes are returned in insertion order."""

    def __init__(self, vector_index: Optional[IVectorIndex] = None, dimension: int = 384):
        self.dimension = dimension
        self.vector_index = vector_index if vector_index is not None else SimpleInMemoryVectorIndex()
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []

    async def create_node(self, data: NodeInput) -> Node:
        data = self._coerce_input(data)
        now = utc_now()

        node = Node(
            id=new_id(),
            type=data.type,
            content=data.content,
            metadata=dict(data.metadata or {}),
            embedding=normalize_embedding(data.embedding, self.dimension),
            created_at=now,
            updated_at=now,
        )
        self._nodes[node.id] = node
        self.vector_index.add(VectorRecord(id=node.id, vector=node.embedding))

        logger.log_store_operation("create_node", node.id, {"type": node.type})
        return node.model_copy(deep=True)

    async def update_node(self, node_id: str, data: NodeUpdate) -> Node:
        data = self._coerce_update(data)
        existing = self._nodes.get(node_id)
        if existing is None:
            raise NodeNotFoundError(node_id)

        updated = existing.model_copy(update={
            "content": data.content if data.content is not None else existing.content,
            "metadata": dict(data.metadata) if data.metadata is not None else existing.metadata,
            "embedding": (normalize_embedding(data.embedding, self.dimension)
                          if data.embedding is not None else existing.embedding),
            "updated_at": utc_now(),
        }, deep=True)
        self._nodes[node_id] = updated

        if data.embedding is not None:
            self.vector_index.add(VectorRecord(id=node_id, vector=updated.embedding))

        logger.log_store_operation("update_node", node_id)
        return updated.model_copy(deep=True)

    async def get_node(self, node_id: str) -> Optional[Node]:
        node = self._nodes.get(node_id)
        return node.model_copy(deep=True) if node is not None else None

    async def query_nodes(self, filter: Dict[str, Any]) -> List[Node]:
        filter = filter or {}
        ignored = ignored_filter_keys(filter)
        if ignored:
            logger.debug(f"query_nodes ignoring unsupported filter keys: {ignored}")

        return [node.model_copy(deep=True) for node in self._nodes.values() if matches_filter(node, filter)]

    async def query_nodes_by_vector(self, vector: List[float], limit: int = 10) -> List[Node]:
        if len(vector) != self.dimension:
            logger.warning(
                f"Vector dimension mismatch. Expected {self.dimension}, got {len(vector)}. Padding/truncating."
            )
        query = normalize_embedding(vector, self.dimension)

        hits = self.vector_index.search(query, top_k=int(limit))
        return [self._nodes[hit.id].model_copy(deep=True) for hit in hits if hit.id in self._nodes]

    async def create_edge(self, from_id: str, to_id: str, type: str) -> None:
        edge = Edge(id=new_id(), from_id=from_id, to_id=to_id, type=type, metadata={}, created_at=utc_now())
        self._edges.append(edge)
        logger.log_store_operation("create_edge", edge.id, {"from_id": from_id, "to_id": to_id, "type": type})

    async def list_edges(self, from_id: Optional[str] = None, to_id: Optional[str] = None,
                         type: Optional[str] = None) -> List[Edge]:
        return [
            edge.model_copy(deep=True) for edge in self._edges
            if (from_id is None or edge.from_id == from_id)
            and (to_id is None or edge.to_id == to_id)
            and (type is None or edge.type == type)
        ]

    async def count_nodes(self) -> int:
        return len(self._nodes)
