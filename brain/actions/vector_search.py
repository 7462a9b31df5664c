"""Vector-search action: nearest nodes to an embedded query."""

from typing import Any, Dict

from ..core.types import BrainDependencies, VectorSearchPayload


async def vector_search(payload: VectorSearchPayload, deps: BrainDependencies) -> Dict[str, Any]:
    query_embedding = await deps.text_service.generate_embedding(payload.query)

    nodes = await deps.store.query_nodes_by_vector(query_embedding, int(payload.limit))

    return {
        # The store capability does not report similarity scores
        "results": [{"id": node.id, "content": node.content, "score": None} for node in nodes],
        "count": len(nodes),
    }
