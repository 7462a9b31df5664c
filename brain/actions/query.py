"""Query-nodes action: store-side filtering with a result limit."""

from typing import Any, Dict

from ..core.types import BrainDependencies, QueryNodesPayload

DEFAULT_LIMIT = 50


async def query_nodes(payload: QueryNodesPayload, deps: BrainDependencies) -> Dict[str, Any]:
    filter = payload.filter or {}
    limit = payload.limit if payload.limit is not None else DEFAULT_LIMIT

    # Filter semantics belong to the store
    nodes = await deps.store.query_nodes(filter)

    # Apply limit, keeping store order
    if len(nodes) > limit:
        nodes = nodes[:int(limit)]

    return {
        "nodes": [
            {
                "id": node.id,
                "type": node.type,
                "content": node.content,
                "created_at": node.created_at,
            }
            for node in nodes
        ],
        "count": len(nodes),
    }
