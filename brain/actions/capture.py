"""
Capture-thought action: stores an embedded thought and links it to tag nodes.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from ..core.types import BrainDependencies, CaptureThoughtPayload, NodeInput

TAG_EDGE_TYPE = "tagged"


async def capture_thought(payload: CaptureThoughtPayload, deps: BrainDependencies) -> Dict[str, Any]:
    """
    Embed and store a thought, then attach each tag.

    Tags are resolved by content: an existing tag node is reused, otherwise one
    is created. Every tag in the input gets an edge, duplicates included.
    Nothing is rolled back if a later step fails.
    """
    text = payload.text
    tags = payload.tags or []

    embedding = await deps.text_service.generate_embedding(text)

    node = await deps.store.create_node(NodeInput(
        type="thought",
        content=text,
        embedding=embedding,
        metadata={
            "tags": tags,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    ))

    for tag in tags:
        # First find or create the tag node
        tag_nodes = await deps.store.query_nodes({"type": "tag", "content": tag})
        if tag_nodes:
            tag_node = tag_nodes[0]
        else:
            tag_node = await deps.store.create_node(NodeInput(type="tag", content=tag, metadata={}))

        await deps.store.create_edge(node.id, tag_node.id, TAG_EDGE_TYPE)

    return {
        "node_id": node.id,
        "message": f"Captured thought with {len(tags)} tags",
    }
