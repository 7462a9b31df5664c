"""Greeting action: writes a hello node and echoes the message."""

from datetime import datetime, timezone
from typing import Any, Dict

from ..core.types import BrainDependencies, HelloPayload, NodeInput

DEFAULT_NAME = "Brain"


async def hello_action(payload: HelloPayload, deps: BrainDependencies) -> Dict[str, Any]:
    name = payload.name or DEFAULT_NAME
    message = f"Hello from {name} Architecture!"

    node = await deps.store.create_node(NodeInput(
        type="hello",
        content=message,
        metadata={
            "name": name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    ))

    return {
        "message": message,
        "node_id": node.id,
    }
