"""
Service layer between transports (HTTP, CLI) and the dispatcher.

Dependencies are built from configuration on first use and cached for the
life of the service.
"""

from typing import Any, Dict, List, Optional

from ..core.config import get_node_store, get_store_provider, get_text_service
from ..core.dispatcher import EVENT_NODE_TYPE, brain
from ..core.types import BrainDependencies
from ..store.base import NodeStore
from ..store.sqlite_store import SQLiteNodeStore
from ..util.logging import logger
from ..vector.text_service import TextService

DEFAULT_EVENT_LIMIT = 20


class BrainService:
    """Owns one set of dependencies and dispatches actions against it."""

    def __init__(self, store: Optional[NodeStore] = None, text_service: Optional[TextService] = None):
        self._store = store
        self._text_service = text_service
        self._deps: Optional[BrainDependencies] = None

    async def get_dependencies(self) -> BrainDependencies:
        if self._deps is None:
            store = self._store if self._store is not None else get_node_store()
            if isinstance(store, SQLiteNodeStore) and not store.initialized:
                await store.connect()

            text_service = self._text_service if self._text_service is not None else get_text_service()
            self._deps = BrainDependencies(store=store, text_service=text_service)
            logger.info(f"Brain service ready (store={store.__class__.__name__})")

        return self._deps

    @property
    def store_name(self) -> str:
        if self._store is not None:
            return self._store.__class__.__name__
        return get_store_provider()

    async def handle_brain_request(self, action: Any) -> Dict[str, Any]:
        """Dispatch one raw action against the cached dependencies."""
        deps = await self.get_dependencies()
        return await brain(action, deps)

    async def count_nodes(self) -> int:
        deps = await self.get_dependencies()
        return await deps.store.count_nodes()

    async def list_events(self, status: Optional[str] = None, limit: int = DEFAULT_EVENT_LIMIT) -> List[Dict[str, Any]]:
        """
        List audit events, newest first.

        Args:
            status: Only events closed with this status ("success" or "failure")
            limit: Maximum number of events returned
        """
        deps = await self.get_dependencies()
        nodes = await deps.store.query_nodes({"type": EVENT_NODE_TYPE})

        events = []
        for node in reversed(nodes):
            if status is not None and node.metadata.get("status") != status:
                continue
            events.append({
                "id": node.id,
                "action": node.metadata.get("action", node.content),
                "status": node.metadata.get("status"),
                "input": node.metadata.get("input"),
                "output": node.metadata.get("output"),
                "error": node.metadata.get("error"),
                "timestamp": node.metadata.get("timestamp"),
                "created_at": node.created_at,
                "updated_at": node.updated_at,
            })
            if len(events) >= limit:
                break

        return events


_service: Optional[BrainService] = None


def get_brain_service() -> BrainService:
    """Process-wide service instance, used as a FastAPI dependency."""
    global _service
    if _service is None:
        _service = BrainService()
    return _service


def reset_brain_service() -> None:
    global _service
    _service = None
