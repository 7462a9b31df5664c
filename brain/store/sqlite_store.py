"""
SQLite-backed node store.

Metadata and embeddings are stored as JSON text. Vector lookups load the
stored embeddings into a fresh vector index per query, which keeps the
database the single source of truth at the cost of a linear scan.
"""

import asyncio
import json
import sqlite3
from typing import Any, Callable, Dict, List, Optional

from ..core.db import get_db, health_check, init_db
from ..core.errors import NodeNotFoundError, StoreNotInitializedError
from ..core.types import Edge, Node, NodeInput, NodeUpdate
from ..util.logging import logger
from ..vector.index import IVectorIndex, SimpleInMemoryVectorIndex
from ..vector.types import VectorRecord
from .base import INTERPRETED_FILTER_KEYS, NodeStore, ignored_filter_keys, new_id, normalize_embedding, utc_now

NODE_COLUMNS = "id, type, content, metadata_json, embedding_json, created_at, updated_at"
EDGE_COLUMNS = "id, from_id, to_id, type, metadata_json, created_at"

SYSTEM_NODE_VERSION = "1.0.0"


class SQLiteNodeStore(NodeStore):
    """NodeStore persisted in a SQLite file. Call connect() before use."""

    def __init__(self, db_path: str, index_factory: Callable[[], IVectorIndex] = SimpleInMemoryVectorIndex,
                 dimension: int = 384):
        self.db_path = db_path
        self.index_factory = index_factory
        self.dimension = dimension
        self.initialized = False

    async def connect(self) -> None:
        """Create tables if needed; a fresh database is seeded with one system node."""
        try:
            created = await asyncio.to_thread(init_db, self.db_path)
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize SQLite store at {self.db_path}: {e}")
            raise

        self.initialized = True

        if created:
            logger.info(f"Created node store at {self.db_path}")
            await self.create_node(NodeInput(
                type="system",
                content="System initialized",
                metadata={"version": SYSTEM_NODE_VERSION, "initialized_at": utc_now()},
            ))

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise StoreNotInitializedError()

    @staticmethod
    def _row_to_node(row: sqlite3.Row) -> Node:
        return Node(
            id=row["id"],
            type=row["type"],
            content=row["content"],
            metadata=json.loads(row["metadata_json"]) if row["metadata_json"] else {},
            embedding=json.loads(row["embedding_json"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _row_to_edge(row: sqlite3.Row) -> Edge:
        return Edge(
            id=row["id"],
            from_id=row["from_id"],
            to_id=row["to_id"],
            type=row["type"],
            metadata=json.loads(row["metadata_json"]) if row["metadata_json"] else {},
            created_at=row["created_at"],
        )

    # Blocking helpers, run via asyncio.to_thread

    def _insert_node(self, node: Node) -> None:
        with get_db(self.db_path) as conn:
            conn.execute(
                f"INSERT INTO nodes ({NODE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (node.id, node.type, node.content, json.dumps(node.metadata),
                 json.dumps(node.embedding), node.created_at, node.updated_at)
            )
            conn.commit()

    def _fetch_node(self, node_id: str) -> Optional[Node]:
        with get_db(self.db_path) as conn:
            row = conn.execute(f"SELECT {NODE_COLUMNS} FROM nodes WHERE id = ?", (node_id,)).fetchone()
            return self._row_to_node(row) if row else None

    def _write_update(self, node_id: str, data: NodeUpdate) -> Node:
        with get_db(self.db_path) as conn:
            row = conn.execute(f"SELECT {NODE_COLUMNS} FROM nodes WHERE id = ?", (node_id,)).fetchone()
            if row is None:
                raise NodeNotFoundError(node_id)

            existing = self._row_to_node(row)
            updated = existing.model_copy(update={
                "content": data.content if data.content is not None else existing.content,
                "metadata": dict(data.metadata) if data.metadata is not None else existing.metadata,
                "embedding": (normalize_embedding(data.embedding, self.dimension)
                              if data.embedding is not None
                              else normalize_embedding(existing.embedding, self.dimension)),
                "updated_at": utc_now(),
            })

            conn.execute(
                "UPDATE nodes SET content = ?, metadata_json = ?, embedding_json = ?, updated_at = ? WHERE id = ?",
                (updated.content, json.dumps(updated.metadata), json.dumps(updated.embedding),
                 updated.updated_at, node_id)
            )
            conn.commit()
            return updated

    def _select_nodes(self, filter: Dict[str, Any]) -> List[Node]:
        # Build where clauses from filter
        where_clauses = []
        params = []
        for key in INTERPRETED_FILTER_KEYS:
            value = filter.get(key)
            if not value:
                continue
            # Columns hold text; any other value can never be equal
            if not isinstance(value, str):
                return []
            where_clauses.append(f"{key} = ?")
            params.append(value)

        query = f"SELECT {NODE_COLUMNS} FROM nodes"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY seq"

        with get_db(self.db_path) as conn:
            return [self._row_to_node(row) for row in conn.execute(query, params).fetchall()]

    def _nearest_nodes(self, vector: List[float], limit: int) -> List[Node]:
        with get_db(self.db_path) as conn:
            rows = conn.execute("SELECT id, embedding_json FROM nodes ORDER BY seq").fetchall()

            index = self.index_factory()
            index.batch_add([
                VectorRecord(id=row["id"], vector=normalize_embedding(json.loads(row["embedding_json"]), self.dimension))
                for row in rows
            ])
            hits = index.search(vector, top_k=limit)
            if not hits:
                return []

            ids = [hit.id for hit in hits]
            placeholders = ", ".join("?" for _ in ids)
            found = {
                row["id"]: self._row_to_node(row)
                for row in conn.execute(f"SELECT {NODE_COLUMNS} FROM nodes WHERE id IN ({placeholders})", ids)
            }
            return [found[node_id] for node_id in ids if node_id in found]

    def _insert_edge(self, edge: Edge) -> None:
        with get_db(self.db_path) as conn:
            conn.execute(
                f"INSERT INTO edges ({EDGE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                (edge.id, edge.from_id, edge.to_id, edge.type, json.dumps(edge.metadata), edge.created_at)
            )
            conn.commit()

    def _select_edges(self, from_id: Optional[str], to_id: Optional[str], type: Optional[str]) -> List[Edge]:
        where_clauses = []
        params = []
        for column, value in (("from_id", from_id), ("to_id", to_id), ("type", type)):
            if value is not None:
                where_clauses.append(f"{column} = ?")
                params.append(value)

        query = f"SELECT {EDGE_COLUMNS} FROM edges"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY seq"

        with get_db(self.db_path) as conn:
            return [self._row_to_edge(row) for row in conn.execute(query, params).fetchall()]

    def _count_nodes(self) -> int:
        with get_db(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM nodes").fetchone()[0]

    # NodeStore capability

    async def create_node(self, data: NodeInput) -> Node:
        self._require_initialized()
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
        await asyncio.to_thread(self._insert_node, node)

        logger.log_store_operation("create_node", node.id, {"type": node.type})
        return node

    async def update_node(self, node_id: str, data: NodeUpdate) -> Node:
        self._require_initialized()
        node = await asyncio.to_thread(self._write_update, node_id, self._coerce_update(data))
        logger.log_store_operation("update_node", node_id)
        return node

    async def get_node(self, node_id: str) -> Optional[Node]:
        self._require_initialized()
        return await asyncio.to_thread(self._fetch_node, node_id)

    async def query_nodes(self, filter: Dict[str, Any]) -> List[Node]:
        self._require_initialized()
        filter = filter or {}
        ignored = ignored_filter_keys(filter)
        if ignored:
            logger.debug(f"query_nodes ignoring unsupported filter keys: {ignored}")

        return await asyncio.to_thread(self._select_nodes, filter)

    async def query_nodes_by_vector(self, vector: List[float], limit: int = 10) -> List[Node]:
        self._require_initialized()
        if len(vector) != self.dimension:
            logger.warning(
                f"Vector dimension mismatch. Expected {self.dimension}, got {len(vector)}. Padding/truncating."
            )
        query = normalize_embedding(vector, self.dimension)

        return await asyncio.to_thread(self._nearest_nodes, query, int(limit))

    async def create_edge(self, from_id: str, to_id: str, type: str) -> None:
        self._require_initialized()
        edge = Edge(id=new_id(), from_id=from_id, to_id=to_id, type=type, metadata={}, created_at=utc_now())
        await asyncio.to_thread(self._insert_edge, edge)
        logger.log_store_operation("create_edge", edge.id, {"from_id": from_id, "to_id": to_id, "type": type})

    async def list_edges(self, from_id: Optional[str] = None, to_id: Optional[str] = None,
                         type: Optional[str] = None) -> List[Edge]:
        self._require_initialized()
        return await asyncio.to_thread(self._select_edges, from_id, to_id, type)

    async def count_nodes(self) -> int:
        self._require_initialized()
        return await asyncio.to_thread(self._count_nodes)

    async def health(self) -> bool:
        """Check the backing database without requiring connect()."""
        return await asyncio.to_thread(health_check, self.db_path)
