"""
Shared fixtures: in-memory and SQLite stores wired to the deterministic
hash embedding, so no test needs a model download or network access.
"""

import pytest

from brain.core.types import BrainDependencies
from brain.store.memory_store import InMemoryNodeStore
from brain.store.sqlite_store import SQLiteNodeStore
from brain.vector.embeddings import DeterministicHashEmbedding
from brain.vector.text_service import StubTextService


@pytest.fixture
def text_service():
    return StubTextService(DeterministicHashEmbedding(dimension=384), dimension=384)


@pytest.fixture
def memory_store():
    return InMemoryNodeStore()


@pytest.fixture
def deps(memory_store, text_service):
    return BrainDependencies(store=memory_store, text_service=text_service)


@pytest.fixture
def sqlite_path(tmp_path):
    return str(tmp_path / "data" / "brain.db")


@pytest.fixture
def sqlite_store(sqlite_path):
    """Unconnected SQLite store; tests await connect() themselves."""
    return SQLiteNodeStore(db_path=sqlite_path)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep configuration lookups away from the developer's environment."""
    monkeypatch.setenv("DB_PATH", str(tmp_path / "env" / "brain.db"))
    monkeypatch.setenv("STORE_PROVIDER", "memory")
    monkeypatch.setenv("VECTOR_PROVIDER", "memory")
    monkeypatch.setenv("EMBED_PROVIDER", "hash")
    monkeypatch.delenv("EMBEDDING_DIMENSION", raising=False)
    monkeypatch.setenv("GIT_REPO_PATH", str(tmp_path))


class RecordingStore(InMemoryNodeStore):
    """In-memory store that records every call and can be told to fail."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = []
        self.fail_on = {}

    def _maybe_fail(self, method):
        self.calls.append(method)
        error = self.fail_on.get(method)
        if error is not None:
            raise error

    async def create_node(self, data):
        self._maybe_fail("create_node")
        return await super().create_node(data)

    async def update_node(self, node_id, data):
        self._maybe_fail("update_node")
        return await super().update_node(node_id, data)

    async def query_nodes(self, filter):
        self._maybe_fail("query_nodes")
        return await super().query_nodes(filter)

    async def query_nodes_by_vector(self, vector, limit=10):
        self._maybe_fail("query_nodes_by_vector")
        return await super().query_nodes_by_vector(vector, limit)

    async def create_edge(self, from_id, to_id, type):
        self._maybe_fail("create_edge")
        return await super().create_edge(from_id, to_id, type)


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def recording_deps(recording_store, text_service):
    return BrainDependencies(store=recording_store, text_service=text_service)
