"""
SQLite node store: schema creation, system seed node, persistence across
instances, and the same node semantics as the in-memory store.
"""

import os

import pytest

from brain import brain
from brain.core.db import health_check, init_db
from brain.core.errors import NodeNotFoundError, StoreNotInitializedError
from brain.core.types import BrainDependencies, NodeInput, NodeUpdate
from brain.store.sqlite_store import SQLiteNodeStore


@pytest.mark.asyncio
async def test_use_before_connect_fails(sqlite_store):
    with pytest.raises(StoreNotInitializedError, match="Database not initialized"):
        await sqlite_store.create_node(NodeInput(type="n", content="x"))

    with pytest.raises(StoreNotInitializedError):
        await sqlite_store.query_nodes({})


@pytest.mark.asyncio
async def test_fresh_database_seeded_with_system_node(sqlite_store, sqlite_path):
    await sqlite_store.connect()

    assert os.path.exists(sqlite_path)
    system = await sqlite_store.query_nodes({"type": "system"})
    assert len(system) == 1
    assert system[0].content == "System initialized"
    assert system[0].metadata["version"] == "1.0.0"


@pytest.mark.asyncio
async def test_reconnect_does_not_reseed(sqlite_path):
    first = SQLiteNodeStore(db_path=sqlite_path)
    await first.connect()
    await first.create_node(NodeInput(type="note", content="kept"))

    second = SQLiteNodeStore(db_path=sqlite_path)
    await second.connect()

    assert len(await second.query_nodes({"type": "system"})) == 1
    notes = await second.query_nodes({"type": "note"})
    assert [n.content for n in notes] == ["kept"]


@pytest.mark.asyncio
async def test_node_round_trip(sqlite_store):
    await sqlite_store.connect()

    node = await sqlite_store.create_node(NodeInput(
        type="note", content="hello", metadata={"nested": {"a": [1, 2]}}, embedding=[0.5, 0.5]
    ))
    loaded = await sqlite_store.get_node(node.id)

    assert loaded == node
    assert len(loaded.embedding) == 384
    assert loaded.embedding[:3] == [0.5, 0.5, 0.0]


@pytest.mark.asyncio
async def test_update_merge_patch(sqlite_store):
    await sqlite_store.connect()
    node = await sqlite_store.create_node(NodeInput(type="note", content="old", metadata={"a": 1}))

    updated = await sqlite_store.update_node(node.id, NodeUpdate(content="new"))

    assert updated.content == "new"
    assert updated.metadata == {"a": 1}
    assert (await sqlite_store.get_node(node.id)).content == "new"


@pytest.mark.asyncio
async def test_update_unknown_node(sqlite_store):
    await sqlite_store.connect()
    with pytest.raises(NodeNotFoundError):
        await sqlite_store.update_node("nope", NodeUpdate(content="x"))


@pytest.mark.asyncio
async def test_filters_and_order(sqlite_store):
    await sqlite_store.connect()
    for content in ["b", "a", "c"]:
        await sqlite_store.create_node(NodeInput(type="tag", content=content))

    tags = await sqlite_store.query_nodes({"type": "tag"})
    assert [t.content for t in tags] == ["b", "a", "c"]
    assert len(await sqlite_store.query_nodes({"type": "tag", "content": "a"})) == 1
    assert len(await sqlite_store.query_nodes({"type": "tag", "unknown": 1})) == 3


@pytest.mark.asyncio
async def test_nearest_by_vector(sqlite_store):
    await sqlite_store.connect()
    a = await sqlite_store.create_node(NodeInput(type="n", content="a", embedding=[1.0, 0.0]))
    b = await sqlite_store.create_node(NodeInput(type="n", content="b", embedding=[0.0, 1.0]))

    nodes = await sqlite_store.query_nodes_by_vector([0.2, 0.8], limit=2)
    assert [n.id for n in nodes] == [b.id, a.id]


@pytest.mark.asyncio
async def test_edges(sqlite_store):
    await sqlite_store.connect()
    a = await sqlite_store.create_node(NodeInput(type="n", content="a"))
    b = await sqlite_store.create_node(NodeInput(type="n", content="b"))

    await sqlite_store.create_edge(a.id, b.id, "tagged")

    edges = await sqlite_store.list_edges(from_id=a.id)
    assert len(edges) == 1
    assert edges[0].to_id == b.id
    assert edges[0].type == "tagged"


@pytest.mark.asyncio
async def test_count_and_health(sqlite_store):
    assert await sqlite_store.health() is False
    await sqlite_store.connect()

    assert await sqlite_store.count_nodes() == 1
    assert await sqlite_store.health() is True


@pytest.mark.asyncio
async def test_dispatch_against_sqlite(sqlite_store, text_service):
    """Tag reuse and audit closing hold on the persistent store too."""
    await sqlite_store.connect()
    deps = BrainDependencies(store=sqlite_store, text_service=text_service)

    await brain({"kind": "capture_thought", "payload": {"text": "buy milk", "tags": ["errand"]}}, deps)
    await brain({"kind": "capture_thought", "payload": {"text": "post letter", "tags": ["errand"]}}, deps)

    tags = await sqlite_store.query_nodes({"type": "tag"})
    assert len(tags) == 1
    assert len(await sqlite_store.list_edges(to_id=tags[0].id)) == 2

    events = await sqlite_store.query_nodes({"type": "event"})
    assert [e.metadata["status"] for e in events] == ["success", "success"]

    result = await brain({"kind": "vector_search", "payload": {"query": "buy milk", "limit": 1}}, deps)
    assert result["results"][0]["content"] == "buy milk"


@pytest.mark.parametrize("filter", [
    {"type": ["tag"]},
    {"type": {"eq": "tag"}},
    {"content": 5},
    {"type": "tag", "content": ["errand"]},
])
@pytest.mark.asyncio
async def test_non_text_filter_values_match_nothing(sqlite_store, memory_store, text_service, filter):
    """Both stores agree that a list, object or number never equals a text column."""
    await sqlite_store.connect()
    action = {"kind": "query_nodes", "payload": {"filter": filter}}

    for store in (sqlite_store, memory_store):
        deps = BrainDependencies(store=store, text_service=text_service)
        await store.create_node(NodeInput(type="tag", content="5"))
        await brain({"kind": "capture_thought", "payload": {"text": "buy milk", "tags": ["errand"]}}, deps)

        result = await brain(action, deps)

        assert result == {"nodes": [], "count": 0}
        events = await store.query_nodes({"type": "event"})
        assert events[-1].metadata["status"] == "success"


def test_init_db_reports_creation(tmp_path):
    path = str(tmp_path / "nested" / "x.db")

    assert init_db(path) is True
    assert init_db(path) is False
    assert health_check(path) is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
