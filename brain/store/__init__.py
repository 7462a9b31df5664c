"""
Node/edge store capability and its bundled implementations.
"""

from .base import NodeStore, normalize_embedding
from .memory_store import InMemoryNodeStore
from .sqlite_store import SQLiteNodeStore

__all__ = [
    'NodeStore',
    'InMemoryNodeStore',
    'SQLiteNodeStore',
    'normalize_embedding',
]
