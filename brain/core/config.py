"""
Runtime configuration for the brain dispatcher.

Values come from environment variables (a local .env file is honoured).
Module-level constants reflect the environment at import time; the accessor
and factory functions re-read it on every call so tests and long-running
processes can switch providers without re-importing.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Storage configuration
DB_PATH = os.getenv("DB_PATH", "./data/brain.db")
STORE_PROVIDER = os.getenv("STORE_PROVIDER", "sqlite")  # memory|sqlite

# Vector and embedding configuration
VECTOR_PROVIDER = os.getenv("VECTOR_PROVIDER", "memory")  # memory|faiss
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformers
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")
# Fixed by the store contract; not configurable
EMBEDDING_DIMENSION = 384

# Diff inspection
GIT_REPO_PATH = os.getenv("GIT_REPO_PATH", ".")
GIT_DIFF_MAX_BYTES = 10 * 1024 * 1024

# Logging
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Version string
VERSION = "1.0.0"

VALID_STORE_PROVIDERS = ["memory", "sqlite"]
VALID_VECTOR_PROVIDERS = ["memory", "faiss"]
VALID_EMBED_PROVIDERS = ["hash", "sentence_transformers"]


def get_db_path() -> str:
    """Get the SQLite database path."""
    return os.getenv("DB_PATH", DB_PATH)


def get_store_provider() -> str:
    """Get configured store provider (memory|sqlite)."""
    return os.getenv("STORE_PROVIDER", STORE_PROVIDER).lower()


def get_vector_provider() -> str:
    """Get configured vector index provider (memory|faiss)."""
    return os.getenv("VECTOR_PROVIDER", VECTOR_PROVIDER).lower()


def get_embed_provider() -> str:
    """Get configured embedding provider (hash|sentence_transformers)."""
    return os.getenv("EMBED_PROVIDER", EMBED_PROVIDER).lower()


def get_embedding_dimension() -> int:
    """Get the fixed embedding dimension enforced at the store boundary."""
    return EMBEDDING_DIMENSION


def get_git_repo_path() -> str:
    """Get the working directory used by the git_diff action."""
    return os.getenv("GIT_REPO_PATH", GIT_REPO_PATH)


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    provider = get_embed_provider()

    if provider == "sentence_transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(os.getenv("EMBED_MODEL_NAME", EMBED_MODEL_NAME))

    from ..vector.embeddings import DeterministicHashEmbedding
    return DeterministicHashEmbedding(dimension=get_embedding_dimension())


def get_vector_index():
    """Get a fresh vector index of the configured kind."""
    if get_vector_provider() == "faiss":
        from ..vector.faiss_index import FaissVectorIndex
        return FaissVectorIndex(dimension=get_embedding_dimension())

    from ..vector.index import SimpleInMemoryVectorIndex
    return SimpleInMemoryVectorIndex()


def get_text_service():
    """Get the text service backed by the configured embedding provider."""
    from ..vector.text_service import StubTextService
    return StubTextService(get_embedding_provider(), dimension=get_embedding_dimension())


def get_node_store():
    """Get configured node store implementation. SQLite stores still need connect()."""
    if get_store_provider() == "memory":
        from ..store.memory_store import InMemoryNodeStore
        return InMemoryNodeStore(vector_index=get_vector_index(), dimension=get_embedding_dimension())

    from ..store.sqlite_store import SQLiteNodeStore
    return SQLiteNodeStore(
        db_path=get_db_path(),
        index_factory=get_vector_index,
        dimension=get_embedding_dimension(),
    )


def validate_config() -> List[str]:
    """Validate configuration and return any issues."""
    issues = []

    if get_store_provider() not in VALID_STORE_PROVIDERS:
        issues.append(f"Invalid STORE_PROVIDER: {get_store_provider()}")

    if get_vector_provider() not in VALID_VECTOR_PROVIDERS:
        issues.append(f"Invalid VECTOR_PROVIDER: {get_vector_provider()}")

    if get_embed_provider() not in VALID_EMBED_PROVIDERS:
        issues.append(f"Invalid EMBED_PROVIDER: {get_embed_provider()}")

    # Only the fixed dimension is accepted
    requested_dimension = os.getenv("EMBEDDING_DIMENSION")
    if requested_dimension is not None and requested_dimension.strip() != str(EMBEDDING_DIMENSION):
        issues.append(f"EMBEDDING_DIMENSION must be {EMBEDDING_DIMENSION}, got: {requested_dimension}")

    return issues
