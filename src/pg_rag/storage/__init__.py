"""
Storage — Postgres connection pool, ``documents`` schema, and vector stores.

Public surface
--------------
- :class:`Database` — engine/pool owner; ensures the schema at startup.
- :class:`VectorStoreBase` — backend-agnostic insert/search interface.
- :class:`PgVectorStore` — pgvector-backed store.
- :class:`InMemoryVectorStore` — pure-Python store for local runs and tests.
- :class:`Chunk`, :class:`ScoredChunk` — data models.
"""

from pg_rag.storage.base import VectorStoreBase
from pg_rag.storage.memory_store import InMemoryVectorStore
from pg_rag.storage.models import Chunk, ScoredChunk

__all__ = [
    "Chunk",
    "Database",
    "InMemoryVectorStore",
    "PgVectorStore",
    "ScoredChunk",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import the Postgres classes to avoid pulling in SQLAlchemy at import time."""
    if name == "Database":
        from pg_rag.storage.database import Database

        return Database
    if name == "PgVectorStore":
        from pg_rag.storage.pg_store import PgVectorStore

        return PgVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
