"""In-process vector store using cosine similarity over plain lists."""

from __future__ import annotations

import math
from collections.abc import Sequence

from pg_rag.storage.base import VectorStoreBase
from pg_rag.storage.models import Chunk, ScoredChunk


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors; 0.0 if either is all zeros."""
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0.0:
        return 0.0
    return dot / norm


class InMemoryVectorStore(VectorStoreBase):
    """Vector store that keeps every chunk in a Python list.

    Scoring matches :class:`~pg_rag.storage.pg_store.PgVectorStore`
    (cosine similarity), so it can stand in for Postgres during local
    development and in tests.  Nothing survives a restart.
    """

    def __init__(self, dimensions: int) -> None:
        super().__init__(dimensions)
        self._rows: list[tuple[int, Chunk]] = []
        self._next_id = 1

    async def insert(self, chunks: Sequence[Chunk]) -> int:
        # Validate the whole batch before touching the list.
        for chunk in chunks:
            self._check_dimensions(chunk.embedding)
        for chunk in chunks:
            self._rows.append((self._next_id, chunk))
            self._next_id += 1
        return len(chunks)

    async def search(self, query_embedding: Sequence[float], k: int) -> list[ScoredChunk]:
        self._check_k(k)
        self._check_dimensions(query_embedding)
        scored = [
            (cosine_similarity(query_embedding, chunk.embedding), row_id, chunk)
            for row_id, chunk in self._rows
        ]
        scored.sort(key=lambda item: (-item[0], item[1]))
        return [
            ScoredChunk(id=row_id, content=chunk.content, metadata=dict(chunk.metadata), score=score)
            for score, row_id, chunk in scored[:k]
        ]

    async def count(self) -> int:
        return len(self._rows)

    async def health_check(self) -> bool:
        return True
