"""pgvector implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import func, insert, select
from sqlalchemy.exc import SQLAlchemyError

from pg_rag.errors import StorageError
from pg_rag.storage.base import VectorStoreBase
from pg_rag.storage.database import Database
from pg_rag.storage.models import Chunk, ScoredChunk

logger = logging.getLogger(__name__)


class PgVectorStore(VectorStoreBase):
    """Postgres + pgvector backed store.

    Similarity is cosine (``<=>``); the reported score is
    ``1 - cosine_distance`` so that higher means more similar.

    Parameters
    ----------
    database:
        Initialised :class:`~pg_rag.storage.database.Database`.
    """

    def __init__(self, database: Database) -> None:
        super().__init__(database.dimensions)
        self._db = database
        self._table = database.documents

    async def insert(self, chunks: Sequence[Chunk]) -> int:
        if not chunks:
            return 0
        for chunk in chunks:
            self._check_dimensions(chunk.embedding)

        rows = [
            {"content": c.content, "metadata": c.metadata, "embedding": c.embedding}
            for c in chunks
        ]
        try:
            # One transaction per batch: either every row lands or none does.
            async with self._db.engine.begin() as conn:
                await conn.execute(insert(self._table), rows)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to store {len(rows)} chunks: {exc}") from exc

        logger.info("Stored %d chunks", len(rows))
        return len(rows)

    async def search(self, query_embedding: Sequence[float], k: int) -> list[ScoredChunk]:
        self._check_k(k)
        self._check_dimensions(query_embedding)

        t = self._table
        distance = t.c.embedding.cosine_distance(list(query_embedding))
        stmt = (
            select(t.c.id, t.c.content, t.c["metadata"], distance.label("distance"))
            .order_by(distance, t.c.id)
            .limit(k)
        )
        try:
            async with self._db.engine.connect() as conn:
                result = await conn.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Similarity search failed: {exc}") from exc

        return [
            ScoredChunk(
                id=row.id,
                content=row.content,
                metadata=row._mapping["metadata"] or {},
                score=1.0 - float(row.distance),
            )
            for row in rows
        ]

    async def count(self) -> int:
        try:
            async with self._db.engine.connect() as conn:
                total = await conn.scalar(select(func.count()).select_from(self._table))
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not count stored chunks: {exc}") from exc
        return int(total or 0)

    async def health_check(self) -> bool:
        return await self._db.health_check()
