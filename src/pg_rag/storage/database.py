"""
Database connection management.

Owns the async SQLAlchemy engine (and with it the connection pool) and
ensures the pgvector extension and the ``documents`` table exist.

A single :class:`Database` is created at process start and handed to the
vector store; nothing here is a module-level singleton.
"""

from __future__ import annotations

import logging

from sqlalchemy import MetaData, Table, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pg_rag.config import Settings
from pg_rag.errors import SchemaError
from pg_rag.storage.schema import DOCUMENTS_TABLE, build_documents_table

logger = logging.getLogger(__name__)

# pgvector stores the declared dimension directly as the column typmod.
_EMBEDDING_WIDTH_SQL = text(
    "SELECT atttypmod FROM pg_attribute "
    "WHERE attrelid = to_regclass(:table) AND attname = 'embedding' AND NOT attisdropped"
)


class Database:
    """Connection pool plus schema bootstrap for the ``documents`` table.

    Parameters
    ----------
    url:
        SQLAlchemy URL using an async driver, e.g.
        ``postgresql+psycopg://user:pw@host:5432/db``.
    dimensions:
        Width of the ``embedding`` column.
    pool_size, max_overflow, pool_timeout:
        Forwarded to the engine's connection pool.
    echo:
        Log every SQL statement.
    engine:
        Pre-built engine (tests); *url* and pool options are ignored.
    """

    def __init__(
        self,
        url: str = "",
        *,
        dimensions: int,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        echo: bool = False,
        engine: AsyncEngine | None = None,
    ) -> None:
        self.dimensions = dimensions
        self.engine = engine or create_async_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
        )
        self.metadata = MetaData()
        self.documents: Table = build_documents_table(self.metadata, dimensions)

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        return cls(
            settings.sqlalchemy_url,
            dimensions=settings.embedding_dimensions,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            echo=settings.db_echo,
        )

    async def initialize(self) -> None:
        """Create the vector extension and ``documents`` table if missing.

        Idempotent.  Raises :class:`SchemaError` when the DDL fails (for
        example the role may not install extensions) or when an existing
        ``documents.embedding`` column has a different width.
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                await conn.run_sync(self.metadata.create_all)
                width = await conn.scalar(_EMBEDDING_WIDTH_SQL, {"table": DOCUMENTS_TABLE})
        except SQLAlchemyError as exc:
            raise SchemaError(f"Could not initialise the vector schema: {exc}") from exc

        if width != self.dimensions:
            raise SchemaError(
                f"{DOCUMENTS_TABLE}.embedding has width {width}, "
                f"but the embedding model is configured for {self.dimensions}"
            )
        logger.info("Schema ready: %s(embedding vector(%d))", DOCUMENTS_TABLE, self.dimensions)

    async def health_check(self) -> bool:
        """Return ``True`` when a pooled connection can run ``SELECT 1``."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("Database health-check failed", exc_info=True)
            return False

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
