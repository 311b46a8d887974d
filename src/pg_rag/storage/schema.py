"""SQLAlchemy Core definition of the ``documents`` table."""

from __future__ import annotations

from pgvector.sqlalchemy import Vector
from sqlalchemy import BigInteger, Column, MetaData, Table, Text, text
from sqlalchemy.dialects.postgresql import JSONB

DOCUMENTS_TABLE = "documents"


def build_documents_table(metadata: MetaData, dimensions: int) -> Table:
    """Return the ``documents`` table bound to *metadata*.

    The vector width is only known once settings are loaded, which is why
    the table is built by a factory rather than declared at import time.
    ``id`` is a ``BIGSERIAL`` and therefore follows insertion order.
    """
    return Table(
        DOCUMENTS_TABLE,
        metadata,
        Column("id", BigInteger, primary_key=True, autoincrement=True),
        Column("content", Text, nullable=False),
        Column("metadata", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
        Column("embedding", Vector(dimensions), nullable=False),
    )
