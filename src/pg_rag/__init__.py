"""pg-rag — ask questions about web pages, backed by Postgres + pgvector."""

__version__ = "0.1.0"
