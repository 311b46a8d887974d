"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

_SQLALCHEMY_DIALECT = "postgresql+psycopg"


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Storage
    vector_store: Literal["postgres", "memory"] = Field(
        default="postgres",
        description="'memory' keeps chunks in-process (no Postgres); nothing survives a restart.",
    )
    database_url: str = Field(
        default="",
        description="Full connection string. When set it overrides the pg_* parts below.",
    )
    pg_host: str = "localhost"
    pg_port: int = 5432
    pg_user: str = "postgres"
    pg_password: str = "postgres"
    pg_database: str = "rag"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_echo: bool = False

    # LLM / embeddings
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_base_url: str = Field(
        default="",
        description="Base URL of an OpenAI-compatible API. Leave empty to use OpenAI cloud.",
    )
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = Field(
        default=1536,
        description="Vector width; must match the model output and the documents.embedding column.",
    )
    llm_model_name: str = "gpt-4o-mini"
    llm_temperature: float = 0.0

    # Ingestion / retrieval
    chunk_size: int = 1000
    chunk_overlap: int = 200
    top_k: int = 3
    fetch_timeout: int = 30
    fetch_user_agent: str = "pg-rag/0.1"

    # Serving
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def sqlalchemy_url(self) -> str:
        """Connection URL for SQLAlchemy's async ``psycopg`` dialect."""
        if self.database_url:
            scheme, sep, rest = self.database_url.partition("://")
            if not sep:
                return self.database_url
            if scheme in ("postgres", "postgresql"):
                return f"{_SQLALCHEMY_DIALECT}://{rest}"
            return self.database_url
        return (
            f"{_SQLALCHEMY_DIALECT}://{self.pg_user}:{self.pg_password}"
            f"@{self.pg_host}:{self.pg_port}/{self.pg_database}"
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide :class:`Settings` (cached)."""
    return Settings()
