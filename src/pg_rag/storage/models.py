"""Domain models for stored chunks and search hits."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """A span of source text together with its embedding.

    Chunks are created during ingestion and never modified afterwards.

    Attributes
    ----------
    content:
        The chunk text.
    metadata:
        Free-form key/value pairs (``source``, ``title``, ``chunk_index`` …).
    embedding:
        Dense vector produced by the embedding model.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    embedding: list[float]


class ScoredChunk(BaseModel):
    """A search hit: a stored chunk and its similarity to the query."""

    id: int
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    score: float
