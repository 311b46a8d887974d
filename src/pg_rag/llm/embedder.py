"""Embedding client — text in, fixed-width float vector out."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from langchain_openai import OpenAIEmbeddings

from pg_rag.config import Settings
from pg_rag.errors import ConfigurationError, EmbeddingAPIError
from pg_rag.llm._openai import openai_client_kwargs

logger = logging.getLogger(__name__)


@runtime_checkable
class Embedder(Protocol):
    """Anything that can turn text into embedding vectors."""

    dimensions: int

    async def embed(self, text: str) -> list[float]: ...

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]: ...


class OpenAIEmbedder:
    """:class:`Embedder` backed by ``langchain_openai.OpenAIEmbeddings``.

    Parameters
    ----------
    client:
        A configured ``OpenAIEmbeddings`` (or anything exposing
        ``aembed_query`` / ``aembed_documents``).
    dimensions:
        Expected vector width; every returned vector is checked.
    """

    def __init__(self, client: OpenAIEmbeddings, *, dimensions: int) -> None:
        self._client = client
        self.dimensions = dimensions

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIEmbedder:
        kwargs = openai_client_kwargs(settings)
        # Only the text-embedding-3 family accepts a custom output width.
        if settings.embedding_model.startswith("text-embedding-3"):
            kwargs["dimensions"] = settings.embedding_dimensions
        client = OpenAIEmbeddings(model=settings.embedding_model, **kwargs)
        return cls(client, dimensions=settings.embedding_dimensions)

    async def embed(self, text: str) -> list[float]:
        """Embed a single query string."""
        try:
            vector = await self._client.aembed_query(text)
        except Exception as exc:
            raise EmbeddingAPIError(f"Embedding request failed: {exc}") from exc
        self._check(vector)
        return vector

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed *texts* in one batched call; order is preserved."""
        if not texts:
            return []
        try:
            vectors = await self._client.aembed_documents(list(texts))
        except Exception as exc:
            raise EmbeddingAPIError(f"Embedding request for {len(texts)} texts failed: {exc}") from exc
        if len(vectors) != len(texts):
            raise EmbeddingAPIError(f"Expected {len(texts)} embeddings, got {len(vectors)}")
        for vector in vectors:
            self._check(vector)
        logger.debug("Embedded %d texts", len(vectors))
        return vectors

    def _check(self, vector: Sequence[float]) -> None:
        if len(vector) != self.dimensions:
            raise ConfigurationError(
                f"Embedding model returned {len(vector)} dimensions, expected {self.dimensions}"
            )
