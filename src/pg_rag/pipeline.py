"""Ingest and ask pipelines.

:class:`RAGPipeline` is built once at startup and shared by every request
handler.  It holds no per-request state; the vector store is the only
thing two requests ever share.

Usage::

    pipeline = RAGPipeline(loader, embedder, store, chat)
    await pipeline.ingest("https://example.com/a")
    result = await pipeline.ask("What is this page about?")
    print(result.answer)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel

from pg_rag.ingestion.chunker import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, split_documents
from pg_rag.llm.prompts import format_context
from pg_rag.logging_config import log_latency
from pg_rag.storage.models import Chunk, ScoredChunk

if TYPE_CHECKING:
    from pg_rag.config import Settings
    from pg_rag.ingestion.loader import WebPageLoader
    from pg_rag.llm.chat import ChatModel
    from pg_rag.llm.embedder import Embedder
    from pg_rag.storage.base import VectorStoreBase
    from pg_rag.storage.database import Database

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3


class IngestResult(BaseModel):
    """Outcome of a successful ingest."""

    url: str
    chunks: int

    @property
    def message(self) -> str:
        return f"Ingested {self.chunks} chunks from {self.url}"


class AskResult(BaseModel):
    """Answer plus the chunks that were used as context."""

    answer: str
    chunks: list[ScoredChunk] = []


class RAGPipeline:
    """Compose loader, embedder, vector store and chat model.

    Parameters
    ----------
    loader:
        Fetches a URL into LangChain documents (must provide ``aload``).
    embedder:
        Text → vector capability.
    store:
        Vector store the chunks are written to and searched in.
    chat:
        Context + question → answer capability.
    chunk_size, chunk_overlap:
        Sliding-window parameters for the splitter.
    top_k:
        Number of chunks retrieved per question.
    """

    def __init__(
        self,
        loader: WebPageLoader,
        embedder: Embedder,
        store: VectorStoreBase,
        chat: ChatModel,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        self.loader = loader
        self.embedder = embedder
        self.store = store
        self.chat = chat
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.top_k = top_k

    @log_latency("ingest")
    async def ingest(self, url: str) -> IngestResult:
        """Fetch *url*, split, embed and store its chunks.

        Every chunk is embedded before anything is written, and the write
        is a single batch, so a failure leaves the store unchanged.
        """
        documents = await self.loader.aload(url)
        pieces = split_documents(documents, self.chunk_size, self.chunk_overlap)
        if not pieces:
            logger.warning("No text extracted from %s; nothing stored", url)
            return IngestResult(url=url, chunks=0)

        embeddings = await self.embedder.embed_many([p.page_content for p in pieces])
        chunks = [
            Chunk(content=piece.page_content, metadata=piece.metadata, embedding=embedding)
            for piece, embedding in zip(pieces, embeddings)
        ]
        stored = await self.store.insert(chunks)
        logger.info("Ingested %s: %d chunks", url, stored)
        return IngestResult(url=url, chunks=stored)

    @log_latency("ask")
    async def ask(self, question: str) -> AskResult:
        """Answer *question* from the top-k most similar stored chunks.

        An empty store is not an error: the chat model is still called,
        with empty context.
        """
        query_vector = await self.embedder.embed(question)
        hits = await self.store.search(query_vector, self.top_k)
        logger.info("Retrieved %d chunks for question", len(hits))

        answer = await self.chat.generate(format_context(hits), question)
        return AskResult(answer=answer, chunks=hits)


def build_pipeline(settings: Settings, database: Database | None = None) -> RAGPipeline:
    """Wire the production collaborators from *settings*.

    Without a *database* the chunks are kept in an
    :class:`~pg_rag.storage.memory_store.InMemoryVectorStore`.
    """
    from pg_rag.ingestion.loader import WebPageLoader
    from pg_rag.llm.chat import OpenAIChatClient
    from pg_rag.llm.embedder import OpenAIEmbedder
    from pg_rag.storage.memory_store import InMemoryVectorStore
    from pg_rag.storage.pg_store import PgVectorStore

    store: VectorStoreBase
    if database is None:
        store = InMemoryVectorStore(settings.embedding_dimensions)
    else:
        store = PgVectorStore(database)

    return RAGPipeline(
        loader=WebPageLoader(timeout=settings.fetch_timeout, user_agent=settings.fetch_user_agent),
        embedder=OpenAIEmbedder.from_settings(settings),
        store=store,
        chat=OpenAIChatClient.from_settings(settings),
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        top_k=settings.top_k,
    )
