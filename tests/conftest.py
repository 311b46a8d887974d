"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from langchain_core.documents import Document

from pg_rag.errors import FetchError
from pg_rag.pipeline import RAGPipeline
from pg_rag.storage.memory_store import InMemoryVectorStore

DIMS = 8


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes for deterministic testing ─────────────────────────────────────


class FakeLoader:
    """Serves canned page text keyed by URL."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []

    async def aload(self, url: str) -> list[Document]:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(f"Failed to fetch {url}: 404 Not Found")
        return [Document(page_content=self.pages[url], metadata={"source": url, "title": ""})]


class FakeEmbedder:
    """Bag-of-characters embedder: identical text always gives identical vectors."""

    def __init__(self, dimensions: int = DIMS) -> None:
        self.dimensions = dimensions
        self.calls = 0

    def _vector(self, text: str) -> list[float]:
        vec = [0.0] * self.dimensions
        for ch in text:
            vec[ord(ch) % self.dimensions] += 1.0
        return vec

    async def embed(self, text: str) -> list[float]:
        self.calls += 1
        return self._vector(text)

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls += 1
        return [self._vector(t) for t in texts]


class FakeChat:
    """Records every call and answers with a fixed string."""

    def __init__(self, answer: str = "It is about testing.") -> None:
        self.answer = answer
        self.calls: list[tuple[str, str]] = []

    async def generate(self, system_context: str, user_message: str) -> str:
        self.calls.append((system_context, user_message))
        return self.answer


# ── Fixtures ────────────────────────────────────────────────────────────

PAGE_A = "https://example.com/a"
# ~1700 characters of prose: two chunks at size 1000 / overlap 200.
PAGE_A_TEXT = " ".join(f"Sentence number {i} describes the example page." for i in range(36))


@pytest.fixture()
def loader() -> FakeLoader:
    return FakeLoader({PAGE_A: PAGE_A_TEXT, "https://example.com/empty": "   "})


@pytest.fixture()
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore(dimensions=DIMS)


@pytest.fixture()
def chat() -> FakeChat:
    return FakeChat()


@pytest.fixture()
def pipeline(
    loader: FakeLoader, embedder: FakeEmbedder, store: InMemoryVectorStore, chat: FakeChat
) -> RAGPipeline:
    return RAGPipeline(loader, embedder, store, chat, chunk_size=1000, chunk_overlap=200, top_k=3)
