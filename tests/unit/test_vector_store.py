"""Unit tests for the vector stores — in-memory backend and pgvector (mocked engine)."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from pg_rag.errors import ConfigurationError, StorageError
from pg_rag.storage.database import Database
from pg_rag.storage.memory_store import InMemoryVectorStore, cosine_similarity
from pg_rag.storage.models import Chunk
from pg_rag.storage.pg_store import PgVectorStore


def _chunk(content: str, embedding: list[float], **meta) -> Chunk:
    return Chunk(content=content, metadata=meta, embedding=embedding)


# ── cosine similarity ─────────────────────────────────────────────────


class TestCosineSimilarity:
    def test_identical_vectors(self) -> None:
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == pytest.approx(0.0)

    def test_zero_vector(self) -> None:
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


# ── InMemoryVectorStore ───────────────────────────────────────────────


@pytest.fixture()
def mem_store() -> InMemoryVectorStore:
    store = InMemoryVectorStore(dimensions=3)
    asyncio.run(
        store.insert(
            [
                _chunk("x axis", [1.0, 0.0, 0.0], source="a"),
                _chunk("mostly x", [0.9, 0.1, 0.0], source="b"),
                _chunk("y axis", [0.0, 1.0, 0.0], source="c"),
                _chunk("z axis", [0.0, 0.0, 1.0], source="d"),
            ]
        )
    )
    return store


class TestInMemoryVectorStore:
    def test_insert_returns_count(self) -> None:
        store = InMemoryVectorStore(dimensions=2)
        assert asyncio.run(store.insert([_chunk("a", [1.0, 0.0]), _chunk("b", [0.0, 1.0])])) == 2
        assert asyncio.run(store.count()) == 2

    def test_insert_empty_batch(self) -> None:
        store = InMemoryVectorStore(dimensions=2)
        assert asyncio.run(store.insert([])) == 0
        assert asyncio.run(store.count()) == 0

    def test_search_orders_by_similarity(self, mem_store: InMemoryVectorStore) -> None:
        hits = asyncio.run(mem_store.search([1.0, 0.0, 0.0], k=3))
        assert [h.content for h in hits] == ["x axis", "mostly x", "y axis"]
        scores = [h.score for h in hits]
        assert scores == sorted(scores, reverse=True)
        assert hits[0].score == pytest.approx(1.0)
        assert hits[0].metadata == {"source": "a"}

    def test_search_returns_at_most_k(self, mem_store: InMemoryVectorStore) -> None:
        assert len(asyncio.run(mem_store.search([0.0, 1.0, 0.0], k=1))) == 1

    def test_search_returns_all_when_fewer_than_k(self, mem_store: InMemoryVectorStore) -> None:
        assert len(asyncio.run(mem_store.search([0.0, 1.0, 0.0], k=10))) == 4

    def test_ties_broken_by_insertion_order(self) -> None:
        store = InMemoryVectorStore(dimensions=2)
        asyncio.run(
            store.insert(
                [_chunk("first", [1.0, 0.0]), _chunk("second", [2.0, 0.0]), _chunk("third", [3.0, 0.0])]
            )
        )
        hits = asyncio.run(store.search([1.0, 0.0], k=3))
        assert [h.content for h in hits] == ["first", "second", "third"]
        assert [h.id for h in hits] == [1, 2, 3]

    def test_empty_store_returns_empty(self) -> None:
        store = InMemoryVectorStore(dimensions=2)
        assert asyncio.run(store.search([1.0, 0.0], k=3)) == []

    @pytest.mark.parametrize("k", [0, -1])
    def test_k_must_be_positive(self, mem_store: InMemoryVectorStore, k: int) -> None:
        with pytest.raises(ValueError, match="k must be >= 1"):
            asyncio.run(mem_store.search([1.0, 0.0, 0.0], k=k))

    def test_wrong_width_insert_is_rejected_atomically(self) -> None:
        store = InMemoryVectorStore(dimensions=2)
        batch = [_chunk("ok", [1.0, 0.0]), _chunk("bad", [1.0, 0.0, 0.0])]
        with pytest.raises(ConfigurationError, match="3 dimensions"):
            asyncio.run(store.insert(batch))
        assert asyncio.run(store.count()) == 0

    def test_wrong_width_query_is_rejected(self, mem_store: InMemoryVectorStore) -> None:
        with pytest.raises(ConfigurationError):
            asyncio.run(mem_store.search([1.0, 0.0], k=1))

    def test_health_check(self, mem_store: InMemoryVectorStore) -> None:
        assert asyncio.run(mem_store.health_check()) is True


# ── PgVectorStore with a mocked engine ────────────────────────────────


def _mock_engine(conn: AsyncMock) -> MagicMock:
    engine = MagicMock()
    engine.begin.return_value.__aenter__.return_value = conn
    engine.connect.return_value.__aenter__.return_value = conn
    return engine


def _pg_store(conn: AsyncMock, dims: int = 3) -> PgVectorStore:
    return PgVectorStore(Database(dimensions=dims, engine=_mock_engine(conn)))


class TestPgVectorStore:
    def test_insert_writes_one_batch(self) -> None:
        conn = AsyncMock()
        store = _pg_store(conn)
        written = asyncio.run(
            store.insert([_chunk("a", [1.0, 0.0, 0.0], source="s"), _chunk("b", [0.0, 1.0, 0.0])])
        )

        assert written == 2
        conn.execute.assert_awaited_once()
        stmt, rows = conn.execute.await_args.args
        assert stmt.table.name == "documents"
        assert rows == [
            {"content": "a", "metadata": {"source": "s"}, "embedding": [1.0, 0.0, 0.0]},
            {"content": "b", "metadata": {}, "embedding": [0.0, 1.0, 0.0]},
        ]

    def test_insert_empty_batch_skips_database(self) -> None:
        conn = AsyncMock()
        assert asyncio.run(_pg_store(conn).insert([])) == 0
        conn.execute.assert_not_awaited()

    def test_insert_failure_raises_storage_error(self) -> None:
        conn = AsyncMock()
        conn.execute.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        with pytest.raises(StorageError, match="Failed to store 1 chunks"):
            asyncio.run(_pg_store(conn).insert([_chunk("a", [1.0, 0.0, 0.0])]))

    def test_insert_wrong_width_never_hits_database(self) -> None:
        conn = AsyncMock()
        with pytest.raises(ConfigurationError):
            asyncio.run(_pg_store(conn).insert([_chunk("a", [1.0, 0.0])]))
        conn.execute.assert_not_awaited()

    def test_search_maps_rows_to_scored_chunks(self) -> None:
        conn = AsyncMock()
        result = MagicMock()
        result.all.return_value = [
            SimpleNamespace(id=7, content="near", distance=0.1, _mapping={"metadata": {"source": "a"}}),
            SimpleNamespace(id=3, content="far", distance=0.6, _mapping={"metadata": None}),
        ]
        conn.execute.return_value = result

        hits = asyncio.run(_pg_store(conn).search([1.0, 0.0, 0.0], k=2))

        assert [(h.id, h.content, h.metadata) for h in hits] == [
            (7, "near", {"source": "a"}),
            (3, "far", {}),
        ]
        assert hits[0].score == pytest.approx(0.9)
        assert hits[1].score == pytest.approx(0.4)

    def test_search_sql_orders_by_cosine_distance_then_id(self) -> None:
        conn = AsyncMock()
        conn.execute.return_value = MagicMock(all=MagicMock(return_value=[]))
        asyncio.run(_pg_store(conn).search([1.0, 0.0, 0.0], k=3))

        stmt = conn.execute.await_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        order_by = sql.split("ORDER BY", 1)[1]
        assert "<=>" in sql
        assert "documents.id" in order_by
        assert "LIMIT" in order_by

    def test_search_failure_raises_storage_error(self) -> None:
        conn = AsyncMock()
        conn.execute.side_effect = OperationalError("SELECT", {}, Exception("connection reset"))
        with pytest.raises(StorageError, match="Similarity search failed"):
            asyncio.run(_pg_store(conn).search([1.0, 0.0, 0.0], k=3))

    def test_search_rejects_bad_k(self) -> None:
        with pytest.raises(ValueError):
            asyncio.run(_pg_store(AsyncMock()).search([1.0, 0.0, 0.0], k=0))

    def test_count(self) -> None:
        conn = AsyncMock()
        conn.scalar.return_value = 5
        assert asyncio.run(_pg_store(conn).count()) == 5
