"""Abstract base class for vector-store backends.

Adding a new backend only requires subclassing :class:`VectorStoreBase`
and implementing the abstract coroutines.  The ingest and ask pipelines
never see which database is behind the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pg_rag.errors import ConfigurationError
from pg_rag.storage.models import Chunk, ScoredChunk


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    dimensions:
        Width every stored and queried vector must have.
    """

    def __init__(self, dimensions: int) -> None:
        self.dimensions = dimensions

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    async def insert(self, chunks: Sequence[Chunk]) -> int:
        """Persist *chunks* as one all-or-nothing batch.

        Returns the number of rows written.  Raises
        :class:`~pg_rag.errors.StorageError` when the write fails, in which
        case nothing from the batch is visible.
        """
        ...

    @abstractmethod
    async def search(self, query_embedding: Sequence[float], k: int) -> list[ScoredChunk]:
        """Return up to *k* chunks ordered by descending similarity.

        Ties are broken by insertion order.  When fewer than *k* chunks
        exist, all of them are returned.

        Parameters
        ----------
        query_embedding:
            Dense vector for the query.
        k:
            Maximum number of results; must be at least 1.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored chunks."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- helpers ----------------------------------------------------------------

    def _check_dimensions(self, vector: Sequence[float]) -> None:
        if len(vector) != self.dimensions:
            raise ConfigurationError(
                f"Embedding has {len(vector)} dimensions, store expects {self.dimensions}"
            )

    @staticmethod
    def _check_k(k: int) -> None:
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
