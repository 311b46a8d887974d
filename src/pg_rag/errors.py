"""Exception taxonomy.

Every collaborator failure is wrapped in one of these at the component
boundary, so request handlers only have to catch :class:`RAGError`.
"""

from __future__ import annotations


class RAGError(Exception):
    """Base class for all pg-rag failures."""


class FetchError(RAGError):
    """A document could not be retrieved or contained no usable text."""


class SchemaError(RAGError):
    """The vector extension or the ``documents`` table could not be set up."""


class EmbeddingAPIError(RAGError):
    """The embeddings API call failed (quota, auth, network, …)."""


class StorageError(RAGError):
    """A read or write against the vector store failed."""


class GenerationAPIError(RAGError):
    """The chat completion API call failed."""


class ConfigurationError(RAGError):
    """Settings disagree with each other, e.g. an embedding width mismatch."""
