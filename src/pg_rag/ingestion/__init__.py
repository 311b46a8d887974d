"""
Ingestion — fetching web pages and splitting their text into chunks.

Embedding and persistence live in :mod:`pg_rag.llm` and
:mod:`pg_rag.storage`; :class:`pg_rag.pipeline.RAGPipeline` composes them.
"""
