"""
LLM — narrow capability interfaces over the embeddings and chat APIs.

The pipeline only depends on :class:`Embedder` and :class:`ChatModel`;
any provider that satisfies those protocols can be swapped in.
"""

from pg_rag.llm.chat import ChatModel, OpenAIChatClient
from pg_rag.llm.embedder import Embedder, OpenAIEmbedder

__all__ = [
    "ChatModel",
    "Embedder",
    "OpenAIChatClient",
    "OpenAIEmbedder",
]
