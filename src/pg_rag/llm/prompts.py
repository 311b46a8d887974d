"""Prompt templates for answering questions from retrieved context."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

    from pg_rag.storage.models import ScoredChunk

CONTEXT_SEPARATOR = "\n\n"

ANSWER_SYSTEM = """\
You are a helpful assistant answering questions about documents the user
has ingested.

Answer the question using only the context below.  If the context does not
contain the answer, say that you don't know.

Context:
{context}
"""


def format_context(chunks: Iterable[ScoredChunk]) -> str:
    """Concatenate retrieved chunk contents, most similar first."""
    return CONTEXT_SEPARATOR.join(chunk.content for chunk in chunks)


def build_answer_prompt(context: str, question: str) -> list[BaseMessage]:
    """Build the system + human messages for a single answer."""
    return [
        SystemMessage(content=ANSWER_SYSTEM.format(context=context)),
        HumanMessage(content=question),
    ]
