"""Text chunking — fixed-size sliding windows with overlap."""

from __future__ import annotations

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200


def _make_splitter(chunk_size: int, overlap: int) -> RecursiveCharacterTextSplitter:
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    if not 0 <= overlap < chunk_size:
        raise ValueError(f"overlap must be in [0, chunk_size), got {overlap}")
    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=overlap,
        length_function=len,
        separators=["\n\n", "\n", ". ", " ", ""],
    )


def split(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split *text* into ordered chunks of at most *chunk_size* characters.

    Consecutive chunks share up to *overlap* characters.  Deterministic and
    free of I/O; blank input yields an empty list.
    """
    splitter = _make_splitter(chunk_size, overlap)
    if not text.strip():
        return []
    return splitter.split_text(text)


def split_documents(
    documents: list[Document],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[Document]:
    """Split *documents* into chunk documents, preserving their metadata.

    Each chunk additionally carries ``chunk_index`` and ``chunk_count``
    relative to the document it came from.
    """
    chunks: list[Document] = []
    for doc in documents:
        pieces = split(doc.page_content, chunk_size, overlap)
        for index, piece in enumerate(pieces):
            chunks.append(
                Document(
                    page_content=piece,
                    metadata={**doc.metadata, "chunk_index": index, "chunk_count": len(pieces)},
                )
            )
    return chunks
