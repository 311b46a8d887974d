"""
Serving — FastAPI application exposing ``/ingest`` and ``/ask``.

Run with ``python -m pg_rag`` or ``uvicorn pg_rag.serving.app:app``.
"""
