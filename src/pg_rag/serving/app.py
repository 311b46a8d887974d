"""FastAPI application exposing the ingest and ask pipelines as a REST API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pg_rag import __version__
from pg_rag.config import Settings, get_settings
from pg_rag.pipeline import RAGPipeline, build_pipeline
from pg_rag.storage.database import Database

logger = logging.getLogger(__name__)


# ── Request / Response schemas ────────────────────────────────────────
class IngestRequest(BaseModel):
    """URL of the page to ingest."""

    url: str


class IngestResponse(BaseModel):
    message: str


class AskRequest(BaseModel):
    """Incoming question from the user."""

    question: str


class AskResponse(BaseModel):
    """Answer returned by the chat model."""

    answer: str


class ErrorResponse(BaseModel):
    error: str


# ── Application factory ───────────────────────────────────────────────
def create_app(pipeline: RAGPipeline | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI app.

    Without *pipeline*, startup connects to Postgres, ensures the schema
    and wires the OpenAI clients; a schema failure aborts startup so the
    server never accepts connections.  With ``vector_store="memory"`` no
    database is touched.  A prebuilt *pipeline* skips all of that.

    Pipeline failures are logged (with traceback) by
    :func:`~pg_rag.logging_config.log_latency`; handlers only turn them
    into 500 responses.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if pipeline is not None:
            app.state.pipeline = pipeline
            yield
            return

        cfg = settings or get_settings()
        if cfg.vector_store == "memory":
            logger.warning("Using the in-memory vector store; ingested chunks are lost on restart")
            app.state.pipeline = build_pipeline(cfg)
            yield
            return

        database = Database.from_settings(cfg)
        try:
            await database.initialize()
            app.state.pipeline = build_pipeline(cfg, database)
        except Exception:
            await database.dispose()
            raise
        logger.info("pg-rag ready")
        try:
            yield
        finally:
            await database.dispose()

    app = FastAPI(
        title="pg-rag",
        version=__version__,
        description="Ingest web pages into pgvector and ask questions about them.",
        lifespan=lifespan,
    )
    _register_routes(app)
    return app


def get_pipeline(request: Request) -> RAGPipeline:
    return request.app.state.pipeline


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})


# ── Routes ────────────────────────────────────────────────────────────
def _register_routes(app: FastAPI) -> None:
    @app.get("/health")
    async def health(pipeline: RAGPipeline = Depends(get_pipeline)) -> JSONResponse:
        """Readiness check; reports whether the vector store is reachable."""
        if await pipeline.store.health_check():
            return JSONResponse({"status": "ok", "database": "ok"})
        return JSONResponse(
            status_code=503, content={"status": "degraded", "database": "unavailable"}
        )

    @app.post(
        "/ingest",
        response_model=IngestResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def ingest(
        request: IngestRequest, pipeline: RAGPipeline = Depends(get_pipeline)
    ) -> IngestResponse | JSONResponse:
        """Fetch, chunk, embed and store a web page."""
        try:
            result = await pipeline.ingest(request.url)
        except Exception as exc:
            return _error(exc)
        return IngestResponse(message=result.message)

    @app.post(
        "/ask",
        response_model=AskResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def ask(
        request: AskRequest, pipeline: RAGPipeline = Depends(get_pipeline)
    ) -> AskResponse | JSONResponse:
        """Answer a question from the ingested documents."""
        try:
            result = await pipeline.ask(request.question)
        except Exception as exc:
            return _error(exc)
        return AskResponse(answer=result.answer)


app = create_app()
