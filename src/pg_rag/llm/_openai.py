"""Connection kwargs shared by the OpenAI-backed clients."""

from __future__ import annotations

import logging
from typing import Any

from pg_rag.config import Settings

logger = logging.getLogger(__name__)


def openai_client_kwargs(settings: Settings) -> dict[str, Any]:
    """Return ``api_key`` / ``base_url`` kwargs for LangChain's OpenAI classes.

    When ``settings.openai_base_url`` points at an OpenAI-compatible server
    (vLLM, Ollama, …) a dummy key is used if none is configured.  Otherwise
    an empty key falls back to the ``OPENAI_API_KEY`` environment variable.
    """
    kwargs: dict[str, Any] = {}
    if settings.openai_base_url:
        logger.info("Using OpenAI-compatible endpoint: %s", settings.openai_base_url)
        kwargs["base_url"] = settings.openai_base_url
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
    elif settings.openai_api_key:
        kwargs["api_key"] = settings.openai_api_key
    return kwargs
