"""Chat client — one stateless system+user exchange per call."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from langchain_openai import ChatOpenAI

from pg_rag.config import Settings
from pg_rag.errors import GenerationAPIError
from pg_rag.llm._openai import openai_client_kwargs
from pg_rag.llm.prompts import build_answer_prompt

logger = logging.getLogger(__name__)


@runtime_checkable
class ChatModel(Protocol):
    """Anything that can answer *user_message* given *system_context*."""

    async def generate(self, system_context: str, user_message: str) -> str: ...


class OpenAIChatClient:
    """:class:`ChatModel` backed by ``langchain_openai.ChatOpenAI``.

    No conversation history is kept between calls.
    """

    def __init__(self, llm: ChatOpenAI) -> None:
        self._llm = llm

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIChatClient:
        llm = ChatOpenAI(
            model=settings.llm_model_name,
            temperature=settings.llm_temperature,
            **openai_client_kwargs(settings),
        )
        return cls(llm)

    async def generate(self, system_context: str, user_message: str) -> str:
        messages = build_answer_prompt(system_context, user_message)
        try:
            response = await self._llm.ainvoke(messages)
        except Exception as exc:
            raise GenerationAPIError(f"Chat completion failed: {exc}") from exc

        content = response.content
        if isinstance(content, list):
            # Some providers return content blocks instead of a plain string.
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block) for block in content
            )
        return content
