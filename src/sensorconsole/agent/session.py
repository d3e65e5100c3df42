"""Agent session: one generation request per user turn.

The session is the only place that waits on the network. It returns whatever
text the model produced, however malformed, and turns every provider failure
into a :class:`TransportError` so callers can tell "could not reach agent"
apart from "agent replied but the response was unusable".
"""

from __future__ import annotations

import logging

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from sensorconsole.core import Config, get_core_config
from sensorconsole.core.exceptions import RateLimitError, TransportError
from sensorconsole.modules.models import BaseLLM, model_registry

from .prompts import COMPLETENESS_REMINDER, MODEL_ACKNOWLEDGEMENT, SYSTEM_PROMPT

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = "Quota exceeded. Please wait a minute."
_QUOTA_MARKERS = ("429", "quota", "resource exhausted", "resource_exhausted", "rate limit")


def is_quota_error(error: BaseException) -> bool:
    text = f"{type(error).__name__} {error}".lower()
    return any(marker in text for marker in _QUOTA_MARKERS)


class AgentSession:
    def __init__(self, llm: BaseLLM, *, system_prompt: str = SYSTEM_PROMPT) -> None:
        self._llm = llm
        self._system_prompt = system_prompt

    @classmethod
    def from_config(cls, config: Config | None = None, *, model: str | None = None) -> AgentSession:
        cfg = config or get_core_config()
        return cls(model_registry.create_llm(model, config=cfg))

    def build_messages(self, user_text: str) -> list[BaseMessage]:
        # The instructions are primed as a prior exchange rather than a system
        # message; Gemini follows the JSON-only rule more reliably that way.
        return [
            HumanMessage(content=self._system_prompt + COMPLETENESS_REMINDER),
            AIMessage(content=MODEL_ACKNOWLEDGEMENT),
            HumanMessage(content=user_text),
        ]

    async def request_turn(self, user_text: str) -> str:
        """Return the raw model reply for ``user_text``.

        Raises:
            ValueError: blank input.
            RateLimitError: the provider reported quota exhaustion.
            TransportError: any other provider failure.
        """
        if not user_text or not user_text.strip():
            raise ValueError("user_text must be non-empty")

        try:
            raw = await self._llm.generate(self.build_messages(user_text))
        except TransportError:
            raise
        except Exception as e:
            logger.error("Agent request failed: %s", e)
            if is_quota_error(e):
                raise RateLimitError(QUOTA_MESSAGE) from e
            raise TransportError(str(e) or type(e).__name__) from e

        if raw is None:
            return ""
        return raw if isinstance(raw, str) else str(raw)


__all__ = ["AgentSession", "QUOTA_MESSAGE", "is_quota_error"]
