"""Gemini LLM provider via langchain-google-genai."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from langchain_core.messages import BaseMessage

from sensorconsole.core.config import Config
from sensorconsole.core.exceptions import ConfigurationError

from ..base import BaseLLM, message_text

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-flash-latest"


def _safety_settings(config: Config) -> dict[Any, Any]:
    from langchain_google_genai import HarmBlockThreshold, HarmCategory

    name = config.llm.harassment_block_threshold.strip().upper()
    try:
        threshold = HarmBlockThreshold[name]
    except KeyError as e:
        raise ConfigurationError(f"Unknown llm.harassment_block_threshold: {name!r}") from e
    return {HarmCategory.HARM_CATEGORY_HARASSMENT: threshold}


class GeminiLLM(BaseLLM):
    """Gemini chat model.

    Uses the API key from ``google.api_key``; when ``vertex.project_id`` is set
    the same models are reached through Vertex AI with ADC credentials instead.
    This class MUST NOT access `os.environ` directly.
    """

    def __init__(
        self,
        config: Config,
        *,
        model_name: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        **_: Any,
    ) -> None:
        from langchain_google_genai import ChatGoogleGenerativeAI

        self._cfg = config
        chosen_model = (model_name or "").strip() or DEFAULT_MODEL
        self.model_name = chosen_model

        common: dict[str, Any] = {
            "model": chosen_model,
            "temperature": config.llm.temperature if temperature is None else temperature,
            "top_p": config.llm.top_p,
            "top_k": config.llm.top_k,
            "max_output_tokens": config.llm.max_output_tokens
            if max_output_tokens is None
            else max_output_tokens,
            "timeout": config.llm.timeout_sec,
            "max_retries": config.llm.max_retries,
            "safety_settings": _safety_settings(config),
        }

        if config.vertex.project_id:
            logger.debug("GeminiLLM: using Vertex AI project %s", config.vertex.project_id)
            self._model = ChatGoogleGenerativeAI(
                project=config.vertex.project_id,
                location=config.vertex.location,
                vertexai=True,
                **common,
            )
        elif config.google.api_key:
            self._model = ChatGoogleGenerativeAI(google_api_key=config.google.api_key, **common)
        else:
            raise ConfigurationError(
                "GeminiLLM requires google.api_key (GOOGLE_API_KEY) or vertex.project_id"
            )

    async def generate(self, messages: Sequence[BaseMessage]) -> str:
        msg = await self._model.ainvoke(list(messages))
        return message_text(getattr(msg, "content", ""))


__all__ = ["GeminiLLM"]
