"""Base interface for LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from langchain_core.messages import BaseMessage


class BaseLLM(ABC):
    """Chat model interface.

    Providers must implement:
    - `generate()` async method returning the model's text
    """

    @abstractmethod
    async def generate(self, messages: Sequence[BaseMessage]) -> str:
        """Send a chat history and return the reply text."""
        raise NotImplementedError


def message_text(content: Any) -> str:
    """Flatten LangChain message content (string or content blocks) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type", "text") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return "" if content is None else str(content)


__all__ = ["BaseLLM", "message_text"]
