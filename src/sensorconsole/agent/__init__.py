"""Agentic UI panel: agent session, prompts and the conversation log."""

from __future__ import annotations

from .conversation import (
    AgentAssistant,
    AgentErrorTurn,
    AgentPayloadTurn,
    AgentTextTurn,
    ConversationLog,
    ConversationTurn,
    UserTextTurn,
)
from .session import AgentSession

__all__ = [
    "AgentAssistant",
    "AgentErrorTurn",
    "AgentPayloadTurn",
    "AgentSession",
    "AgentTextTurn",
    "ConversationLog",
    "ConversationTurn",
    "UserTextTurn",
]
