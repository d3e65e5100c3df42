"""Conversation log and the assistant that drives agent turns."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Literal, Union

from sensorconsole.core.config import get_core_config
from sensorconsole.core.exceptions import (
    AgentBusyError,
    AgentTurnError,
    ParseError,
    TransportError,
)
from sensorconsole.modules.protocols.a2ui import (
    ComponentNode,
    Payload,
    RecoveryParser,
    RenderedNode,
    RenderEngine,
)

from .session import AgentSession

logger = logging.getLogger(__name__)

TurnFailure = Literal["transport", "parse"]


@dataclass(frozen=True)
class UserTextTurn:
    text: str
    sender: Literal["user"] = "user"


@dataclass(frozen=True)
class AgentTextTurn:
    text: str
    sender: Literal["agent"] = "agent"


@dataclass(frozen=True)
class AgentPayloadTurn:
    payload: Payload
    repaired: bool = False
    sender: Literal["agent"] = "agent"


@dataclass(frozen=True)
class AgentErrorTurn:
    """A failed agent turn, shown in place of the agent's response.

    ``raw_text`` is the full agent reply when parsing failed.
    """

    payload: Payload
    failure: TurnFailure
    error_code: str
    message: str
    raw_text: str | None = None
    sender: Literal["agent"] = "agent"


ConversationTurn = Union[UserTextTurn, AgentTextTurn, AgentPayloadTurn, AgentErrorTurn]


def text_payload(node_id: str, content: str, *, style: str = "body") -> Payload:
    return Payload(
        version=get_core_config().a2ui.protocol_version,
        components=(
            ComponentNode(id=node_id, type="text", props={"content": content, "style": style}),
        ),
    )


def welcome_payload() -> Payload:
    return Payload(
        version=get_core_config().a2ui.protocol_version,
        components=(
            ComponentNode(
                id="welcome-heading",
                type="text",
                props={"content": "Advanced AI technical support", "style": "caption"},
            ),
            ComponentNode(
                id="welcome-title",
                type="text",
                props={"content": "How can I help you today?", "style": "title"},
            ),
            ComponentNode(
                id="welcome-body",
                type="text",
                props={
                    "content": (
                        "Ask me to show sensor readings, explain the system or analyse "
                        "sensor data. I reply with visual interfaces."
                    )
                },
            ),
        ),
    )


def error_turn(error: AgentTurnError) -> AgentErrorTurn:
    failure: TurnFailure = "transport" if isinstance(error, TransportError) else "parse"
    message = error.message or "Failed to connect to AI Agent."
    return AgentErrorTurn(
        payload=text_payload("err", f"Error: {message}"),
        failure=failure,
        error_code=error.code,
        message=message,
        raw_text=error.raw_text if isinstance(error, ParseError) else None,
    )


class ConversationLog:
    """Append-only, oldest first."""

    def __init__(self, turns: list[ConversationTurn] | None = None) -> None:
        self._turns: list[ConversationTurn] = list(turns or [])

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    @property
    def last(self) -> ConversationTurn | None:
        return self._turns[-1] if self._turns else None

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(tuple(self._turns))

    def __len__(self) -> int:
        return len(self._turns)


class AgentAssistant:
    """Runs user submissions through session -> parser and logs the outcome.

    Only one turn may be in flight; a submission while one is pending raises
    :class:`AgentBusyError`.
    """

    def __init__(
        self,
        session: AgentSession,
        *,
        parser: RecoveryParser | None = None,
        engine: RenderEngine | None = None,
        log: ConversationLog | None = None,
        welcome: bool = True,
    ) -> None:
        self._session = session
        self._parser = parser or RecoveryParser()
        self._engine = engine or RenderEngine()
        self._log = log if log is not None else ConversationLog()
        self._pending = False
        if welcome and not len(self._log):
            self._log.append(AgentPayloadTurn(payload=welcome_payload()))

    @property
    def log(self) -> ConversationLog:
        return self._log

    @property
    def pending(self) -> bool:
        return self._pending

    async def submit(self, user_text: str) -> ConversationTurn | None:
        """Run one agent turn; returns the appended agent turn.

        Blank input is ignored (``None``, nothing appended). Agent failures do
        not raise: they are appended as an :class:`AgentErrorTurn`.
        """
        if not user_text or not user_text.strip():
            return None
        if self._pending:
            raise AgentBusyError("An agent turn is already in progress")

        self._pending = True
        try:
            self._log.append(UserTextTurn(text=user_text))
            turn: ConversationTurn
            try:
                raw = await self._session.request_turn(user_text)
                parsed = self._parser.parse_response(raw)
            except (TransportError, ParseError) as e:
                logger.error("Agent turn failed [%s]: %s", e.code, e.message)
                turn = error_turn(e)
            else:
                turn = AgentPayloadTurn(payload=parsed.payload, repaired=parsed.repaired)
            self._log.append(turn)
            return turn
        finally:
            self._pending = False

    def render_turn(self, turn: ConversationTurn) -> tuple[RenderedNode, ...]:
        if isinstance(turn, (AgentPayloadTurn, AgentErrorTurn)):
            return self._engine.render_payload(turn.payload)
        return self._engine.render_payload(text_payload(f"{turn.sender}-text", turn.text))


__all__ = [
    "AgentAssistant",
    "AgentErrorTurn",
    "AgentPayloadTurn",
    "AgentTextTurn",
    "ConversationLog",
    "ConversationTurn",
    "UserTextTurn",
    "error_turn",
    "text_payload",
    "welcome_payload",
]
