from __future__ import annotations

import asyncio

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from sensorconsole.agent import (
    AgentAssistant,
    AgentErrorTurn,
    AgentPayloadTurn,
    AgentSession,
    AgentTextTurn,
    UserTextTurn,
)
from sensorconsole.agent.conversation import error_turn
from sensorconsole.agent.session import QUOTA_MESSAGE, is_quota_error
from sensorconsole.core.config import Config, set_core_config
from sensorconsole.core.exceptions import (
    AgentBusyError,
    RateLimitError,
    TransportError,
)
from sensorconsole.modules.models import BaseLLM

GOOD_REPLY = (
    "Here you go:\n```json\n"
    '{"version":"1.0","components":[{"id":"g","type":"grid-container","children":['
    '{"id":"t","type":"stat-card","props":{"title":"Temperature","value":"24°C"}}]}]}'
    "\n```"
)


class _StubLLM(BaseLLM):
    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self._reply = reply
        self._error = error
        self.calls: list[list] = []

    async def generate(self, messages):
        self.calls.append(list(messages))
        if self._error is not None:
            raise self._error
        return self._reply


class _GatedSession:
    """Session whose reply waits until the test releases it."""

    def __init__(self, reply: str):
        self.reply = reply
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def request_turn(self, user_text: str) -> str:
        self.started.set()
        await self.release.wait()
        return self.reply


# ============================================================================
# AgentSession
# ============================================================================


class TestAgentSession:
    async def test_returns_raw_text_and_primes_history(self):
        llm = _StubLLM(reply="whatever the model said {")
        session = AgentSession(llm, system_prompt="SYSTEM")

        raw = await session.request_turn("Show sensor readings")

        assert raw == "whatever the model said {"
        (messages,) = llm.calls
        assert isinstance(messages[0], HumanMessage)
        assert messages[0].content.startswith("SYSTEM")
        assert isinstance(messages[1], AIMessage)
        assert messages[-1] == HumanMessage(content="Show sensor readings")

    async def test_none_reply_becomes_empty_string(self):
        assert await AgentSession(_StubLLM(reply=None)).request_turn("hi") == ""

    async def test_quota_failure_is_rate_limit_error(self):
        session = AgentSession(_StubLLM(error=RuntimeError("429 Resource exhausted")))
        with pytest.raises(RateLimitError) as exc_info:
            await session.request_turn("hi")
        assert exc_info.value.message == QUOTA_MESSAGE
        assert isinstance(exc_info.value, TransportError)

    async def test_other_failure_is_transport_error(self):
        session = AgentSession(_StubLLM(error=ConnectionError("connection refused")))
        with pytest.raises(TransportError) as exc_info:
            await session.request_turn("hi")
        assert not isinstance(exc_info.value, RateLimitError)
        assert "connection refused" in exc_info.value.message

    async def test_blank_input_rejected(self):
        with pytest.raises(ValueError):
            await AgentSession(_StubLLM(reply="{}")).request_turn("   ")

    def test_is_quota_error(self):
        assert is_quota_error(RuntimeError("Quota exceeded for model"))
        assert not is_quota_error(RuntimeError("timeout"))


# ============================================================================
# AgentAssistant
# ============================================================================


class TestAgentAssistant:
    async def test_successful_turn_appends_in_order(self):
        assistant = AgentAssistant(AgentSession(_StubLLM(reply=GOOD_REPLY)))
        assert len(assistant.log) == 1  # welcome message

        turn = await assistant.submit("Show sensor readings")

        assert isinstance(turn, AgentPayloadTurn)
        assert turn.repaired is False
        turns = assistant.log.turns
        assert isinstance(turns[0], AgentPayloadTurn)
        assert turns[1] == UserTextTurn(text="Show sensor readings")
        assert turns[2] is turn

        (grid,) = assistant.render_turn(turn)
        assert grid.attrs == {"layout": "grid"}
        assert grid.children[0].attrs["value"] == "24°C"

    async def test_truncated_reply_is_repaired(self):
        reply = '{"version":"1.0","components":[{"id":"a","type":"text","props":{"content":"Hel'
        assistant = AgentAssistant(AgentSession(_StubLLM(reply=reply)), welcome=False)

        turn = await assistant.submit("hi")

        assert isinstance(turn, AgentPayloadTurn)
        assert turn.repaired is True
        assert turn.payload.components[0].props["content"] == "Hel"

    async def test_transport_failure_becomes_error_turn(self):
        assistant = AgentAssistant(
            AgentSession(_StubLLM(error=ConnectionError("unreachable"))), welcome=False
        )

        turn = await assistant.submit("hi")

        assert isinstance(turn, AgentErrorTurn)
        assert turn.failure == "transport"
        assert turn.error_code == "TRANSPORT_ERROR"
        (node,) = assistant.render_turn(turn)
        assert node.kind == "text"
        assert node.attrs["content"] == "Error: unreachable"
        assert turn.raw_text is None
        assert len(assistant.log) == 2

    async def test_unusable_reply_becomes_parse_error_turn(self):
        assistant = AgentAssistant(AgentSession(_StubLLM(reply="not json at all")), welcome=False)

        turn = await assistant.submit("hi")

        assert isinstance(turn, AgentErrorTurn)
        assert turn.failure == "parse"
        assert turn.error_code == "MALFORMED_RESPONSE"
        assert turn.payload.components[0].props["content"].startswith("Error: ")
        assert turn.raw_text == "not json at all"

    async def test_schema_failure_is_parse_failure(self):
        assistant = AgentAssistant(AgentSession(_StubLLM(reply='{"version": "1.0"}')), welcome=False)
        turn = await assistant.submit("hi")
        assert isinstance(turn, AgentErrorTurn)
        assert turn.failure == "parse"
        assert turn.error_code == "SCHEMA_ERROR"

    async def test_blank_input_is_ignored(self):
        llm = _StubLLM(reply=GOOD_REPLY)
        assistant = AgentAssistant(AgentSession(llm))
        assert await assistant.submit("   ") is None
        assert len(assistant.log) == 1
        assert llm.calls == []

    async def test_second_submission_while_pending_is_rejected(self):
        session = _GatedSession(GOOD_REPLY)
        assistant = AgentAssistant(session, welcome=False)  # type: ignore[arg-type]

        first = asyncio.create_task(assistant.submit("one"))
        await session.started.wait()
        assert assistant.pending

        with pytest.raises(AgentBusyError):
            await assistant.submit("two")

        session.release.set()
        turn = await first
        assert isinstance(turn, AgentPayloadTurn)
        assert not assistant.pending
        assert [type(t) for t in assistant.log] == [UserTextTurn, AgentPayloadTurn]

    def test_text_turns_render_as_text(self):
        assistant = AgentAssistant(AgentSession(_StubLLM(reply="")), welcome=False)
        (node,) = assistant.render_turn(AgentTextTurn(text="plain answer"))
        assert node.kind == "text"
        assert node.attrs["content"] == "plain answer"

    async def test_schema_error_turn_keeps_full_reply(self):
        reply = '{"version": "1.0", "widgets": [' + '"x", ' * 200 + '"y"]}'
        assistant = AgentAssistant(AgentSession(_StubLLM(reply=reply)), welcome=False)

        turn = await assistant.submit("hi")

        assert isinstance(turn, AgentErrorTurn)
        assert turn.raw_text == reply
        assert assistant.log.last.raw_text == reply

    def test_built_payloads_use_configured_protocol_version(self):
        set_core_config(Config.model_validate({"a2ui": {"protocol_version": "1.1"}}))
        assistant = AgentAssistant(AgentSession(_StubLLM(reply="")))

        assert assistant.log.last.payload.version == "1.1"
        assert error_turn(TransportError("down")).payload.version == "1.1"
