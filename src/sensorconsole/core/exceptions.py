"""Exception hierarchy for sensorconsole.

Usage:
    from sensorconsole.core.exceptions import ParseError, TransportError

Every error carries a stable ``code`` so callers (CLI, UI layer, logs) can
branch on it without string matching.

``AgentTurnError`` is the single "the agent turn failed" family: transport
failures and unusable responses both end the turn, but stay distinguishable
so the UI can say "could not reach agent" vs. "agent replied but the response
was unusable".
"""

from __future__ import annotations

from enum import Enum


class SensorConsoleError(Exception):
    """Base exception for sensorconsole."""

    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(SensorConsoleError):
    code = "CONFIGURATION_ERROR"


class RegistryFrozenError(SensorConsoleError):
    """Raised when registering into a registry after its init phase."""

    code = "REGISTRY_FROZEN"


class AgentBusyError(SensorConsoleError):
    """A turn is already in flight for this conversation."""

    code = "AGENT_BUSY"


class AgentTurnError(SensorConsoleError):
    """An agent turn terminated without a usable payload."""

    code = "AGENT_TURN_ERROR"


class TransportError(AgentTurnError):
    """The agent could not be reached (network, auth, provider failure)."""

    code = "TRANSPORT_ERROR"


class RateLimitError(TransportError):
    """The provider rejected the request for quota/rate reasons."""

    code = "RATE_LIMITED"


class ParseErrorKind(str, Enum):
    SCHEMA = "schema"
    MALFORMED = "malformed"


class ParseError(AgentTurnError):
    """The agent replied, but the reply could not be turned into a payload.

    ``raw_text`` is always the untouched agent output, kept for diagnostics.
    """

    code = "PARSE_ERROR"
    kind: ParseErrorKind

    def __init__(self, message: str, *, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class SchemaError(ParseError):
    """Valid JSON that does not have the payload shape."""

    code = "SCHEMA_ERROR"
    kind = ParseErrorKind.SCHEMA


class MalformedResponseError(ParseError):
    """JSON that stays invalid even after repair."""

    code = "MALFORMED_RESPONSE"
    kind = ParseErrorKind.MALFORMED


__all__ = [
    "SensorConsoleError",
    "ConfigurationError",
    "RegistryFrozenError",
    "AgentBusyError",
    "AgentTurnError",
    "TransportError",
    "RateLimitError",
    "ParseErrorKind",
    "ParseError",
    "SchemaError",
    "MalformedResponseError",
]
