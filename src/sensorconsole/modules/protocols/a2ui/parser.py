"""Recovery parser: raw agent text -> A2UI ``Payload``.

Language models wrap JSON in prose or code fences and get cut off by token
limits. Parsing therefore runs in two attempts:

1. extract the outermost JSON object and parse it strictly;
2. if that fails, close whatever the truncation left open (string, arrays,
   objects) and parse again.

Repair only ever appends closing punctuation. It recovers structure, never
values: a repaired node either validates as a component or the turn fails.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from sensorconsole.core.exceptions import MalformedResponseError, SchemaError

from .schema import MAX_TREE_DEPTH, Payload

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\s*```\s*$")

_CLOSER = {"{": "}", "[": "]"}
_OPENER = {"}": "{", "]": "["}

_PREVIEW_CHARS = 200

INVALID_RESPONSE_MESSAGE = "The AI response was invalid. Please try a simpler request."


@dataclass(frozen=True)
class ParsedResponse:
    payload: Payload
    repaired: bool
    candidate: str


def _match_object_end(text: str, start: int) -> int | None:
    """Index of the brace closing the object opened at ``start``, if any."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_candidate(raw_text: str) -> str:
    """Cut the JSON object out of surrounding prose / code fences.

    An object that never closes (truncated output) runs to the end of the text.
    Without any ``{`` the fence markers are stripped and the rest is returned.
    """
    start = raw_text.find("{")
    if start < 0:
        return _FENCE_RE.sub("", raw_text).strip()

    end = _match_object_end(raw_text, start)
    if end is not None:
        return raw_text[start : end + 1]

    candidate = raw_text[start:]
    if candidate.rstrip().endswith("```"):
        candidate = _TRAILING_FENCE_RE.sub("", candidate)
    return candidate


def repair_truncated_json(text: str) -> str:
    """Append the closing punctuation a truncated JSON text is missing.

    A token-level scanner, not a JSON parser: it tracks whether it is inside a
    string literal (plus a pending backslash escape) and, outside strings, the
    open ``{`` / ``[`` delimiters in nesting order. At the end an open string is
    closed, then every open delimiter is closed innermost first. Stray closers
    are skipped; nothing is ever removed from ``text``.
    """
    in_string = False
    escaped = False
    open_stack: list[str] = []

    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSER:
            open_stack.append(ch)
        elif ch in _OPENER:
            opener = _OPENER[ch]
            for i in range(len(open_stack) - 1, -1, -1):
                if open_stack[i] == opener:
                    del open_stack[i]
                    break

    suffix: list[str] = []
    if in_string:
        if escaped:
            # A dangling backslash would escape the closing quote.
            suffix.append("\\")
        suffix.append('"')
    suffix.extend(_CLOSER[opener] for opener in reversed(open_stack))
    return text + "".join(suffix)


def _loads(text: str) -> Any:
    # RecursionError: nesting deeper than the decoder can follow.
    try:
        return json.loads(text)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e


def _preview(text: str) -> str:
    if len(text) <= _PREVIEW_CHARS:
        return text
    return text[:_PREVIEW_CHARS] + "..."


def _cut_deep_subtrees(data: dict[str, Any]) -> int:
    """Empty ``children`` of decoded nodes at ``MAX_TREE_DEPTH``, in place.

    Returns the number of cut nodes. A cut node still sits below every render
    limit, so the engine turns its root into a depth diagnostic.
    """
    roots = data.get("components")
    if not isinstance(roots, list):
        return 0
    cut = 0
    stack: list[tuple[Any, int]] = [(root, 1) for root in roots]
    while stack:
        node, level = stack.pop()
        if not isinstance(node, dict):
            continue
        children = node.get("children")
        if not isinstance(children, list) or not children:
            continue
        if level >= MAX_TREE_DEPTH:
            node["children"] = []
            cut += 1
            continue
        stack.extend((child, level + 1) for child in children)
    return cut


def _to_payload(data: Any, raw_text: str) -> Payload:
    if not isinstance(data, dict):
        raise SchemaError(
            f"Agent response is a JSON {type(data).__name__}, expected an object",
            raw_text=raw_text,
        )
    if "components" not in data:
        raise SchemaError("Agent response is missing 'components'", raw_text=raw_text)
    if cut := _cut_deep_subtrees(data):
        logger.warning(
            "A2UI response nested deeper than %d levels, cut %d subtrees", MAX_TREE_DEPTH, cut
        )
    try:
        return Payload.model_validate(data)
    except ValidationError as e:
        raise SchemaError(
            f"Agent response does not match the A2UI schema ({e.error_count()} errors)",
            raw_text=raw_text,
        ) from e
    except RecursionError as e:
        raise MalformedResponseError(
            "Agent response is nested too deeply", raw_text=raw_text
        ) from e


def parse_agent_response(raw_text: str) -> ParsedResponse:
    """Parse raw agent output, repairing truncation when needed.

    Raises:
        SchemaError: valid JSON without the payload shape.
        MalformedResponseError: invalid JSON even after repair.
    """
    candidate = extract_candidate(raw_text)
    try:
        data = _loads(candidate)
    except ValueError:
        # json.JSONDecodeError is a ValueError
        pass
    else:
        return ParsedResponse(
            payload=_to_payload(data, raw_text), repaired=False, candidate=candidate
        )

    repaired = repair_truncated_json(candidate)
    logger.warning(
        "A2UI response malformed, attempting truncation repair (%d chars appended)",
        len(repaired) - len(candidate),
    )
    try:
        data = _loads(repaired)
    except ValueError as e:
        logger.error("Unrecoverable A2UI response: %r", _preview(raw_text))
        raise MalformedResponseError(INVALID_RESPONSE_MESSAGE, raw_text=raw_text) from e

    payload = _to_payload(data, raw_text)
    logger.info("A2UI response recovered by repair (%d root components)", len(payload.components))
    return ParsedResponse(payload=payload, repaired=True, candidate=repaired)


def parse_payload(raw_text: str) -> Payload:
    """Shorthand for ``parse_agent_response(raw_text).payload``."""
    return parse_agent_response(raw_text).payload


class RecoveryParser:
    """Object form of :func:`parse_payload`, for injection into sessions."""

    def parse(self, raw_text: str) -> Payload:
        return parse_payload(raw_text)

    def parse_response(self, raw_text: str) -> ParsedResponse:
        return parse_agent_response(raw_text)


__all__ = [
    "INVALID_RESPONSE_MESSAGE",
    "ParsedResponse",
    "RecoveryParser",
    "extract_candidate",
    "parse_agent_response",
    "parse_payload",
    "repair_truncated_json",
]
