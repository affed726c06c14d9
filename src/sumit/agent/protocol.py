"""Step protocol spoken between the agent loop and the model.

Every assistant reply carries exactly one JSON record::

    {"step": "START" | "THINK" | "TOOL" | "OUTPUT",
     "content": "...", "tool_name": "...", "input": "..."}

Tool results go back to the model as developer messages carrying
``{"step": "OBSERVER", "content": "..."}``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import ProtocolError, UnknownStepError
from .messages import Message, Role

OBSERVER = "OBSERVER"

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class StepKind(str, Enum):
    """Kinds of step the model may emit."""

    START = "START"
    THINK = "THINK"
    TOOL = "TOOL"
    OUTPUT = "OUTPUT"


@dataclass(frozen=True)
class Step:
    """A parsed assistant step."""

    kind: StepKind
    content: str = ""
    tool_name: str | None = None
    input: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"step": self.kind.value}
        if self.content:
            data["content"] = self.content
        if self.kind is StepKind.TOOL:
            data["tool_name"] = self.tool_name or ""
            data["input"] = self.input or ""
        return data


def _strip_fence(text: str) -> str:
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def _load_record(text: str) -> dict[str, Any]:
    """Decode the single JSON object in a reply."""
    stripped = _strip_fence(text.strip())
    if not stripped:
        raise ProtocolError("Empty reply, expected a JSON step record", text)

    try:
        record = json.loads(stripped)
    except json.JSONDecodeError as e:
        lines = [line for line in stripped.splitlines() if line.strip()]
        if len(lines) > 1 and all(_is_json_object(line) for line in lines):
            raise ProtocolError(
                f"Expected exactly one step per reply, got {len(lines)}", text
            ) from e
        raise ProtocolError(f"Reply is not valid JSON: {e.msg}", text) from e
    except RecursionError as e:
        raise ProtocolError("Reply is not valid JSON: nesting too deep", text) from e

    if not isinstance(record, dict):
        raise ProtocolError("Reply must be a JSON object", text)
    return record


def _is_json_object(line: str) -> bool:
    try:
        return isinstance(json.loads(line), dict)
    except (json.JSONDecodeError, RecursionError):
        return False


def _optional_text(record: dict[str, Any], key: str, raw: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ProtocolError(f"Field '{key}' must be a string", raw)
    return str(value)


def parse_step(text: str) -> Step:
    """Parse an assistant reply into a Step.

    Raises:
        ProtocolError: The reply is not a single well-formed step record.
        UnknownStepError: The record names an unrecognized step kind.
    """
    record = _load_record(text)

    raw_kind = record.get("step")
    if not isinstance(raw_kind, str) or not raw_kind.strip():
        raise ProtocolError("Missing 'step' field", text)

    try:
        kind = StepKind(raw_kind.strip().upper())
    except ValueError:
        raise UnknownStepError(raw_kind, text) from None

    content = _optional_text(record, "content", text)
    tool_name = _optional_text(record, "tool_name", text).strip()
    step_input = _optional_text(record, "input", text)

    if kind is not StepKind.TOOL:
        if tool_name:
            raise ProtocolError(f"A {kind.value} step cannot name a tool", text)
        return Step(kind=kind, content=content)

    if not tool_name:
        raise ProtocolError("TOOL step requires a 'tool_name'", text)
    if "input" not in record or record["input"] is None:
        raise ProtocolError("TOOL step requires an 'input'", text)

    return Step(kind=kind, content=content, tool_name=tool_name, input=step_input)


def format_observation(tool_output: str) -> Message:
    """Wrap a tool result as a developer observation."""
    record = {"step": OBSERVER, "content": tool_output}
    return Message(role=Role.DEVELOPER, content=json.dumps(record, ensure_ascii=False))


def format_developer_note(text: str) -> Message:
    """Developer message reporting a protocol problem to the model."""
    return Message(role=Role.DEVELOPER, content=text)
