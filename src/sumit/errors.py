"""Exception hierarchy for sumit.

    SumitError
    ├── ProtocolError
    │   └── UnknownStepError(kind)
    ├── UnknownToolError(tool_name, available)
    ├── ToolExecutionError
    ├── LoopBudgetExceeded(max_turns, messages)
    └── ConfigError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .agent.messages import MessageLog


class SumitError(Exception):
    """Base exception for all sumit errors."""


class ProtocolError(SumitError):
    """Assistant reply could not be read as a step record."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(message)


class UnknownStepError(ProtocolError):
    """Reply is well-formed but names a step kind the loop does not handle."""

    def __init__(self, kind: str, raw: str = "") -> None:
        self.kind = kind
        super().__init__(f"Unrecognized step kind: {kind!r}", raw)


class UnknownToolError(SumitError):
    """A TOOL step named a tool that is not in the registry."""

    def __init__(self, tool_name: str, available: Iterable[str] = ()) -> None:
        self.tool_name = tool_name
        self.available = list(available)
        msg = f"There is no such tool {tool_name}."
        if self.available:
            msg += f" Available tools: {', '.join(self.available)}."
        super().__init__(msg)


class ToolExecutionError(SumitError):
    """The operation behind a tool failed.

    Raised inside tools only; ``Tool.invoke`` turns it into failure text.
    """


class LoopBudgetExceeded(SumitError):
    """The agent used every allowed turn without producing OUTPUT."""

    def __init__(self, max_turns: int, messages: MessageLog | None = None) -> None:
        self.max_turns = max_turns
        self.messages = messages
        super().__init__(f"No OUTPUT step after {max_turns} turns")


class ConfigError(SumitError):
    """Missing or invalid configuration."""
