"""Base tool interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..errors import ToolExecutionError


@dataclass
class ToolResult:
    """Result from tool execution."""

    success: bool
    output: str
    error: str | None = None
    metadata: dict[str, Any] | None = None

    @property
    def text(self) -> str:
        """Single text result handed back to the model."""
        if self.success:
            return self.output
        return self.error or "Tool failed without an error message"


class Tool(ABC):
    """Base interface for all tools.

    A tool takes exactly one text argument and produces one text result.
    ``invoke`` never raises: every failure comes back as a failed
    ``ToolResult`` so the agent loop can reason about it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description for the system prompt."""
        ...

    @property
    def input_name(self) -> str:
        """Label of the single argument, shown in the tool catalogue."""
        return "input"

    @abstractmethod
    async def execute(self, value: str) -> ToolResult:
        """Run the tool. May raise ToolExecutionError for expected failures."""
        ...

    def signature(self) -> str:
        """Catalogue line for the system prompt."""
        return f"{self.name}({self.input_name}: string): {self.description}"

    async def invoke(self, value: str) -> ToolResult:
        """Execute the tool, converting any failure into a failed result."""
        try:
            return await self.execute(value)
        except ToolExecutionError as e:
            return ToolResult(success=False, output="", error=str(e))
        except Exception as e:
            return ToolResult(
                success=False,
                output="",
                error=f"Tool execution failed: {type(e).__name__}: {e}",
            )
