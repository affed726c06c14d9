"""Tool registry for looking up tools by name."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

from .base import Tool
from .github import GitHubProfileTool
from .mirror import MirrorTool
from .shell import ShellTool
from .weather import WeatherTool


class ToolName(str, Enum):
    """Names of the built-in tools."""

    WEATHER = "weather-by-city"
    PROFILE = "profile-by-username"
    SHELL = "run-shell-command"
    MIRROR = "mirror-website"


@dataclass
class ToolSettings:
    """Configuration for the built-in tools."""

    http_timeout: float = 10.0
    shell_timeout: float = 60.0
    shell_max_output: int = 50_000
    mirror_dir: Path | None = None
    mirror_timeout: float = 600.0


class ToolRegistry:
    """Closed set of tools, fixed when the registry is built."""

    def __init__(self, tools: Iterable[Tool]) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Tool '{tool.name}' already registered")
            self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        """Get a tool by name, or None when no such tool exists."""
        return self._tools.get(name.strip())

    def names(self) -> list[str]:
        """List all registered tool names."""
        return list(self._tools.keys())

    def catalogue(self) -> list[str]:
        """Signature lines for every tool, in registration order."""
        return [tool.signature() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip() in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def _build_tool(name: ToolName, settings: ToolSettings) -> Tool:
    if name is ToolName.WEATHER:
        return WeatherTool(timeout=settings.http_timeout)
    if name is ToolName.PROFILE:
        return GitHubProfileTool(timeout=settings.http_timeout)
    if name is ToolName.SHELL:
        return ShellTool(
            timeout=settings.shell_timeout,
            max_output_chars=settings.shell_max_output,
        )
    if name is ToolName.MIRROR:
        return MirrorTool(output_dir=settings.mirror_dir, timeout=settings.mirror_timeout)
    raise ValueError(f"No builder for tool {name!r}")


def build_default_registry(settings: ToolSettings | None = None) -> ToolRegistry:
    """Build the registry holding every built-in tool."""
    settings = settings or ToolSettings()
    return ToolRegistry(_build_tool(name, settings) for name in ToolName)
