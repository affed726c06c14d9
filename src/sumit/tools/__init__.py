"""Tool registry and tool implementations."""

from .base import Tool, ToolResult
from .github import GitHubProfileTool
from .mirror import MirrorTool
from .registry import ToolName, ToolRegistry, ToolSettings, build_default_registry
from .shell import ShellTool
from .weather import WeatherTool

__all__ = [
    "GitHubProfileTool",
    "MirrorTool",
    "ShellTool",
    "Tool",
    "ToolName",
    "ToolRegistry",
    "ToolResult",
    "ToolSettings",
    "WeatherTool",
    "build_default_registry",
]
