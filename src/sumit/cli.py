"""CLI interface for Sumit."""

import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from groq import APIError

from .agent import AgentConfig, AgentLoop, AgentResult, StopReason
from .errors import ConfigError, LoopBudgetExceeded
from .logging import JSONLLogger, configure_logger, get_logger
from .tools import ToolRegistry, ToolSettings, build_default_registry

BANNER = """
╔══════════════════════════════════════════╗
║             ✨ Sumit CLI v0.1.0           ║
║      Your friendly terminal assistant    ║
╚══════════════════════════════════════════╝
"""

PROGRESS_ICONS = {
    "START": "🏁",
    "THINK": "🧠",
    "TOOL": "🔧",
    "OBSERVER": "👀",
    "OUTPUT": "✅",
    "ERROR": "⚠",
}


@dataclass
class Settings:
    """Process configuration, read once from the environment."""

    api_key: str
    agent: AgentConfig = field(default_factory=AgentConfig)
    tools: ToolSettings = field(default_factory=ToolSettings)
    log_dir: Path | None = None


def _env_number(name: str, default: str, cast: Callable[[str], float]) -> float:
    raw = os.getenv(name, default)
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _config_from_env() -> Settings:
    """Load configuration from environment variables."""
    api_key = os.getenv("GROQ_API_KEY", "").strip()
    if not api_key:
        raise ConfigError(
            "GROQ_API_KEY environment variable not set. "
            "Please set it in your .env file or environment"
        )

    agent_config = AgentConfig(
        model=os.getenv("SUMIT_MODEL", AgentConfig.model),
        max_turns=int(_env_number("SUMIT_MAX_TURNS", "25", int)),
        json_mode=_env_flag("SUMIT_JSON_MODE"),
        developer_role=os.getenv("SUMIT_DEVELOPER_ROLE", "developer"),
        recover_unknown_steps=_env_flag("SUMIT_RECOVER_UNKNOWN_STEPS"),
        api_key=api_key,
    )

    mirror_dir = os.getenv("SUMIT_MIRROR_DIR")
    tool_settings = ToolSettings(
        http_timeout=_env_number("SUMIT_HTTP_TIMEOUT", "10", float),
        shell_timeout=_env_number("SUMIT_SHELL_TIMEOUT", "60", float),
        mirror_dir=Path(mirror_dir).expanduser() if mirror_dir else None,
        mirror_timeout=_env_number("SUMIT_MIRROR_TIMEOUT", "600", float),
    )

    log_dir = os.getenv("SUMIT_LOG_DIR")
    return Settings(
        api_key=api_key,
        agent=agent_config,
        tools=tool_settings,
        log_dir=Path(log_dir).expanduser() if log_dir else None,
    )


def _box(text: str) -> str:
    width = max(len(line) for line in text.splitlines()) + 4
    lines = ["╭" + "─" * width + "╮"]
    lines += [f"│  {line.ljust(width - 4)}  │" for line in text.splitlines()]
    lines.append("╰" + "─" * width + "╯")
    return "\n".join(lines)


class CLI:
    """Interactive single-prompt command-line interface."""

    def __init__(
        self,
        settings: Settings,
        registry: ToolRegistry | None = None,
        agent: AgentLoop | None = None,
        logger: JSONLLogger | None = None,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        self.settings = settings
        self.registry = registry or build_default_registry(settings.tools)
        self.agent = agent or AgentLoop(
            self.registry,
            settings.agent,
            on_progress=self._print_progress,
        )
        self.logger = logger or get_logger()
        self.chat_id = self._new_chat_id()
        self.logger.set_chat_id(self.chat_id)
        self._input = input_fn
        self._closed = False

    def _new_chat_id(self) -> str:
        return f"cli-{uuid.uuid4().hex[:8]}"

    def _print_progress(self, label: str, text: str) -> None:
        icon = PROGRESS_ICONS.get(label, "•")
        print(f"{icon} {label}: {text}")

    def _ask_prompt(self) -> str:
        """Ask for the prompt until a non-empty one is given."""
        while True:
            prompt = self._input("? Enter prompt: ").strip()
            if prompt:
                return prompt

    def _format_response(self, result: AgentResult) -> str:
        """Format the agent's response for display."""
        output = ["\n" + "─" * 40]
        if result.output is not None:
            output.append(result.output)
        output.append("─" * 40)

        if result.stop_reason != StopReason.COMPLETE:
            output.append(f"⚠ Stopped: {result.stop_reason.value} (turns: {result.turns})")

        return "\n".join(output)

    async def run(self) -> int:
        """Run one prompt through the agent. Returns the process exit code."""
        print(BANNER)
        self.logger.log_session_start(self.settings.agent.model)

        try:
            prompt = self._ask_prompt()
        except EOFError:
            return 0

        try:
            result = await self.agent.run(prompt, chat_id=self.chat_id)
        except LoopBudgetExceeded as e:
            print(f"\n⚠ {e}. The model never produced a final answer.")
            self.logger.log_agent_stop("loop_budget_exceeded", turns=e.max_turns)
            return 1
        except APIError as e:
            print(f"\n❌ Error: {e}")
            self.logger.log_error(str(e))
            return 1

        print(self._format_response(result))
        self.logger.log_agent_stop(result.stop_reason.value, turns=result.turns)
        return 0 if result.stop_reason == StopReason.COMPLETE else 1

    def shutdown(self, interrupted: bool = False) -> None:
        """Print the farewell notice and record the session end. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        if interrupted:
            message = "👋 You pressed Ctrl+C. Exiting Sumit CLI..."
        else:
            message = "👋 Exiting Sumit CLI... Goodbye!"
        print("\n" + _box(message) + "\n")
        self.logger.log_session_end("interrupt" if interrupted else "normal")


def create_cli() -> CLI:
    """Build the CLI from environment configuration."""
    settings = _config_from_env()
    configure_logger(settings.log_dir)
    return CLI(settings)
