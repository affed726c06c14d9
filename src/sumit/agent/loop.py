"""Agent loop implementation."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from groq import AsyncGroq

from ..conversation_logger import ConversationLogger, get_conversation_logger
from ..errors import LoopBudgetExceeded, ProtocolError, UnknownStepError, UnknownToolError
from ..tools import ToolRegistry
from .messages import MessageLog, Role
from .prompt import build_system_prompt, format_protocol_error
from .protocol import OBSERVER, Step, StepKind, format_developer_note, format_observation, parse_step

ProgressCallback = Callable[[str, str], None]


class StopReason(Enum):
    """Reasons for stopping the agent loop."""

    COMPLETE = "complete"
    UNKNOWN_STEP = "unknown_step"


class AgentState(Enum):
    """Where a session is in the think → act → observe cycle."""

    STARTING = "starting"
    THINKING = "thinking"
    AWAITING_TOOL = "awaiting_tool"
    OUTPUTTING = "outputting"
    DONE = "done"


@dataclass
class AgentConfig:
    """Configuration for the agent loop."""

    model: str = "llama-3.3-70b-versatile"
    max_turns: int = 25
    temperature: float | None = None
    json_mode: bool = False
    # Wire role for developer messages; "developer" unless the engine rejects it
    developer_role: str = "developer"
    recover_unknown_steps: bool = False
    api_key: str | None = field(default=None, repr=False)


@dataclass
class Session:
    """State of one prompt's run through the loop."""

    messages: MessageLog = field(default_factory=MessageLog)
    state: AgentState = AgentState.STARTING
    turns: int = 0
    tool_calls: list[dict[str, Any]] = field(default_factory=list)

    @property
    def running(self) -> bool:
        return self.state is not AgentState.DONE


@dataclass
class AgentResult:
    """Result from running the agent loop."""

    output: str | None
    stop_reason: StopReason
    turns: int
    messages: MessageLog
    tool_calls: list[dict[str, Any]] = field(default_factory=list)


class AgentLoop:
    """Main agent loop: think → act → observe, one step per model reply."""

    def __init__(
        self,
        registry: ToolRegistry,
        config: AgentConfig | None = None,
        groq_client: AsyncGroq | None = None,
        conversation_logger: ConversationLogger | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or AgentConfig()
        self.client = groq_client or AsyncGroq(api_key=self.config.api_key)
        self._conv_logger = conversation_logger
        self._on_progress = on_progress

    @property
    def conv_logger(self) -> ConversationLogger:
        if self._conv_logger is None:
            self._conv_logger = get_conversation_logger()
        return self._conv_logger

    def _progress(self, label: str, text: str) -> None:
        if self._on_progress is not None:
            self._on_progress(label, text)

    async def _complete(self, session: Session, chat_id: str | None) -> str:
        """Send the conversation to the model and return its reply text."""
        if chat_id:
            self.conv_logger.log_llm_request(
                chat_id,
                model=self.config.model,
                messages_count=len(session.messages),
            )

        kwargs: dict[str, Any] = {}
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature
        if self.config.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(
            model=self.config.model,
            messages=session.messages.to_request(self.config.developer_role),
            **kwargs,
        )
        return response.choices[0].message.content or ""

    def _report_protocol_error(
        self, session: Session, error: ProtocolError, chat_id: str | None
    ) -> None:
        """Tell the model its reply was unusable and keep going."""
        session.messages.append(format_developer_note(format_protocol_error(str(error))))
        self._progress("ERROR", str(error))
        if chat_id:
            self.conv_logger.log_protocol_error(chat_id, str(error), error.raw)

    async def _dispatch(self, session: Session, step: Step, chat_id: str | None) -> None:
        """Run the tool named by a TOOL step and append its observation."""
        assert step.tool_name is not None
        tool_input = step.input or ""

        if chat_id:
            self.conv_logger.log_tool_call(chat_id, step.tool_name, tool_input)

        tool = self.registry.get(step.tool_name)
        if tool is None:
            error = UnknownToolError(step.tool_name, self.registry.names())
            session.messages.append(format_developer_note(str(error)))
            session.tool_calls.append({"name": step.tool_name, "input": tool_input, "success": False})
            self._progress("ERROR", str(error))
            if chat_id:
                self.conv_logger.log_tool_result(chat_id, step.tool_name, False, str(error))
            return

        self._progress("TOOL", f"{tool.name} with input: {tool_input}")
        session.state = AgentState.AWAITING_TOOL

        start_time = time.time()
        result = await tool.invoke(tool_input)
        duration_ms = (time.time() - start_time) * 1000

        session.messages.append(format_observation(result.text))
        session.tool_calls.append({"name": tool.name, "input": tool_input, "success": result.success})
        session.state = AgentState.THINKING
        self._progress(OBSERVER, result.text)

        if chat_id:
            self.conv_logger.log_tool_result(
                chat_id,
                tool_name=tool.name,
                success=result.success,
                output=result.text,
                duration_ms=duration_ms,
            )

    def _finish(
        self,
        session: Session,
        stop_reason: StopReason,
        output: str | None,
        chat_id: str | None,
    ) -> AgentResult:
        session.state = AgentState.DONE
        if chat_id:
            self.conv_logger.log_agent_stop(
                chat_id,
                stop_reason=stop_reason.value,
                turns=session.turns,
                tool_calls_total=len(session.tool_calls),
            )
        return AgentResult(
            output=output,
            stop_reason=stop_reason,
            turns=session.turns,
            messages=session.messages,
            tool_calls=session.tool_calls,
        )

    async def run(self, prompt: str, chat_id: str | None = None) -> AgentResult:
        """Run the agent loop for a user prompt.

        Args:
            prompt: The user's request.
            chat_id: Optional session identifier; enables the transcript log.

        Returns:
            AgentResult with the final output, or ``output=None`` when the
            model emitted an unrecognized step kind.

        Raises:
            LoopBudgetExceeded: ``max_turns`` model calls produced no OUTPUT.
        """
        session = Session()
        session.messages.add(Role.SYSTEM, build_system_prompt(self.registry.catalogue()))
        session.messages.add(Role.USER, prompt)

        if chat_id:
            self.conv_logger.log_user_message(chat_id, prompt)

        for turn in range(self.config.max_turns):
            session.turns = turn + 1

            # Think: one model call per turn
            reply = await self._complete(session, chat_id)
            session.messages.add(Role.ASSISTANT, reply)

            try:
                step = parse_step(reply)
            except UnknownStepError as e:
                if not self.config.recover_unknown_steps:
                    self._progress("ERROR", f"{e}, stopping")
                    if chat_id:
                        self.conv_logger.log_protocol_error(chat_id, str(e), reply)
                    return self._finish(session, StopReason.UNKNOWN_STEP, None, chat_id)
                self._report_protocol_error(session, e, chat_id)
                continue
            except ProtocolError as e:
                self._report_protocol_error(session, e, chat_id)
                continue

            if chat_id:
                self.conv_logger.log_step(chat_id, step.to_dict())

            if step.kind is StepKind.START:
                session.state = AgentState.THINKING
                self._progress(step.kind.value, step.content)
            elif step.kind is StepKind.THINK:
                session.state = AgentState.THINKING
                self._progress(step.kind.value, step.content)
            elif step.kind is StepKind.TOOL:
                # Act + observe: the observation lands before the next model call
                await self._dispatch(session, step, chat_id)
            elif step.kind is StepKind.OUTPUT:
                session.state = AgentState.OUTPUTTING
                self._progress(step.kind.value, step.content)
                return self._finish(session, StopReason.COMPLETE, step.content, chat_id)

        session.state = AgentState.DONE
        if chat_id:
            self.conv_logger.log_agent_stop(
                chat_id,
                stop_reason="loop_budget_exceeded",
                turns=session.turns,
                tool_calls_total=len(session.tool_calls),
            )
        raise LoopBudgetExceeded(self.config.max_turns, session.messages)
