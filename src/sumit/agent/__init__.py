"""Agent loop and step protocol."""

from .loop import AgentConfig, AgentLoop, AgentResult, AgentState, Session, StopReason
from .messages import Message, MessageLog, Role
from .prompt import build_system_prompt
from .protocol import Step, StepKind, format_developer_note, format_observation, parse_step

__all__ = [
    "AgentConfig",
    "AgentLoop",
    "AgentResult",
    "AgentState",
    "Message",
    "MessageLog",
    "Role",
    "Session",
    "Step",
    "StepKind",
    "StopReason",
    "build_system_prompt",
    "format_developer_note",
    "format_observation",
    "parse_step",
]
