"""Per-session conversation transcripts.

Each chat session is written to ``<log_dir>/<date>_<chat_id>.jsonl``: the
user prompt, every parsed step, each tool call with its result and the
reason the loop stopped.
"""

from datetime import date
from pathlib import Path
from typing import Any

from .logging import append_jsonl, utc_now

# Long tool output and unreadable replies are clipped in the transcript
TRANSCRIPT_TEXT_LIMIT = 2000


class ConversationLogger:
    """Writes one transcript file per chat session."""

    def __init__(self, log_dir: Path | str | None = None) -> None:
        self.log_dir = Path(log_dir) if log_dir is not None else Path.cwd() / "logs"
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def log_file(self, chat_id: str) -> Path:
        return self.log_dir / f"{date.today().isoformat()}_{chat_id}.jsonl"

    def record(self, chat_id: str, event: str, **fields: Any) -> None:
        """Append an event to the session's transcript."""
        append_jsonl(
            self.log_file(chat_id),
            {"timestamp": utc_now(), "chat_id": chat_id, "event": event, **fields},
        )

    def log_user_message(self, chat_id: str, content: str) -> None:
        self.record(chat_id, "user_message", role="user", content=content)

    def log_step(self, chat_id: str, step: dict[str, str]) -> None:
        """Record a parsed assistant step in its wire form."""
        self.record(chat_id, "step", role="assistant", **step)

    def log_tool_call(self, chat_id: str, tool_name: str, tool_input: str) -> None:
        self.record(chat_id, "tool_call", tool_name=tool_name, input=tool_input)

    def log_tool_result(
        self,
        chat_id: str,
        tool_name: str,
        success: bool,
        output: str,
        duration_ms: float | None = None,
    ) -> None:
        fields: dict[str, Any] = {
            "tool_name": tool_name,
            "success": success,
            "output": (output or "")[:TRANSCRIPT_TEXT_LIMIT],
        }
        if duration_ms is not None:
            fields["duration_ms"] = duration_ms
        self.record(chat_id, "tool_result", **fields)

    def log_llm_request(self, chat_id: str, model: str, messages_count: int) -> None:
        self.record(chat_id, "llm_request", model=model, messages_count=messages_count)

    def log_protocol_error(self, chat_id: str, error: str, reply: str) -> None:
        """Record a reply that could not be read as a step."""
        self.record(chat_id, "protocol_error", error=error, reply=reply[:TRANSCRIPT_TEXT_LIMIT])

    def log_agent_stop(
        self, chat_id: str, stop_reason: str, turns: int, tool_calls_total: int
    ) -> None:
        self.record(
            chat_id,
            "agent_stop",
            stop_reason=stop_reason,
            turns=turns,
            tool_calls_total=tool_calls_total,
        )


_conversation_logger: ConversationLogger | None = None


def get_conversation_logger(log_dir: Path | str | None = None) -> ConversationLogger:
    global _conversation_logger
    if _conversation_logger is None:
        _conversation_logger = ConversationLogger(log_dir=log_dir)
    return _conversation_logger


def reset_conversation_logger() -> None:
    """Drop the shared transcript writer so the next call builds a fresh one."""
    global _conversation_logger
    _conversation_logger = None
