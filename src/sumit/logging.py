"""Structured JSONL logging.

Two streams are written with the helpers here: the process event log kept
by :class:`JSONLLogger`, and the per-session transcripts written by
:mod:`sumit.conversation_logger`. One JSON object per line.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DEFAULT_LOG_DIR = Path.home() / ".sumit" / "logs"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def append_jsonl(path: Path, record: Mapping[str, Any]) -> None:
    """Append one record as a JSON line."""
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")


def rotate(path: Path, max_bytes: int) -> Path | None:
    """Move ``path`` aside once it has grown to ``max_bytes``.

    Returns the rotated file, or None when nothing was moved.
    """
    try:
        size = path.stat().st_size
    except FileNotFoundError:
        return None
    if size < max_bytes:
        return None

    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    target = path.with_name(f"{path.stem}_{stamp}{path.suffix}")
    path.rename(target)
    return target


@dataclass
class LogEvent:
    """A process-level event. Unset fields are left out of the record."""

    event: str
    chat_id: str | None = None
    model: str | None = None
    turns: int | None = None
    stop_reason: str | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_now)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {"timestamp": self.timestamp, "event": self.event}
        for key in ("chat_id", "model", "turns", "stop_reason", "error"):
            value = getattr(self, key)
            if value is not None:
                record[key] = value
        if self.details:
            record["details"] = self.details
        return record


class JSONLLogger:
    """Event log for CLI sessions, rotated by size."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "logs.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        self.log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = self.log_dir / filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self.chat_id: str | None = None

    def set_chat_id(self, chat_id: str | None) -> None:
        """Tag later events with ``chat_id`` unless they name their own."""
        self.chat_id = chat_id

    def emit(self, event: LogEvent) -> None:
        if event.chat_id is None:
            event.chat_id = self.chat_id
        rotate(self.log_path, self.max_size_bytes)
        append_jsonl(self.log_path, event.to_record())

    def log(
        self,
        event: str,
        *,
        chat_id: str | None = None,
        model: str | None = None,
        turns: int | None = None,
        stop_reason: str | None = None,
        error: str | None = None,
        **details: Any,
    ) -> None:
        self.emit(
            LogEvent(
                event,
                chat_id=chat_id,
                model=model,
                turns=turns,
                stop_reason=stop_reason,
                error=error,
                details=details,
            )
        )

    def log_session_start(self, model: str) -> None:
        self.log("session_start", model=model)

    def log_session_end(self, reason: str) -> None:
        self.log("session_end", reason=reason)

    def log_agent_stop(self, stop_reason: str, *, turns: int | None = None) -> None:
        self.log("agent_stop", stop_reason=stop_reason, turns=turns)

    def log_error(self, error: str, *, chat_id: str | None = None, **details: Any) -> None:
        self.log("error", chat_id=chat_id, error=error, **details)


_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Return the process-wide event log, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Replace the process-wide event log."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger
