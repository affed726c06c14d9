"""Subprocess execution shared by the shell and mirror tools."""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..errors import ToolExecutionError


@dataclass
class ExecResult:
    """Result of running a host process."""

    exit_code: int
    stdout: str
    stderr: str
    duration_ms: float
    timed_out: bool = False


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + "\n... [output truncated]"


async def _communicate(
    proc: asyncio.subprocess.Process, timeout: float, start_time: float
) -> ExecResult:
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.CancelledError:
        # Interrupted sessions must not leave the child running
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise
    except asyncio.TimeoutError:
        proc.kill()
        # Reap the killed process so it does not linger as a zombie
        await proc.communicate()
        return ExecResult(
            exit_code=-1,
            stdout="",
            stderr="",
            duration_ms=(time.monotonic() - start_time) * 1000,
            timed_out=True,
        )

    return ExecResult(
        exit_code=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        duration_ms=(time.monotonic() - start_time) * 1000,
    )


async def run_shell(command: str, timeout: float, cwd: Path | None = None) -> ExecResult:
    """Run a command line through the system shell."""
    start_time = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise ToolExecutionError(f"Failed to start process: {e}") from e

    return await _communicate(proc, timeout, start_time)


async def run_exec(argv: Sequence[str], timeout: float, cwd: Path | None = None) -> ExecResult:
    """Run a program directly, without a shell."""
    start_time = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise ToolExecutionError(f"Failed to start {argv[0]}: {e}") from e

    return await _communicate(proc, timeout, start_time)
