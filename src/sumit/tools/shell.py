"""Shell tool for running commands on the host."""

from pathlib import Path

from .base import Tool, ToolResult
from .process import run_shell, truncate


class ShellTool(Tool):
    """Tool for executing a shell command line on the local machine.

    Commands run unsandboxed in ``cwd`` (the process working directory by
    default). Failures are reported as text:

    - non-zero exit: ``Error running command: ...``
    - zero exit with stderr: ``Stderr: ...``
    """

    def __init__(
        self,
        timeout: float = 60.0,
        max_output_chars: int = 50_000,
        cwd: Path | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_output = max_output_chars
        self._cwd = cwd

    @property
    def name(self) -> str:
        return "run-shell-command"

    @property
    def input_name(self) -> str:
        return "command"

    @property
    def description(self) -> str:
        return (
            "Takes a unix/linux command line, executes it on the machine "
            "and returns the output of the command."
        )

    async def execute(self, value: str) -> ToolResult:
        command = value.strip()
        if not command:
            return ToolResult(success=False, output="", error="Error running command: empty command")

        result = await run_shell(command, timeout=self._timeout, cwd=self._cwd)
        metadata = {
            "exit_code": result.exit_code,
            "duration_ms": result.duration_ms,
            "timed_out": result.timed_out,
        }

        if result.timed_out:
            return ToolResult(
                success=False,
                output="",
                error=f"Error running command: timed out after {self._timeout}s",
                metadata=metadata,
            )

        if result.exit_code != 0:
            detail = (result.stderr or result.stdout).strip()
            error = f"Error running command: Command failed with exit code {result.exit_code}"
            if detail:
                error += f": {detail}"
            return ToolResult(
                success=False,
                output=result.stdout,
                error=truncate(error, self._max_output),
                metadata=metadata,
            )

        if result.stderr:
            return ToolResult(
                success=False,
                output=result.stdout,
                error=truncate(f"Stderr: {result.stderr}", self._max_output),
                metadata=metadata,
            )

        return ToolResult(
            success=True,
            output=truncate(result.stdout or "(no output)", self._max_output),
            metadata=metadata,
        )
