"""Website mirroring tool built on wget."""

import json
from pathlib import Path
from typing import Awaitable, Callable, Sequence
from urllib.parse import urlparse

from ..errors import ToolExecutionError
from .base import Tool, ToolResult
from .process import ExecResult, run_exec

ALLOWED_SCHEMES = {"http", "https"}

# Hosts commonly serving a site's fonts and scripts
EXTRA_DOMAINS = ("cdn.jsdelivr.net", "fonts.googleapis.com", "fonts.gstatic.com")

# Lines of wget's log kept in the result
LOG_TAIL_LINES = 20

Runner = Callable[[Sequence[str], float, Path | None], Awaitable[ExecResult]]


def validate_url(url: str) -> tuple[bool, str | None, str | None]:
    """Validate URL scheme and host.

    Returns (valid, hostname, error_message).
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, None, f"Invalid URL: {e}"

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False, None, f"Scheme not allowed: {parsed.scheme or '(none)'}. Use http or https."

    if not parsed.hostname:
        return False, None, "URL must have a hostname"

    return True, parsed.hostname, None


def build_wget_command(url: str, hostname: str, output_dir: Path) -> list[str]:
    """Build the wget argv that mirrors ``url`` into ``output_dir``."""
    domains = ",".join((hostname, *EXTRA_DOMAINS))
    return [
        "wget",
        "--mirror",
        "--convert-links",
        "--adjust-extension",
        "--page-requisites",
        "--no-parent",
        "--span-hosts",
        f"--domains={domains}",
        "--execute",
        "robots=off",
        "--include-directories=/_next/,/",
        f"--directory-prefix={output_dir}",
        url,
    ]


class MirrorTool(Tool):
    """Tool that downloads a website for offline use.

    The download is awaited to completion so the result always reports
    whether mirroring succeeded.
    """

    def __init__(
        self,
        output_dir: Path | None = None,
        timeout: float = 600.0,
        runner: Runner | None = None,
    ) -> None:
        self._output_dir = output_dir or Path.cwd() / "mirrors"
        self._timeout = timeout
        self._runner = runner or run_exec

    @property
    def name(self) -> str:
        return "mirror-website"

    @property
    def input_name(self) -> str:
        return "url"

    @property
    def description(self) -> str:
        return "Takes a website url and mirrors the website (pages, styles, scripts, images) to the local machine."

    async def execute(self, value: str) -> ToolResult:
        url = value.strip()
        valid, hostname, error = validate_url(url)
        if not valid:
            raise ToolExecutionError(f"Cannot mirror {url!r}: {error}")
        assert hostname is not None

        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ToolExecutionError(f"Cannot create output directory {self._output_dir}: {e}") from e

        argv = build_wget_command(url, hostname, self._output_dir)
        result = await self._runner(argv, self._timeout, None)

        if result.timed_out:
            raise ToolExecutionError(f"Mirroring {url} timed out after {self._timeout}s")

        # wget writes its progress log to stderr even on success
        log_tail = "\n".join(result.stderr.strip().splitlines()[-LOG_TAIL_LINES:])

        # Exit code 8 means some requisites failed but the main page was fetched
        if result.exit_code not in (0, 8):
            raise ToolExecutionError(
                f"Mirroring {url} failed with wget exit code {result.exit_code}: {log_tail}"
            )

        site_dir = self._output_dir / hostname
        message = f"Website mirrored successfully to {site_dir}"
        if result.exit_code == 8:
            message += " (some resources could not be downloaded)"

        return ToolResult(
            success=True,
            output=json.dumps({"message": message, "output": log_tail}, ensure_ascii=False),
            metadata={
                "exit_code": result.exit_code,
                "duration_ms": result.duration_ms,
                "output_dir": str(site_dir),
            },
        )
