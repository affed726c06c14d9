"""Tests for the entry point exit codes."""

import os
import select
import signal
import subprocess
import sys
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sumit import main as main_module
from sumit.errors import ConfigError

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


@pytest.fixture
def cli(monkeypatch) -> MagicMock:
    cli = MagicMock()
    monkeypatch.setattr(main_module, "create_cli", lambda: cli)
    monkeypatch.setattr(main_module, "load_dotenv", lambda *args, **kwargs: None)
    return cli


def fake_asyncio_run(result=None, error: BaseException | None = None):
    def run(coro):
        coro.close()
        if error is not None:
            raise error
        return result

    return run


def test_normal_exit(cli: MagicMock, monkeypatch) -> None:
    async def run():
        return 0

    cli.run = run
    monkeypatch.setattr(main_module.asyncio, "run", fake_asyncio_run(result=0))

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 0
    cli.shutdown.assert_called_once_with()


def test_failure_exit_code(cli: MagicMock, monkeypatch) -> None:
    async def run():
        return 1

    cli.run = run
    monkeypatch.setattr(main_module.asyncio, "run", fake_asyncio_run(result=1))

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 1


def test_interrupt_exits_cleanly(cli: MagicMock, monkeypatch) -> None:
    async def run():
        return 0

    cli.run = run
    monkeypatch.setattr(main_module.asyncio, "run", fake_asyncio_run(error=KeyboardInterrupt()))

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 0
    cli.shutdown.assert_called_once_with(interrupted=True)


def test_config_error(monkeypatch, capsys) -> None:
    def broken():
        raise ConfigError("GROQ_API_KEY environment variable not set")

    monkeypatch.setattr(main_module, "create_cli", broken)
    monkeypatch.setattr(main_module, "load_dotenv", lambda *args, **kwargs: None)

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 1
    assert "GROQ_API_KEY" in capsys.readouterr().out


def read_until(stream, marker: bytes, timeout: float = 10.0) -> bytes:
    """Read from a raw pipe until ``marker`` shows up, the pipe closes or time runs out."""
    output = b""
    deadline = time.monotonic() + timeout
    while marker not in output:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        ready, _, _ = select.select([stream], [], [], remaining)
        if not ready:
            break
        chunk = os.read(stream.fileno(), 4096)
        if not chunk:
            break
        output += chunk
    return output


@pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals")
def test_sigint_at_prompt_says_goodbye(tmp_path) -> None:
    env = dict(os.environ)
    env.update(
        GROQ_API_KEY="test-key",
        SUMIT_LOG_DIR=str(tmp_path / "logs"),
        PYTHONUNBUFFERED="1",
        PYTHONPATH=os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")])),
    )
    proc = subprocess.Popen(
        [sys.executable, "-m", "sumit"],
        cwd=tmp_path,
        env=env,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        bufsize=0,
    )
    try:
        before = read_until(proc.stdout, b"Enter prompt")
        assert b"Enter prompt" in before

        proc.send_signal(signal.SIGINT)
        after, stderr = proc.communicate(timeout=10)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    assert proc.returncode == 0, stderr.decode(errors="replace")
    assert "You pressed Ctrl+C. Exiting Sumit CLI" in (before + after).decode()
