"""
Command runner — execute external programs and capture their output.

This is the process boundary every probe and listing goes through.
It runs argument vectors (never a shell string), bounds each call
with a timeout, and NEVER raises: a missing binary, a non-zero exit
and a hung process all come back as a failed CommandResult.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds


class CommandResult(BaseModel):
    """Outcome of one external process invocation."""

    args: list[str] = Field(default_factory=list)
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    timed_out: bool = False
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the process ran and exited with status 0."""
        return self.error is None and self.returncode == 0

    @property
    def command(self) -> str:
        return " ".join(self.args)

    @classmethod
    def success(cls, args: Sequence[str], stdout: str = "", **kwargs: Any) -> CommandResult:
        """Create a zero-exit result."""
        return cls(args=list(args), returncode=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(
        cls,
        args: Sequence[str],
        error: str,
        returncode: int | None = None,
        **kwargs: Any,
    ) -> CommandResult:
        """Create a failed result."""
        return cls(args=list(args), returncode=returncode, error=error, **kwargs)


class CommandRunner:
    """Run programs asynchronously with a per-call timeout.

    Args:
        timeout: Default timeout in seconds for calls that don't pass one.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    async def run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        """Run ``args`` and capture stdout/stderr.

        Returns:
            CommandResult — ``ok`` is True only for a clean zero exit.
        """
        args = [str(a) for a in args]
        limit = timeout if timeout is not None else self.timeout
        if not args:
            return CommandResult.failure(args, error="Empty command")

        logger.debug("Running: %s (timeout=%ss)", " ".join(args), limit)
        start = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            return CommandResult.failure(args, error=f"Cannot execute {args[0]}: {e}")
        except OSError as e:
            return CommandResult.failure(args, error=f"Command execution error: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=limit)
        except asyncio.TimeoutError:
            await _kill(proc)
            logger.debug("Timed out after %ss: %s", limit, " ".join(args))
            return CommandResult.failure(
                args,
                error=f"Command timed out after {limit}s",
                timed_out=True,
                duration_ms=_elapsed_ms(start),
            )

        elapsed_ms = _elapsed_ms(start)
        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace")

        if proc.returncode == 0:
            return CommandResult.success(args, stdout=out, stderr=err, duration_ms=elapsed_ms)

        return CommandResult.failure(
            args,
            error=err.strip() or f"Command exited with code {proc.returncode}",
            returncode=proc.returncode,
            stdout=out,
            stderr=err,
            duration_ms=elapsed_ms,
        )


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Terminate a hung child and reap it."""
    try:
        proc.kill()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(proc.wait(), timeout=2)
    except asyncio.TimeoutError:
        logger.warning("Process %s did not exit after kill", proc.pid)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
