"""Command runner for async subprocess execution.

This module provides the CommandRunner class used for every git invocation:
version probes during discovery and non-interactive config writes.
"""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING

from gitboot.exceptions import WorkingDirectoryError
from gitboot.runners.models import CommandResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = ["CommandRunner"]

#: Seconds between SIGTERM and SIGKILL when a timed-out command is stopped.
TERMINATION_GRACE_PERIOD: float = 2.0


class CommandRunner:
    """Execute commands without a shell, with environment control.

    Provides async command execution with:
    - Working directory validation
    - Environment variable inheritance and override
    - Optional timeout with graceful termination (SIGTERM + grace period + SIGKILL)
    - Duration measurement

    Spawn failures never raise: a missing executable is reported as
    returncode 127, anything else that prevents the start (permissions,
    a non-executable file, an unusable argument) as 126, so callers can treat
    "could not start" and "exited non-zero" alike.

    Example:
        ```python
        runner = CommandRunner(env={"GIT_TERMINAL_PROMPT": "0"})
        result = await runner.run(["git", "--version"])
        if result.success:
            print(result.stdout)
        ```
    """

    def __init__(
        self,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the CommandRunner.

        Args:
            cwd: Default working directory; None means the caller's cwd.
            timeout: Default timeout in seconds. None (the default) waits forever.
            env: Variables layered over os.environ for every command.
        """
        self._cwd = cwd
        self._timeout = timeout
        self._extra_env = dict(env or {})

    @property
    def cwd(self) -> Path | None:
        """Default working directory, if any."""
        return self._cwd

    @property
    def timeout(self) -> float | None:
        """Timeout applied when run() is not given one."""
        return self._timeout

    def _validate_cwd(self, cwd: Path | None) -> None:
        """Raise WorkingDirectoryError unless ``cwd`` is an existing directory."""
        if cwd is not None and not cwd.is_dir():
            raise WorkingDirectoryError(
                f"Working directory does not exist: {cwd}",
                path=cwd,
            )

    def _build_env(self, extra_env: Mapping[str, str] | None = None) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self._extra_env)
        if extra_env:
            env.update(extra_env)
        return env

    async def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run ``command`` to completion and capture its output.

        Args:
            command: argv, executed without a shell.
            cwd: Working directory for this call.
            timeout: Seconds before the process is stopped; 0 or less disables it.
            env: Variables layered over the runner env for this call.

        Returns:
            The captured CommandResult; a non-zero exit is not an error.

        Raises:
            WorkingDirectoryError: If the effective cwd is not a directory.
        """
        effective_cwd = cwd if cwd is not None else self._cwd
        self._validate_cwd(effective_cwd)

        effective_timeout = timeout if timeout is not None else self._timeout
        if effective_timeout is not None and effective_timeout <= 0:
            effective_timeout = None

        return await self._execute_once(
            command, effective_cwd, effective_timeout, self._build_env(env)
        )

    async def _execute_once(
        self,
        command: Sequence[str],
        cwd: Path | None,
        timeout: float | None,
        env: dict[str, str],
    ) -> CommandResult:
        start_time = time.monotonic()
        timed_out = False
        returncode = 0
        stdout_str = ""
        stderr_str = ""

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=env,
            )

            try:
                stdout_bytes, stderr_bytes = await asyncio.wait_for(
                    process.communicate(),
                    timeout=timeout,
                )
                returncode = process.returncode or 0
                stdout_str = stdout_bytes.decode("utf-8", errors="replace")
                stderr_str = stderr_bytes.decode("utf-8", errors="replace")

            except TimeoutError:
                timed_out = True
                process.terminate()
                try:
                    await asyncio.wait_for(
                        process.wait(), timeout=TERMINATION_GRACE_PERIOD
                    )
                except TimeoutError:
                    process.kill()
                    await process.wait()
                returncode = -1
                stderr_str = f"Command timed out after {timeout}s"

        except FileNotFoundError:
            returncode = 127
            stderr_str = f"Command not found: {command[0]}"
        except PermissionError:
            returncode = 126
            stderr_str = f"Permission denied: {command[0]}"
        except (OSError, ValueError) as e:
            # not a directory, exec format error, NUL byte in argv
            returncode = 126
            stderr_str = f"Cannot execute {command[0]}: {e}"

        duration_ms = int((time.monotonic() - start_time) * 1000)

        return CommandResult(
            returncode=returncode,
            stdout=stdout_str,
            stderr=stderr_str,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )
