"""Run the located git binary."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from gitboot.events import EventEmitter
from gitboot.git.models import GitInfo
from gitboot.logging import get_logger
from gitboot.runners import CommandResult, CommandRunner

__all__ = ["Git"]

logger = get_logger(__name__)


class Git:
    """The git toolchain for one activation session.

    Every invocation runs with the session's environment overlay (askpass
    variables) merged over ``os.environ``. The command line and its stderr
    are published on :attr:`on_output` as raw text.

    Attributes:
        info: Where the binary lives and which version it reported.
        on_output: Raw output chunks, one per publish.
    """

    def __init__(
        self,
        info: GitInfo,
        env: Mapping[str, str] | None = None,
        *,
        runner: CommandRunner | None = None,
    ) -> None:
        self.info = info
        self.env = dict(env or {})
        self.on_output: EventEmitter[str] = EventEmitter()
        self._runner = runner or CommandRunner()

    @property
    def path(self) -> str:
        return self.info.path

    @property
    def version(self) -> str:
        return self.info.version

    async def exec(self, cwd: Path | str, args: Sequence[str]) -> CommandResult:
        """Run ``git <args>`` in ``cwd``.

        A non-zero exit is returned, not raised.

        Raises:
            WorkingDirectoryError: If ``cwd`` is not a directory.
        """
        self.on_output.fire(f"> git {' '.join(args)}\n")
        result = await self._runner.run(
            [self.path, *args], cwd=Path(cwd), env=self.env
        )
        if result.stderr:
            self.on_output.fire(result.stderr)
        logger.debug(
            "git_exec",
            args=list(args),
            returncode=result.returncode,
            duration_ms=result.duration_ms,
        )
        return result
