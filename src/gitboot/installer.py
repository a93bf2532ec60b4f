"""Register the host application as git's editor, diff tool and merge tool.

Each install step writes one or two global git settings through
:func:`set_global_config`, which reports success as a plain bool. Steps are
chained with short-circuit AND: once a write fails, nothing after it runs and
the overall result is False.

Keys written (``<exe>`` is the host executable, ``<tool>`` the tool name):

============  =========================================================
editor        ``core.editor = "<exe>" --wait``
diff tool     ``difftool.<tool>.cmd = "<exe>" --wait --diff "$LOCAL" "$REMOTE"``,
              ``diff.tool = <tool>``
merge tool    ``mergetool.<tool>.cmd = "<exe>" --wait "$MERGED"``,
              ``merge.tool = <tool>``
============  =========================================================
"""

from __future__ import annotations

import shutil
from collections.abc import Awaitable, Callable

from gitboot.config import HostSettings
from gitboot.exceptions import GitbootError
from gitboot.git import Git
from gitboot.host import OutputChannel, Window
from gitboot.logging import get_logger

__all__ = [
    "ToolInstaller",
    "set_global_config",
    "host_executable_resolver",
]

logger = get_logger(__name__)

ExecutableResolver = Callable[[], Awaitable[str]]


async def set_global_config(git: Git, key: str, value: str) -> bool:
    """Run ``git config --global <key> <value>``.

    Never raises: a non-zero exit or a failure to start git is logged and
    reported as False.
    """
    try:
        result = await git.exec(".", ["config", "--global", key, value])
    except (GitbootError, OSError, ValueError):
        logger.exception("config_write_failed", key=key)
        return False

    if not result.success:
        logger.error(
            "config_write_failed",
            key=key,
            returncode=result.returncode,
            stderr=result.stderr.strip(),
        )
        return False

    logger.info("config_written", key=key, value=value)
    return True


def host_executable_resolver(host: HostSettings) -> ExecutableResolver:
    """Resolve ``host.executable`` on PATH, falling back to the bare value."""

    async def resolve() -> str:
        return shutil.which(host.executable) or host.executable

    return resolve


class ToolInstaller:
    """User-triggered install actions for one located git.

    Every public operation notifies the user of its outcome; on failure it
    also brings the output channel forward so the git stderr is visible.
    """

    def __init__(
        self,
        git: Git,
        window: Window,
        output_channel: OutputChannel,
        resolve_executable: ExecutableResolver,
        *,
        tool_name: str = "vscode",
        display_name: str = "Visual Studio Code",
    ) -> None:
        self._git = git
        self._window = window
        self._output_channel = output_channel
        self._resolve_executable = resolve_executable
        self.tool_name = tool_name
        self.display_name = display_name

    @classmethod
    def from_settings(
        cls,
        git: Git,
        window: Window,
        output_channel: OutputChannel,
        host: HostSettings,
    ) -> ToolInstaller:
        return cls(
            git,
            window,
            output_channel,
            host_executable_resolver(host),
            tool_name=host.tool_name,
            display_name=host.display_name,
        )

    async def install_as_editor(self, executable: str | None = None) -> bool:
        exe = executable or await self._resolve_executable()
        ok = await set_global_config(self._git, "core.editor", f'"{exe}" --wait')
        return await self._report(ok, "git editor")

    async def install_as_diff_tool(self, executable: str | None = None) -> bool:
        exe = executable or await self._resolve_executable()
        ok = await set_global_config(
            self._git,
            f"difftool.{self.tool_name}.cmd",
            f'"{exe}" --wait --diff "$LOCAL" "$REMOTE"',
        ) and await set_global_config(self._git, "diff.tool", self.tool_name)
        return await self._report(ok, "diff tool")

    async def install_as_merge_tool(self, executable: str | None = None) -> bool:
        exe = executable or await self._resolve_executable()
        ok = await set_global_config(
            self._git,
            f"mergetool.{self.tool_name}.cmd",
            f'"{exe}" --wait "$MERGED"',
        ) and await set_global_config(self._git, "merge.tool", self.tool_name)
        return await self._report(ok, "merge tool")

    async def install_all(self) -> bool:
        """Editor, then diff tool, then merge tool; stops at the first failure."""
        exe = await self._resolve_executable()
        return (
            await self.install_as_editor(exe)
            and await self.install_as_diff_tool(exe)
            and await self.install_as_merge_tool(exe)
        )

    async def _report(self, ok: bool, role: str) -> bool:
        if ok:
            await self._window.show_information_message(
                f"{self.display_name} has been successfully set as {role}"
            )
        else:
            await self._window.show_error_message(
                f"Failed to set {self.display_name} as {role}. "
                "See the output panel for more details"
            )
            self._output_channel.show()
        return ok
