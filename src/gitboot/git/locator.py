"""Find a usable git binary on this machine.

Discovery tries the configured hint first, then a per-platform search, and
stops at the first candidate whose ``--version`` call exits 0 with a
version string:

- Linux and other POSIX: ``git`` on PATH.
- macOS: ``git`` on PATH; the ``/usr/bin/git`` shim only counts when the
  Xcode command-line tools are installed (``xcode-select -p``).
- Windows: ``Git\\cmd\\git.exe`` under the Program Files / LocalAppData
  install roots, then ``git.exe`` on PATH.
"""

from __future__ import annotations

import ntpath
import os
import re
import shutil
import sys
from collections.abc import Awaitable, Callable

from gitboot.exceptions import ToolchainNotFoundError
from gitboot.git.models import GitInfo
from gitboot.logging import get_logger
from gitboot.runners import CommandRunner

__all__ = ["find_git", "parse_version", "OnLookup"]

logger = get_logger(__name__)

OnLookup = Callable[[str], object]
Probe = Callable[[str], Awaitable[GitInfo | None]]

_VERSION_PREFIX = re.compile(r"^git version ")

#: Path of the macOS shim that exists even without the developer tools.
DARWIN_GIT_SHIM = "/usr/bin/git"

#: ``xcode-select -p`` exit code meaning the developer tools are not installed.
XCODE_SELECT_NOT_INSTALLED = 2

#: Environment variables naming Windows install roots, in search order.
WIN32_INSTALL_ROOTS: tuple[str, ...] = ("ProgramW6432", "ProgramFiles(x86)", "ProgramFiles")


def parse_version(raw: str) -> str:
    """Strip the ``git version`` prefix from ``git --version`` output.

    >>> parse_version("git version 2.43.0\\n")
    '2.43.0'
    """
    return _VERSION_PREFIX.sub("", raw.strip())


def _absolute(path: str) -> str:
    if os.path.isabs(path) or ntpath.isabs(path):
        return path
    return os.path.abspath(shutil.which(path) or path)


async def find_git(
    path_hint: str | None,
    on_lookup: OnLookup,
    *,
    runner: CommandRunner | None = None,
    platform: str | None = None,
) -> GitInfo:
    """Locate git and return its path and version.

    Args:
        path_hint: Binary to try first (the ``git.path`` setting), if any.
        on_lookup: Called with each candidate path just before it is probed.
        runner: Runner used for probes. Defaults to a fresh CommandRunner.
        platform: ``sys.platform`` value to search for. Defaults to the
            current platform.

    Returns:
        GitInfo for the first candidate that answered.

    Raises:
        ToolchainNotFoundError: If no candidate answered.
    """
    runner = runner or CommandRunner()
    platform = platform or sys.platform
    probed: list[str] = []

    async def probe(path: str) -> GitInfo | None:
        on_lookup(path)
        probed.append(path)
        result = await runner.run([path, "--version"])
        if not result.success:
            logger.debug(
                "git_candidate_rejected",
                path=path,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            return None
        version = parse_version(result.stdout)
        if not version:
            logger.debug("git_candidate_no_version", path=path)
            return None
        return GitInfo(path=_absolute(path), version=version)

    info: GitInfo | None = None
    if path_hint:
        info = await probe(path_hint)

    if info is None:
        if platform == "darwin":
            info = await _find_git_darwin(probe, runner)
        elif platform == "win32":
            info = await _find_git_win32(probe)
        else:
            info = await _find_git_in_path(probe, "git")

    if info is None:
        logger.info("git_not_found", candidates=probed)
        raise ToolchainNotFoundError(candidates=probed)

    logger.info("git_located", path=info.path, version=info.version)
    return info


async def _find_git_in_path(probe: Probe, name: str) -> GitInfo | None:
    path = shutil.which(name)
    if path is None:
        return None
    return await probe(path)


async def _find_git_darwin(probe: Probe, runner: CommandRunner) -> GitInfo | None:
    path = shutil.which("git")
    if path is None:
        return None

    if path != DARWIN_GIT_SHIM:
        return await probe(path)

    # The shim pops up an installer dialog unless the developer tools exist
    result = await runner.run(["xcode-select", "-p"])
    if result.returncode == XCODE_SELECT_NOT_INSTALLED:
        logger.info("xcode_tools_missing", path=path)
        return None
    return await probe(path)


async def _find_git_win32(probe: Probe) -> GitInfo | None:
    bases = [os.environ.get(name) for name in WIN32_INSTALL_ROOTS]
    local_app_data = os.environ.get("LocalAppData")
    if local_app_data:
        bases.append(ntpath.join(local_app_data, "Programs"))

    for base in bases:
        if not base:
            continue
        info = await probe(ntpath.join(base, "Git", "cmd", "git.exe"))
        if info is not None:
            return info

    return await _find_git_in_path(probe, "git.exe")
