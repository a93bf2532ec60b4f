"""Advise the user when git is missing but their folders use git."""

from __future__ import annotations

import stat
from collections.abc import Sequence

import anyio

from gitboot.config import SettingsStore
from gitboot.constants import GIT_MARKER_DIR
from gitboot.dismissal import is_dismissed, warn_with_dismissal
from gitboot.host import Window, WorkspaceFolder
from gitboot.logging import get_logger
from gitboot.utils import run_parallel

__all__ = ["is_git_repository", "warn_about_missing_git"]

logger = get_logger(__name__)

IGNORE_MISSING_GIT_WARNING = "git.ignore_missing_git_warning"


async def is_git_repository(folder: WorkspaceFolder) -> bool:
    """True if ``folder`` is on the local disk and holds a ``.git`` directory.

    A failed stat (missing, unreadable, unusable path) just means "no".
    """
    if folder.scheme != "file":
        return False

    dot_git = anyio.Path(folder.path) / GIT_MARKER_DIR
    try:
        dot_git_stat = await dot_git.stat()
    except (OSError, ValueError):
        return False
    return stat.S_ISDIR(dot_git_stat.st_mode)


async def warn_about_missing_git(
    folders: Sequence[WorkspaceFolder] | None,
    settings: SettingsStore,
    window: Window,
) -> None:
    if is_dismissed(settings, IGNORE_MISSING_GIT_WARNING):
        return

    if not folders:
        return

    are_git_repositories = await run_parallel(
        [lambda folder=folder: is_git_repository(folder) for folder in folders]
    )

    if not any(are_git_repositories):
        logger.debug("missing_git_not_relevant", folders=len(folders))
        return

    await warn_with_dismissal(
        window,
        settings,
        message="Git not found. Install it or configure it using the 'git.path' setting.",
        action="Download Git",
        flag=IGNORE_MISSING_GIT_WARNING,
    )
