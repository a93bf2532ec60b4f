"""Warnings that offer a download link or a persistent "don't show again"."""

from __future__ import annotations

from gitboot.config import SettingsStore
from gitboot.constants import GIT_DOWNLOAD_URL
from gitboot.host import Window
from gitboot.logging import get_logger

__all__ = ["NEVER_SHOW_AGAIN", "is_dismissed", "warn_with_dismissal"]

logger = get_logger(__name__)

NEVER_SHOW_AGAIN = "Don't Show Again"


def is_dismissed(settings: SettingsStore, flag: str) -> bool:
    return settings.get(flag) is True


async def warn_with_dismissal(
    window: Window,
    settings: SettingsStore,
    *,
    message: str,
    action: str,
    flag: str,
) -> str | None:
    """Show ``message`` with ``action`` and "Don't Show Again".

    ``action`` opens the git download page; "Don't Show Again" persists
    ``flag = True`` in the global settings. Dismissing without a choice
    changes nothing.

    Returns:
        The chosen label, or None.
    """
    choice = await window.show_warning_message(message, action, NEVER_SHOW_AGAIN)

    if choice == action:
        await window.open_external(GIT_DOWNLOAD_URL)
    elif choice == NEVER_SHOW_AGAIN:
        await settings.update(flag, True)

    logger.debug("warning_answered", flag=flag, choice=choice)
    return choice
