"""Warn when the located git is older than 2.0."""

from __future__ import annotations

import re

from gitboot.config import SettingsStore
from gitboot.constants import LEGACY_VERSION_PATTERN
from gitboot.dismissal import is_dismissed, warn_with_dismissal
from gitboot.git import GitInfo
from gitboot.host import Window

__all__ = ["check_git_version", "is_legacy_version"]

IGNORE_LEGACY_WARNING = "git.ignore_legacy_warning"

_LEGACY = re.compile(LEGACY_VERSION_PATTERN)


def is_legacy_version(version: str) -> bool:
    """True when the version text starts with "0" or "1".

    Only the first character is looked at, so "1.9.5" and "10.0" are both
    legacy while "2.0" and "v1.0" are not.
    """
    return _LEGACY.match(version) is not None


async def check_git_version(
    info: GitInfo, settings: SettingsStore, window: Window
) -> None:
    if is_dismissed(settings, IGNORE_LEGACY_WARNING):
        return

    if not is_legacy_version(info.version):
        return

    await warn_with_dismissal(
        window,
        settings,
        message=(
            f"You seem to have git {info.version} installed. "
            "gitboot works best with git >= 2"
        ),
        action="Update Git",
        flag=IGNORE_LEGACY_WARNING,
    )
