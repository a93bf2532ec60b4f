"""Locating and driving the git toolchain."""

from __future__ import annotations

from gitboot.git.locator import find_git, parse_version
from gitboot.git.models import GitInfo
from gitboot.git.toolchain import Git

__all__ = ["Git", "GitInfo", "find_git", "parse_version"]
