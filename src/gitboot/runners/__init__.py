"""Async subprocess execution."""

from __future__ import annotations

from gitboot.runners.command import CommandRunner
from gitboot.runners.models import CommandResult

__all__ = ["CommandRunner", "CommandResult"]
