"""gitboot exception hierarchy.

All exceptions can be imported from this package:
    from gitboot.exceptions import GitbootError, ToolchainNotFoundError
"""

from __future__ import annotations

from gitboot.exceptions.askpass import AskpassError
from gitboot.exceptions.base import GitbootError
from gitboot.exceptions.config import ConfigError
from gitboot.exceptions.git import (
    GIT_NOT_FOUND_MESSAGE,
    GitError,
    ToolchainNotFoundError,
)
from gitboot.exceptions.host import (
    ActivationCancelledError,
    HostError,
    UnknownCommandError,
)
from gitboot.exceptions.runner import RunnerError, WorkingDirectoryError

__all__ = [
    # Base
    "GitbootError",
    # Askpass
    "AskpassError",
    # Config
    "ConfigError",
    # Git
    "GIT_NOT_FOUND_MESSAGE",
    "GitError",
    "ToolchainNotFoundError",
    # Host
    "ActivationCancelledError",
    "HostError",
    "UnknownCommandError",
    # Runner
    "RunnerError",
    "WorkingDirectoryError",
]
