from __future__ import annotations

from collections.abc import Sequence

from gitboot.exceptions.base import GitbootError

#: Message carried by ToolchainNotFoundError.
GIT_NOT_FOUND_MESSAGE = "Git installation not found."


class GitError(GitbootError):
    """Exception for failures while driving the git toolchain.

    Attributes:
        message: Human-readable error message.
        operation: Git operation that failed (e.g., "config", "discovery").
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        """Initialize the GitError.

        Args:
            message: Human-readable error message.
            operation: Git operation that failed.
        """
        self.operation = operation
        super().__init__(message)


class ToolchainNotFoundError(GitError):
    """Raised when discovery exhausted every candidate git binary.

    Activation recognizes this type and routes into missing-git recovery
    instead of failing.

    Attributes:
        message: Human-readable error message.
        candidates: Paths that were probed, in probe order.
    """

    def __init__(
        self,
        message: str = GIT_NOT_FOUND_MESSAGE,
        candidates: Sequence[str] = (),
    ) -> None:
        """Initialize the ToolchainNotFoundError.

        Args:
            message: Human-readable error message.
            candidates: Paths that were probed.
        """
        self.candidates = tuple(candidates)
        super().__init__(message, operation="discovery")
