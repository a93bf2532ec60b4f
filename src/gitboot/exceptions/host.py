from __future__ import annotations

from gitboot.exceptions.base import GitbootError


class HostError(GitbootError):
    """Base exception for failures at the host application boundary."""

    pass


class UnknownCommandError(HostError):
    """Raised when executing a command id that was never registered.

    Attributes:
        message: Human-readable error message.
        command_id: The command id that was requested.
    """

    def __init__(self, command_id: str) -> None:
        """Initialize the UnknownCommandError.

        Args:
            command_id: The command id that was requested.
        """
        self.command_id = command_id
        super().__init__(f"Command '{command_id}' not found")


class ActivationCancelledError(HostError):
    """Raised when the user declines to enable a disabled integration."""

    def __init__(
        self, message: str = "Git integration is disabled (git.enabled is false)"
    ) -> None:
        super().__init__(message)
