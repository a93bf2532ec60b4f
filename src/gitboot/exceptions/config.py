from __future__ import annotations

from typing import Any

from gitboot.exceptions.base import GitbootError


class ConfigError(GitbootError):
    """Exception for settings that cannot be loaded, validated or persisted.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional dotted field name that caused the error (e.g., "git.path").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError("Invalid YAML in gitboot.yaml: ...")

        raise ConfigError(
            "Unknown setting",
            field="git.colour",
            value=True,
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
