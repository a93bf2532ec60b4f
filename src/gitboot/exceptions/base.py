from __future__ import annotations


class GitbootError(Exception):
    """Root of the gitboot exception hierarchy.

    Every error raised on purpose by gitboot derives from this class, so the
    CLI can catch ``GitbootError`` at its boundary and let anything else
    surface as an unexpected failure.

    Attributes:
        message: Human-readable error message describing what went wrong.
    """

    def __init__(self, message: str) -> None:
        """Initialize the GitbootError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
