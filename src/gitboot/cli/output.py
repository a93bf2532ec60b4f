"""Formatting helpers for CLI messages."""

from __future__ import annotations

__all__ = ["format_error", "format_success"]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("git not found", suggestion="Set git.path"))
        Error: git not found
        Suggestion: Set git.path
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    return f"✓ {message}"
