"""Value types describing the located git toolchain."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["GitInfo"]


@dataclass(frozen=True, slots=True)
class GitInfo:
    """A git binary that answered ``--version`` successfully.

    Attributes:
        path: Absolute path of the binary. Never empty.
        version: Version text with the ``git version`` prefix removed,
            e.g. ``"2.43.0"`` or ``"2.39.3 (Apple Git-145)"``. Not parsed further.
    """

    path: str
    version: str

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("GitInfo.path must not be empty")
