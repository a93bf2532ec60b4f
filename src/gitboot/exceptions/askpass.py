from __future__ import annotations

from gitboot.exceptions.base import GitbootError


class AskpassError(GitbootError):
    """Credential prompt routing is unavailable.

    Raised when the askpass endpoint cannot be started, or is used after
    it has been disposed.
    """

    pass
