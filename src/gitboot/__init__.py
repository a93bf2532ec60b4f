"""gitboot - bootstrap a git integration for a host application.

Locates the git toolchain, checks its version, routes credential prompts to
the host, and registers the host as git editor, diff tool and merge tool.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
