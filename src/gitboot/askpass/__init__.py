"""Credential prompt routing for git subprocesses."""

from __future__ import annotations

from gitboot.askpass.server import Askpass

__all__ = ["Askpass"]
