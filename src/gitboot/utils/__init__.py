"""Shared helpers."""

from __future__ import annotations

from gitboot.utils.async_utils import ParallelExecutionError, run_parallel
from gitboot.utils.atomic import atomic_write_text, atomic_write_yaml

__all__ = [
    "ParallelExecutionError",
    "run_parallel",
    "atomic_write_text",
    "atomic_write_yaml",
]
