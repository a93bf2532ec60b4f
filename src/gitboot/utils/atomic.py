"""Atomic file writes.

Used for persisted settings: the user config file is either fully
rewritten or left untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from atomicwrites import atomic_write  # type: ignore[import-untyped]

__all__ = ["atomic_write_text", "atomic_write_yaml"]


def atomic_write_text(
    path: Path | str,
    content: str,
    *,
    encoding: str = "utf-8",
    mkdir: bool = True,
) -> None:
    """Write text content to a file atomically.

    Writes to a temporary file next to ``path`` and renames it into place.

    Args:
        path: Destination file path.
        content: Text content to write.
        encoding: Character encoding to use.
        mkdir: Create missing parent directories first.

    Raises:
        OSError: If the write or rename operation fails.
    """
    file_path = Path(path)

    if mkdir:
        file_path.parent.mkdir(parents=True, exist_ok=True)

    with atomic_write(str(file_path), mode="w", encoding=encoding, overwrite=True) as f:
        f.write(content)


def atomic_write_yaml(path: Path | str, data: Any, *, mkdir: bool = True) -> None:
    """Serialize ``data`` with ``yaml.safe_dump`` and write it atomically."""
    content = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    atomic_write_text(path, content, mkdir=mkdir)
