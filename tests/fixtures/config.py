"""Settings fixtures.

Every fixture here points both config files into a temporary directory so
tests never read or write the real ``~/.config/gitboot/config.yaml``.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from gitboot.config import SettingsStore


@pytest.fixture
def user_config_path(clean_env: None, temp_dir: Path) -> Generator[Path, None, None]:
    """Path of an isolated (initially absent) user config file."""
    path = temp_dir / "user" / "config.yaml"
    os.environ["GITBOOT_USER_CONFIG"] = str(path)
    os.environ["GITBOOT_CONFIG"] = str(temp_dir / "gitboot.yaml")
    yield path


@pytest.fixture
def settings(user_config_path: Path) -> SettingsStore:
    """SettingsStore with all defaults, persisting to ``user_config_path``."""
    return SettingsStore()


@pytest.fixture
def write_user_config(user_config_path: Path):
    """Write YAML text to the isolated user config file.

    Example:
        >>> def test_disabled(write_user_config):
        ...     write_user_config("git:\\n  enabled: false\\n")
        ...     assert SettingsStore().config.git.enabled is False
    """

    def write(content: str) -> Path:
        user_config_path.parent.mkdir(parents=True, exist_ok=True)
        user_config_path.write_text(content)
        return user_config_path

    return write
