"""Settings surface for gitboot.

Settings are layered (highest priority first):

1. Environment variables (``GITBOOT_GIT__ENABLED=false``, ...)
2. Project YAML (``./gitboot.yaml`` or the file named by ``GITBOOT_CONFIG``)
3. User YAML (``~/.config/gitboot/config.yaml`` or ``GITBOOT_USER_CONFIG``)
4. Model defaults

:class:`SettingsStore` wraps the loaded configuration for a running
session. Its :meth:`SettingsStore.update` writes to the *user* file (global
scope), reloads, and fires a :class:`ConfigurationChangeEvent`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from gitboot.events import EventEmitter
from gitboot.exceptions import ConfigError
from gitboot.logging import get_logger
from gitboot.utils.atomic import atomic_write_yaml

__all__ = [
    "GitbootConfig",
    "GitSettings",
    "HostSettings",
    "ConfigurationChangeEvent",
    "SettingsStore",
    "load_config",
    "get_user_config_path",
    "get_project_config_path",
]

logger = get_logger(__name__)

PROJECT_CONFIG_ENV_VAR = "GITBOOT_CONFIG"
USER_CONFIG_ENV_VAR = "GITBOOT_USER_CONFIG"
PROJECT_CONFIG_FILENAME = "gitboot.yaml"


class GitSettings(BaseModel):
    """The ``git`` section.

    Attributes:
        enabled: Master switch. While false, activation waits for it to flip.
        path: Explicit git binary to try before the platform search.
        ignore_missing_git_warning: Suppress the "git not found" prompt.
        ignore_legacy_warning: Suppress the "git < 2" prompt.
    """

    enabled: bool = True
    path: str | None = None
    ignore_missing_git_warning: bool = False
    ignore_legacy_warning: bool = False

    @field_validator("path")
    @classmethod
    def blank_path_is_unset(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class HostSettings(BaseModel):
    """How git should invoke the host application.

    Attributes:
        executable: Host executable name or path, resolved on PATH.
        tool_name: Name registered under ``difftool.<name>`` / ``mergetool.<name>``.
        display_name: Product name used in notifications.
    """

    executable: str = "code"
    tool_name: str = "vscode"
    display_name: str = "Visual Studio Code"


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source backed by one YAML file (missing file = no values)."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = _read_yaml(yaml_file)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class GitbootConfig(BaseSettings):
    """Root configuration object."""

    model_config = SettingsConfigDict(
        env_prefix="GITBOOT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    git: GitSettings = Field(default_factory=GitSettings)
    host: HostSettings = Field(default_factory=HostSettings)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Order sources: init kwargs, env, project YAML, user YAML.

        pydantic-settings gives earlier sources higher priority.
        """
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, get_project_config_path()),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def _read_yaml(path: Path | None) -> dict[str, Any]:
    """Load a YAML mapping, returning {} when the file is absent or empty.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if path is None or not path.exists():
        return {}
    try:
        with open(path) as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if loaded is None:
        logger.warning("config_file_empty", path=str(path))
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}", value=loaded)
    return loaded


def get_user_config_path() -> Path:
    """Path of the user (global) config file.

    Returns:
        ``$GITBOOT_USER_CONFIG`` if set, else ``~/.config/gitboot/config.yaml``.
    """
    override = os.environ.get(USER_CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".config" / "gitboot" / "config.yaml"


def get_project_config_path() -> Path:
    """Path of the project config file.

    Returns:
        ``$GITBOOT_CONFIG`` if set, else ``./gitboot.yaml``.
    """
    override = os.environ.get(PROJECT_CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.cwd() / PROJECT_CONFIG_FILENAME


def load_config() -> GitbootConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Raises:
        ConfigError: If configuration is invalid.
    """
    try:
        return GitbootConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e


@dataclass(frozen=True, slots=True)
class ConfigurationChangeEvent:
    """Fired after persisted settings change.

    Attributes:
        keys: Dotted keys that were written (e.g. ``("git.enabled",)``).
    """

    keys: tuple[str, ...]

    def affects_configuration(self, section: str) -> bool:
        """True if any changed key is ``section`` or lies beneath it."""
        return any(key == section or key.startswith(f"{section}.") for key in self.keys)


def _with_value(model: BaseModel, parts: list[str], value: Any) -> Any:
    """Copy of ``model`` with the dotted path ``parts`` set to ``value``."""
    head, *rest = parts
    if rest:
        value = _with_value(getattr(model, head), rest, value)
    return model.model_copy(update={head: value})


class SettingsStore:
    """Live view of the configuration with persisted, observable writes.

    A store built from an explicit ``config`` keeps that object as its base:
    :meth:`update` applies the written key to it instead of reloading from
    disk and the environment. A store built without one reloads after each
    write.

    Example:
        ```python
        store = SettingsStore()
        store.on_did_change.subscribe(lambda e: print(e.keys))
        await store.update("git.ignore_legacy_warning", True)
        assert store.get("git.ignore_legacy_warning") is True
        ```
    """

    def __init__(self, config: GitbootConfig | None = None) -> None:
        self._pinned = config is not None
        self._config = config if config is not None else load_config()
        self.on_did_change: EventEmitter[ConfigurationChangeEvent] = EventEmitter()

    @property
    def config(self) -> GitbootConfig:
        return self._config

    def reload(self) -> GitbootConfig:
        self._config = load_config()
        return self._config

    def get(self, key: str) -> Any:
        """Resolve a dotted key against the current configuration.

        Raises:
            ConfigError: If the key does not name a setting.
        """
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, BaseModel) or part not in type(value).model_fields:
                raise ConfigError(f"Unknown setting: {key}", field=key)
            value = getattr(value, part)
        return value

    async def update(self, key: str, value: Any) -> None:
        """Persist ``key = value`` to the user config file and notify listeners.

        Environment variables still take precedence over the written value.

        Raises:
            ConfigError: If the key is unknown or the file cannot be written.
        """
        self.get(key)
        path = get_user_config_path()
        data = _read_yaml(path)

        section = data
        *parents, leaf = key.split(".")
        for part in parents:
            child = section.get(part)
            if not isinstance(child, dict):
                child = {}
                section[part] = child
            section = child
        section[leaf] = value

        try:
            atomic_write_yaml(path, data)
        except OSError as e:
            raise ConfigError(
                f"Failed to write {path}: {e}", field=key, value=value
            ) from e

        logger.info("setting_updated", key=key, value=value, path=str(path))
        if self._pinned:
            self._config = _with_value(self._config, key.split("."), value)
        else:
            self.reload()
        self.on_did_change.fire(ConfigurationChangeEvent(keys=(key,)))
