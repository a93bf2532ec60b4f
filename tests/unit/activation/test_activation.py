"""Tests for activate, await_enablement and deactivate."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog

from gitboot.activation import (
    ExtensionContext,
    GitIntegration,
    activate,
    await_enablement,
    deactivate,
)
from gitboot.config import ConfigurationChangeEvent, SettingsStore
from gitboot.constants import (
    CMD_SET_DIFF_TOOL,
    CMD_SET_EDITOR,
    CMD_SET_MERGE_TOOL,
    CMD_SET_TOOLS,
    CMD_SHOW_OUTPUT,
)
from gitboot.dismissal import NEVER_SHOW_AGAIN
from gitboot.events import EventEmitter
from gitboot.exceptions import ConfigError, ToolchainNotFoundError
from gitboot.git import GitInfo
from gitboot.host import WorkspaceFolder
from tests.fixtures.host import FakeOutputChannel, FakeWindow

ASKPASS_ENV = {"GIT_ASKPASS": "/tmp/gitboot-askpass-x/askpass.sh"}


def located(path: str = "/usr/bin/git", version: str = "2.43.0"):
    """find_git replacement that reports each lookup, then succeeds."""

    async def find_git(path_hint, on_lookup, **kwargs):
        on_lookup(path)
        return GitInfo(path=path, version=version)

    return find_git


async def not_located(path_hint, on_lookup, **kwargs):
    on_lookup("/usr/bin/git")
    raise ToolchainNotFoundError(candidates=["/usr/bin/git"])


@pytest.fixture
def askpass() -> MagicMock:
    instance = MagicMock()
    instance.get_env = AsyncMock(return_value=dict(ASKPASS_ENV))
    instance.dispose = AsyncMock()
    return instance


@pytest.fixture
def context(
    settings: SettingsStore,
    window: FakeWindow,
    output_channel: FakeOutputChannel,
    temp_dir: Path,
) -> ExtensionContext:
    return ExtensionContext(
        settings=settings,
        window=window,
        output_channel=output_channel,
        workspace_folders=[WorkspaceFolder.from_path(temp_dir)],
    )


class TestAwaitEnablement:
    @pytest.mark.asyncio
    async def test_returns_immediately_when_enabled(self) -> None:
        events: EventEmitter[ConfigurationChangeEvent] = EventEmitter()

        await await_enablement(True, events, lambda: True)

        assert len(events) == 0

    @pytest.mark.asyncio
    async def test_waits_for_matching_change(self) -> None:
        events: EventEmitter[ConfigurationChangeEvent] = EventEmitter()
        enabled = False
        waiter = asyncio.create_task(await_enablement(False, events, lambda: enabled))
        await asyncio.sleep(0)

        # unrelated section
        enabled = True
        events.fire(ConfigurationChangeEvent(keys=("host.executable",)))
        await asyncio.sleep(0)
        assert not waiter.done()

        # git section but still off
        enabled = False
        events.fire(ConfigurationChangeEvent(keys=("git.path",)))
        await asyncio.sleep(0)
        assert not waiter.done()

        enabled = True
        events.fire(ConfigurationChangeEvent(keys=("git.enabled",)))
        await asyncio.wait_for(waiter, timeout=1)

        assert len(events) == 0


class TestActivate:
    @pytest.mark.asyncio
    async def test_successful_activation(
        self,
        context: ExtensionContext,
        askpass: MagicMock,
        output_channel: FakeOutputChannel,
        window: FakeWindow,
    ) -> None:
        with (
            patch("gitboot.activation.find_git", located()),
            patch("gitboot.activation.Askpass", return_value=askpass),
        ):
            integration = await activate(context)

        assert integration.enabled is True
        assert integration.info == GitInfo("/usr/bin/git", "2.43.0")
        assert integration.git is not None
        assert integration.git.env == ASKPASS_ENV
        assert set(context.commands.command_ids) == {
            CMD_SHOW_OUTPUT,
            CMD_SET_EDITOR,
            CMD_SET_DIFF_TOOL,
            CMD_SET_MERGE_TOOL,
            CMD_SET_TOOLS,
        }
        assert output_channel.lines == [
            "Looking for git in: /usr/bin/git",
            "Using git 2.43.0 from /usr/bin/git",
        ]
        assert len(context.teardown) == 1
        assert window.messages == []

    @pytest.mark.asyncio
    async def test_git_output_reaches_output_channel(
        self,
        context: ExtensionContext,
        askpass: MagicMock,
        output_channel: FakeOutputChannel,
    ) -> None:
        with (
            patch("gitboot.activation.find_git", located()),
            patch("gitboot.activation.Askpass", return_value=askpass),
        ):
            integration = await activate(context)

        assert integration.git is not None
        integration.git.on_output.fire("> git config --global diff.tool vscode\n\n")

        assert output_channel.lines[-1] == "> git config --global diff.tool vscode"

    @pytest.mark.asyncio
    async def test_show_output_command(
        self,
        context: ExtensionContext,
        askpass: MagicMock,
        output_channel: FakeOutputChannel,
    ) -> None:
        with (
            patch("gitboot.activation.find_git", located()),
            patch("gitboot.activation.Askpass", return_value=askpass),
        ):
            await activate(context)

        await context.commands.execute(CMD_SHOW_OUTPUT)

        assert output_channel.shown == 1

    @pytest.mark.asyncio
    async def test_legacy_git_warns(
        self, context: ExtensionContext, askpass: MagicMock, window: FakeWindow
    ) -> None:
        with (
            patch("gitboot.activation.find_git", located(version="1.8.3")),
            patch("gitboot.activation.Askpass", return_value=askpass),
        ):
            integration = await activate(context)

        assert integration.enabled is True
        assert [m.level for m in window.messages] == ["warning"]
        assert "1.8.3" in window.messages[0].message

    @pytest.mark.asyncio
    async def test_missing_git_without_repositories(
        self,
        context: ExtensionContext,
        output_channel: FakeOutputChannel,
        window: FakeWindow,
    ) -> None:
        with patch("gitboot.activation.find_git", not_located):
            integration = await activate(context)

        assert integration == GitIntegration(commands=context.commands)
        assert integration.enabled is False
        assert context.commands.command_ids == [CMD_SHOW_OUTPUT]
        assert output_channel.lines == [
            "Looking for git in: /usr/bin/git",
            "Git installation not found.",
        ]
        assert window.messages == []

    @pytest.mark.asyncio
    async def test_missing_git_in_repository_offers_recovery(
        self,
        context: ExtensionContext,
        window: FakeWindow,
        settings: SettingsStore,
        temp_dir: Path,
    ) -> None:
        (temp_dir / ".git").mkdir()
        window.answer(NEVER_SHOW_AGAIN)

        with patch("gitboot.activation.find_git", not_located):
            await activate(context)

        assert window.messages[0].items == ("Download Git", NEVER_SHOW_AGAIN)
        assert settings.get("git.ignore_missing_git_warning") is True

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, context: ExtensionContext) -> None:
        with patch(
            "gitboot.activation.find_git",
            AsyncMock(side_effect=ConfigError("broken", field="git.path")),
        ):
            with pytest.raises(ConfigError):
                await activate(context)

    @pytest.mark.asyncio
    async def test_disabled_waits_until_enabled(
        self,
        write_user_config,
        window: FakeWindow,
        output_channel: FakeOutputChannel,
        askpass: MagicMock,
    ) -> None:
        write_user_config("git:\n  enabled: false\n")
        settings = SettingsStore()
        context = ExtensionContext(
            settings=settings, window=window, output_channel=output_channel
        )
        find_git = AsyncMock(side_effect=located())

        with (
            patch("gitboot.activation.find_git", find_git),
            patch("gitboot.activation.Askpass", return_value=askpass),
        ):
            activation = asyncio.create_task(activate(context))
            await asyncio.sleep(0)
            await asyncio.sleep(0)

            assert not activation.done()
            find_git.assert_not_awaited()
            assert context.commands.command_ids == [CMD_SHOW_OUTPUT]

            await settings.update("git.enabled", True)
            integration = await asyncio.wait_for(activation, timeout=1)

        assert integration.enabled is True
        find_git.assert_awaited_once()
        assert len(settings.on_did_change) == 0


class TestDeactivate:
    @pytest.mark.asyncio
    async def test_releases_subscriptions_then_teardown(
        self,
        context: ExtensionContext,
        askpass: MagicMock,
        output_channel: FakeOutputChannel,
    ) -> None:
        with (
            patch("gitboot.activation.find_git", located()),
            patch("gitboot.activation.Askpass", return_value=askpass),
        ):
            integration = await activate(context)

        await deactivate(context)

        assert context.commands.command_ids == []
        assert output_channel.disposed is True
        assert integration.git is not None
        assert len(integration.git.on_output) == 0
        askpass.dispose.assert_awaited_once()
        assert context.subscriptions == []

    @pytest.mark.asyncio
    async def test_teardown_failures_do_not_raise(
        self, context: ExtensionContext
    ) -> None:
        ran: list[str] = []

        async def failing() -> None:
            raise OSError("already closed")

        async def later() -> None:
            ran.append("later")

        context.teardown.register(failing)
        context.teardown.register(later)

        await deactivate(context)

        assert ran == ["later"]

    @pytest.mark.asyncio
    async def test_git_log_context_is_bound_until_deactivate(
        self, context: ExtensionContext, askpass: MagicMock
    ) -> None:
        with (
            patch("gitboot.activation.find_git", located("/opt/git/bin/git", "2.44.0")),
            patch("gitboot.activation.Askpass", return_value=askpass),
        ):
            await activate(context)

        assert structlog.contextvars.get_contextvars() == {
            "git_path": "/opt/git/bin/git",
            "git_version": "2.44.0",
        }

        await deactivate(context)

        assert structlog.contextvars.get_contextvars() == {}
