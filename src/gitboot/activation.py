"""Activation lifecycle of the git integration.

:func:`activate` runs, in order:

1. wait for ``git.enabled`` if it is currently off (:func:`await_enablement`),
2. locate git (:func:`gitboot.git.find_git`),
3. start credential prompt routing and build the :class:`~gitboot.git.Git` wrapper,
4. register the installer commands and hook git output to the output channel,
5. warn about legacy git versions.

If no git is found, activation logs it, offers missing-git recovery and
returns an integration without a toolchain. Any other error propagates to
the caller. :func:`deactivate` releases everything the session acquired.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from gitboot.askpass import Askpass
from gitboot.commands import CommandRegistry
from gitboot.compat import check_git_version
from gitboot.config import ConfigurationChangeEvent, SettingsStore
from gitboot.constants import (
    CMD_SET_DIFF_TOOL,
    CMD_SET_EDITOR,
    CMD_SET_MERGE_TOOL,
    CMD_SET_TOOLS,
    CMD_SHOW_OUTPUT,
)
from gitboot.disposable import Disposable, SupportsDispose
from gitboot.events import EventSource, filter_event, wait_for_event
from gitboot.exceptions import ToolchainNotFoundError
from gitboot.git import Git, GitInfo, find_git
from gitboot.host import OutputChannel, Window, WorkspaceFolder
from gitboot.installer import ToolInstaller
from gitboot.lifecycle import TeardownRegistry
from gitboot.logging import bind_context, clear_context, get_logger
from gitboot.output import GitOutputSink
from gitboot.recovery import warn_about_missing_git

__all__ = [
    "ExtensionContext",
    "GitIntegration",
    "activate",
    "await_enablement",
    "create_integration",
    "deactivate",
]

logger = get_logger(__name__)


@dataclass
class ExtensionContext:
    """Everything one activation session needs from, and hands back to, the host.

    Attributes:
        settings: Live settings with persisted writes.
        window: Host prompts and notifications.
        output_channel: User-visible git log.
        workspace_folders: Folders currently open in the host.
        commands: Registry the session's commands are added to.
        teardown: Async actions to run at shutdown, in order.
        subscriptions: Synchronous disposables released at shutdown, in order.
    """

    settings: SettingsStore
    window: Window
    output_channel: OutputChannel
    workspace_folders: Sequence[WorkspaceFolder] = ()
    commands: CommandRegistry = field(default_factory=CommandRegistry)
    teardown: TeardownRegistry = field(default_factory=TeardownRegistry)
    subscriptions: list[SupportsDispose] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class GitIntegration:
    """Result of activation.

    ``git``, ``info`` and ``installer`` are None when no git was found.
    """

    commands: CommandRegistry
    git: Git | None = None
    info: GitInfo | None = None
    installer: ToolInstaller | None = None

    @property
    def enabled(self) -> bool:
        return self.git is not None


async def await_enablement(
    initially_enabled: bool,
    change_events: EventSource[ConfigurationChangeEvent],
    is_enabled: Callable[[], bool],
) -> None:
    """Return once the enablement switch is on.

    Returns immediately when ``initially_enabled``. Otherwise waits, with no
    timeout, for the first change to the ``git`` section after which
    ``is_enabled()`` is true. The listener is removed on return.
    """
    if initially_enabled:
        return

    on_config_change = filter_event(
        change_events, lambda e: e.affects_configuration("git")
    )
    on_enabled = filter_event(on_config_change, lambda _: is_enabled() is True)
    await wait_for_event(on_enabled)


async def activate(context: ExtensionContext) -> GitIntegration:
    """Activate the integration for one session.

    Raises:
        Exception: Anything other than ToolchainNotFoundError raised while
            bringing the integration up.
    """
    output_channel = context.output_channel
    context.subscriptions.append(
        context.commands.register(CMD_SHOW_OUTPUT, output_channel.show)
    )
    context.subscriptions.append(output_channel)

    settings = context.settings
    enabled = settings.config.git.enabled
    if not enabled:
        logger.info("activation_deferred", reason="git.enabled is false")
        await await_enablement(
            False, settings.on_did_change, lambda: settings.config.git.enabled
        )
        logger.info("activation_resumed")

    try:
        return await create_integration(context)
    except ToolchainNotFoundError as err:
        logger.warning("git_not_found", message=err.message, candidates=err.candidates)
        output_channel.append_line(err.message)

        await warn_about_missing_git(
            context.workspace_folders, settings, context.window
        )
        return GitIntegration(commands=context.commands)


async def create_integration(context: ExtensionContext) -> GitIntegration:
    """Locate git and wire everything that depends on it.

    Raises:
        ToolchainNotFoundError: If no git binary answered.
    """
    settings = context.settings
    output_channel = context.output_channel

    info = await find_git(
        settings.config.git.path,
        lambda path: output_channel.append_line(f"Looking for git in: {path}"),
    )
    bind_context(git_path=info.path, git_version=info.version)

    askpass = Askpass(context.window)
    context.teardown.register(askpass.dispose)
    env = await askpass.get_env()

    git = Git(info, env=env)
    installer = ToolInstaller.from_settings(
        git, context.window, output_channel, settings.config.host
    )

    commands = context.commands
    context.subscriptions.extend(
        [
            commands.register(CMD_SET_EDITOR, installer.install_as_editor),
            commands.register(CMD_SET_DIFF_TOOL, installer.install_as_diff_tool),
            commands.register(CMD_SET_MERGE_TOOL, installer.install_as_merge_tool),
            commands.register(CMD_SET_TOOLS, installer.install_all),
        ]
    )

    output_channel.append_line(f"Using git {info.version} from {info.path}")

    sink = GitOutputSink(output_channel)
    context.subscriptions.append(git.on_output.subscribe(sink.append))

    await check_git_version(info, settings, context.window)

    return GitIntegration(commands=commands, git=git, info=info, installer=installer)


async def deactivate(context: ExtensionContext) -> None:
    """Release subscriptions, then run the teardown registry."""
    subscriptions = list(context.subscriptions)
    context.subscriptions.clear()
    Disposable.from_disposables(*subscriptions).dispose()
    await context.teardown.run()
    clear_context()
