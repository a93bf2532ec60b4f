"""Shared CLI plumbing: error handling and activation sessions."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Generator, Sequence
from pathlib import Path

import click

from gitboot.activation import ExtensionContext, GitIntegration, activate, deactivate
from gitboot.cli.console import ConsoleOutputChannel, ConsoleWindow
from gitboot.cli.context import CLIContext, ExitCode
from gitboot.cli.output import format_error
from gitboot.exceptions import ActivationCancelledError, ConfigError, GitbootError, GitError
from gitboot.host import WorkspaceFolder
from gitboot.logging import get_logger

__all__ = ["cli_error_handler", "open_session", "activate_interactively"]

logger = get_logger(__name__)

ENABLE_CHOICE = "Enable"


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Map exceptions to formatted messages and exit codes.

    - KeyboardInterrupt: exit 130
    - GitError: message plus the failing operation
    - ConfigError: message plus the offending field
    - GitbootError: message
    - anything else: logged with traceback, exit 1
    """
    try:
        yield
    except KeyboardInterrupt:
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except GitError as e:
        details = [f"Operation: {e.operation}"] if e.operation else None
        click.echo(format_error(e.message, details=details), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ConfigError as e:
        details = [f"Field: {e.field}"] if e.field else None
        click.echo(format_error(e.message, details=details), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ActivationCancelledError as e:
        click.echo(
            format_error(e.message, suggestion="Run 'gitboot enable'"), err=True
        )
        raise SystemExit(ExitCode.FAILURE) from e
    except GitbootError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("unexpected_cli_error")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e


async def activate_interactively(context: ExtensionContext) -> GitIntegration:
    """Activate; if git is disabled, offer to enable it first.

    Enabling goes through the settings store, whose change event releases
    the waiting activation.

    Raises:
        ActivationCancelledError: If the user does not enable git.
    """
    settings = context.settings
    if settings.config.git.enabled:
        return await activate(context)

    activation = asyncio.create_task(activate(context))
    # let activation subscribe to setting changes before anything is written
    await asyncio.sleep(0)

    choice = await context.window.show_information_message(
        "Git integration is disabled (git.enabled is false).", ENABLE_CHOICE
    )
    if choice != ENABLE_CHOICE:
        activation.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await activation
        raise ActivationCancelledError()

    await settings.update("git.enabled", True)
    return await activation


@contextlib.asynccontextmanager
async def open_session(
    cli_ctx: CLIContext,
    folders: Sequence[Path] = (),
) -> AsyncIterator[tuple[ExtensionContext, GitIntegration]]:
    """Activate against console host objects; deactivate on exit."""
    context = ExtensionContext(
        settings=cli_ctx.settings,
        window=ConsoleWindow(),
        output_channel=ConsoleOutputChannel(echo=cli_ctx.verbosity > 0),
        workspace_folders=[
            WorkspaceFolder.from_path(folder) for folder in (folders or [Path.cwd()])
        ],
    )
    try:
        integration = await activate_interactively(context)
        yield context, integration
    finally:
        await deactivate(context)
