"""Commands that register the host application with git."""

from __future__ import annotations

import click

from gitboot.cli.common import cli_error_handler, open_session
from gitboot.cli.context import CLIContext, ExitCode, async_command
from gitboot.cli.output import format_error
from gitboot.constants import (
    CMD_SET_DIFF_TOOL,
    CMD_SET_EDITOR,
    CMD_SET_MERGE_TOOL,
    CMD_SET_TOOLS,
)
from gitboot.exceptions import GIT_NOT_FOUND_MESSAGE


async def run_install_command(cli_ctx: CLIContext, command_id: str) -> None:
    """Activate, run one installer command and exit non-zero on failure."""
    with cli_error_handler():
        async with open_session(cli_ctx) as (context, integration):
            if not integration.enabled:
                click.echo(
                    format_error(
                        GIT_NOT_FOUND_MESSAGE,
                        suggestion="Install git or set 'git.path'",
                    ),
                    err=True,
                )
                raise SystemExit(ExitCode.FAILURE)
            ok = await context.commands.execute(command_id)

    if not ok:
        raise SystemExit(ExitCode.FAILURE)


@click.command("set-editor")
@click.pass_context
@async_command
async def set_editor(ctx: click.Context) -> None:
    """Set the host application as git's editor (core.editor)."""
    await run_install_command(ctx.obj["cli_ctx"], CMD_SET_EDITOR)


@click.command("set-diff-tool")
@click.pass_context
@async_command
async def set_diff_tool(ctx: click.Context) -> None:
    """Set the host application as git's diff tool."""
    await run_install_command(ctx.obj["cli_ctx"], CMD_SET_DIFF_TOOL)


@click.command("set-merge-tool")
@click.pass_context
@async_command
async def set_merge_tool(ctx: click.Context) -> None:
    """Set the host application as git's merge tool."""
    await run_install_command(ctx.obj["cli_ctx"], CMD_SET_MERGE_TOOL)


@click.command("set-tools")
@click.pass_context
@async_command
async def set_tools(ctx: click.Context) -> None:
    """Set editor, diff tool and merge tool in one go.

    Stops at the first step that fails.
    """
    await run_install_command(ctx.obj["cli_ctx"], CMD_SET_TOOLS)
