from __future__ import annotations

import click

from gitboot.cli.common import cli_error_handler
from gitboot.cli.console import console
from gitboot.cli.context import CLIContext, async_command
from gitboot.cli.output import format_success
from gitboot.config import get_user_config_path


async def _set_enabled(cli_ctx: CLIContext, value: bool) -> None:
    with cli_error_handler():
        await cli_ctx.settings.update("git.enabled", value)
    if not cli_ctx.quiet:
        state = "enabled" if value else "disabled"
        console.print(
            format_success(f"Git integration {state} in {get_user_config_path()}"),
            highlight=False,
        )


@click.command()
@click.pass_context
@async_command
async def enable(ctx: click.Context) -> None:
    """Turn git integration on (git.enabled = true)."""
    await _set_enabled(ctx.obj["cli_ctx"], True)


@click.command()
@click.pass_context
@async_command
async def disable(ctx: click.Context) -> None:
    """Turn git integration off (git.enabled = false)."""
    await _set_enabled(ctx.obj["cli_ctx"], False)
