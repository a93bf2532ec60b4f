from __future__ import annotations

from pathlib import Path

import click

from gitboot.cli.common import cli_error_handler, open_session
from gitboot.cli.console import console
from gitboot.cli.context import CLIContext, ExitCode, async_command
from gitboot.cli.output import format_error, format_success
from gitboot.constants import CMD_SHOW_OUTPUT
from gitboot.exceptions import GIT_NOT_FOUND_MESSAGE


@click.command()
@click.option(
    "--folder",
    "folders",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Workspace folder to consider (repeatable, defaults to cwd).",
)
@click.pass_context
@async_command
async def activate(ctx: click.Context, folders: tuple[Path, ...]) -> None:
    """Locate git and report which installation would be used.

    Examples:
        gitboot activate
        gitboot activate --folder ~/src/project
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    with cli_error_handler():
        async with open_session(cli_ctx, folders) as (_, integration):
            info = integration.info
            if info is None:
                click.echo(
                    format_error(
                        GIT_NOT_FOUND_MESSAGE,
                        suggestion="Install git or set 'git.path'",
                    ),
                    err=True,
                )
                raise SystemExit(ExitCode.FAILURE)
            if not cli_ctx.quiet:
                console.print(
                    format_success(f"Using git {info.version} from {info.path}"),
                    highlight=False,
                )


@click.command()
@click.pass_context
@async_command
async def output(ctx: click.Context) -> None:
    """Activate and print the git output log.

    Examples:
        gitboot output
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    with cli_error_handler():
        async with open_session(cli_ctx) as (context, _):
            await context.commands.execute(CMD_SHOW_OUTPUT)
