"""CLI entry point for gitboot.

This module defines the Click-based command-line interface for gitboot.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
from dotenv import load_dotenv

from gitboot.logging import configure_logging

# Must run before anything reads GITBOOT_* environment variables
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

from gitboot import __version__  # noqa: E402
from gitboot.cli.commands.activate import activate, output  # noqa: E402
from gitboot.cli.commands.settings import disable, enable  # noqa: E402
from gitboot.cli.commands.tools import (  # noqa: E402
    set_diff_tool,
    set_editor,
    set_merge_tool,
    set_tools,
)
from gitboot.cli.context import CLIContext, ExitCode  # noqa: E402
from gitboot.config import PROJECT_CONFIG_ENV_VAR, SettingsStore  # noqa: E402
from gitboot.exceptions import ConfigError  # noqa: E402

VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def resolve_log_level(verbose: int, quiet: bool, configured: str) -> int:
    """Priority: quiet > verbose > config."""
    if quiet:
        return logging.ERROR
    if verbose > 0:
        return logging.INFO if verbose == 1 else logging.DEBUG
    return VERBOSITY_LEVELS.get(configured, logging.WARNING)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="gitboot")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to project config file (default: ./gitboot.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO and echoed git output, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """gitboot - locate git and wire an editor into it."""
    ctx.ensure_object(dict)

    if config_file:
        os.environ[PROJECT_CONFIG_ENV_VAR] = config_file

    try:
        settings = SettingsStore()
    except ConfigError as e:
        # Logging is not configured yet
        error_parts = [f"Error: {e.message}"]
        if e.field:
            error_parts.append(f"  Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"  Value: {e.value}")
        click.echo("\n".join(error_parts), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(settings=settings, verbosity=verbose, quiet=quiet)

    configure_logging(
        level=resolve_log_level(verbose, quiet, settings.config.verbosity)
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(activate)
cli.add_command(output)
cli.add_command(set_editor)
cli.add_command(set_diff_tool)
cli.add_command(set_merge_tool)
cli.add_command(set_tools)
cli.add_command(enable)
cli.add_command(disable)

if __name__ == "__main__":
    cli()
