"""CLI entry point for beadboard."""

import json
import logging
from dataclasses import asdict

import click
from rich.console import Console
from rich.logging import RichHandler

from beadboard.config import Config, ConfigError
from beadboard.render import render_groups_text
from beadboard.source import fetch_groups
from beadboard.tree import build_forest
from beadboard.tui import run_tui

logger = logging.getLogger(__name__)

GROUP_KEYS = ("open", "in_progress", "closed")


def get_config(ctx: click.Context) -> Config:
    """Get the Config stored on the context.

    Raises:
        click.ClickException: If the environment holds an invalid value.
    """
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = Config.from_env().with_overrides(
                bd_command=ctx.obj.get("bd_command"),
                interval=ctx.obj.get("interval"),
            )
        except ConfigError as e:
            raise click.ClickException(str(e))
    return ctx.obj["config"]


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--interval", "-n", type=float, default=None, help="Refresh interval in seconds")
@click.option("--bd-command", default=None, help="bd executable to run")
@click.version_option(version="0.1.0")
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    interval: float | None,
    bd_command: str | None,
) -> None:
    """beadboard - live terminal dashboard for bd issues."""
    ctx.ensure_object(dict)

    stderr_console = Console(stderr=True)
    handlers = [RichHandler(console=stderr_console, rich_tracebacks=verbose)]
    if verbose:
        logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    elif quiet:
        logging.basicConfig(level=logging.ERROR, handlers=handlers, force=True)
    else:
        logging.basicConfig(level=logging.INFO, handlers=handlers, force=True)

    ctx.obj["interval"] = interval
    ctx.obj["bd_command"] = bd_command
    ctx.obj["stdout"] = Console()

    if ctx.invoked_subcommand is None:
        ctx.invoke(tui)


@main.command()
@click.pass_context
def tui(ctx: click.Context) -> None:
    """Launch the live dashboard (default)."""
    config = get_config(ctx)
    try:
        run_tui(config)
    except Exception as e:
        click.echo(f"error: {e}", err=True)
        ctx.exit(1)


@main.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--width", "-w", type=int, default=None, help="Render as if the terminal were this wide")
@click.pass_context
def tree(ctx: click.Context, json_output: bool, width: int | None) -> None:
    """Print the grouped dependency trees once and exit."""
    config = get_config(ctx)
    groups = fetch_groups(config)

    if json_output:
        payload = {
            key: [
                {"prefix": node.prefix, **asdict(node.issue)}
                for node in build_forest(issues)
            ]
            for key, issues in zip(GROUP_KEYS, groups.rows())
        }
        click.echo(json.dumps(payload, indent=2))
        return

    console: Console = ctx.obj["stdout"]
    console.print(render_groups_text(groups, width or console.width))
