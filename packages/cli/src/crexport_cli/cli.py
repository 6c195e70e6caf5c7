"""CLI entry point for crexport.

Commands:
  export: turn the workspace's comment table into HTML / CSV / JSON artifacts
  stats: summarize the comment table by priority, category and file
  add: append a review comment to the comment table
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from crexport_cli.commands.add import add_cmd
from crexport_cli.commands.export import export_cmd
from crexport_cli.commands.stats import stats_cmd

console = Console()


@click.group()
@click.version_option(
    version=importlib.metadata.version("crexport"),
    prog_name="crexport",
)
@click.option(
    "--config",
    "config_path",
    default=".crexport.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CREXPORT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline details.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Export code review comments to HTML, GitLab, GitHub, JIRA and JSON."""
    from crexport_core.config import load_config

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)


main.add_command(export_cmd)
main.add_command(stats_cmd)
main.add_command(add_cmd)
