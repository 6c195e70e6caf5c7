"""add command: record a review comment in the comment table."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console

from crexport_core.config import ExportConfig, load_config
from crexport_core.errors import ExportError
from crexport_core.exporter import record_comment, source_path
from crexport_core.ranges import parse_selector
from crexport_store.models import CommentRow

console = Console()


@click.command("add")
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, exists=True),
    default=".",
    show_default=True,
    help="Workspace root holding the comment table.",
)
@click.option("--file", "filename", required=True, help="Reviewed file, relative to the workspace root.")
@click.option("--lines", required=True, help="Range selector, e.g. 12:3-15:6|18:1-19:40.")
@click.option("--comment", required=True, help="Review comment. Line breaks are kept.")
@click.option("--priority", type=click.IntRange(0, 3), default=None, help="0 (none) to 3 (high).")
@click.option("--title", default="", help="Short title used as the issue summary.")
@click.option("--category", default="", help="Comment category, e.g. Performance.")
@click.option("--additional", default="", help="Additional information.")
@click.option("--sha", default="", help="Commit the comment refers to.")
@click.option("--url", default="", help="Link to the commented lines.")
@click.pass_context
def add_cmd(
    ctx,
    workspace: str,
    filename: str,
    lines: str,
    comment: str,
    priority: int | None,
    title: str,
    category: str,
    additional: str,
    sha: str,
    url: str,
):
    """Append a review comment to <filename>.csv in the workspace."""
    base = ctx.obj.get("config") if ctx.obj else None
    try:
        config = ExportConfig.from_dict(base if base is not None else load_config())
    except ValueError as e:
        raise click.UsageError(str(e))

    try:
        parse_selector(lines)
    except ExportError as e:
        raise click.BadParameter(str(e), param_hint="--lines")

    row = CommentRow(
        filename=filename,
        lines=lines,
        comment=comment,
        priority=priority,
        title=title,
        category=category,
        additional=additional,
        sha=sha,
        url=url,
    )
    try:
        asyncio.run(record_comment(row, workspace, config))
    except ExportError as e:
        raise click.ClickException(str(e))

    console.print(f"[green]Comment added to '{source_path(workspace, config)}'.[/green]")
