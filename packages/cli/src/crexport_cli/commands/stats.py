"""stats command: aggregate the comment table of a workspace."""

from __future__ import annotations

import asyncio
from collections import Counter

import click
from rich.console import Console
from rich.table import Table

from crexport_core.config import ExportConfig, load_config
from crexport_core.errors import InputError
from crexport_core.exporter import source_path
from crexport_core.normalize import normalize_row, priority_label
from crexport_store.base import SourceError
from crexport_store.csv_source import CsvRowSource

console = Console()

_PRIORITY_STYLE = {"high": "red", "medium": "yellow", "low": "green", "none": "dim"}


async def _load_rows(path):
    source = CsvRowSource(path)
    try:
        return [normalize_row(raw) async for raw in source.iter_raw_rows()]
    except SourceError as e:
        raise InputError(str(e)) from e


@click.command("stats")
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, exists=True),
    default=".",
    show_default=True,
    help="Workspace root holding the comment table.",
)
@click.option("--top", default=10, show_default=True, help="Number of most commented files to show.")
@click.pass_context
def stats_cmd(ctx, workspace: str, top: int):
    """Show how review comments are spread across priorities, categories and files.

    Useful before exporting to see whether a review is dominated by a few
    files or by one kind of issue.
    """
    base = ctx.obj.get("config") if ctx.obj else None
    try:
        config = ExportConfig.from_dict(base if base is not None else load_config())
    except ValueError as e:
        raise click.UsageError(str(e))

    try:
        rows = asyncio.run(_load_rows(source_path(workspace, config)))
    except InputError as e:
        raise click.ClickException(str(e))

    if not rows:
        console.print("[yellow]No review comments found.[/yellow]")
        return

    priority_counter: Counter[str] = Counter(priority_label(r.priority, config) for r in rows)
    category_counter: Counter[str] = Counter(r.category for r in rows)
    file_counter: Counter[str] = Counter(r.filename for r in rows)

    console.print(f"\n[bold]Review stats for [cyan]{config.filename}.csv[/cyan][/bold]")
    console.print(f"  Total comments: {len(rows)}")
    console.print(f"  Files:          {len(file_counter)}")

    prio_table = Table(title="Priority Breakdown", show_header=True)
    prio_table.add_column("Priority", style="bold")
    prio_table.add_column("Count", justify="right")
    prio_table.add_column("% of total", justify="right")
    labels = [config.priority_labels[k] for k in sorted(config.priority_labels, reverse=True)]
    if config.unset_priority_label not in labels:
        labels.append(config.unset_priority_label)
    for label in labels:
        count = priority_counter.get(label, 0)
        style = _PRIORITY_STYLE.get(label, "white")
        prio_table.add_row(f"[{style}]{label}[/{style}]", str(count), f"{count / len(rows) * 100:.1f}%")
    console.print(prio_table)

    cat_table = Table(title="Categories", show_header=True)
    cat_table.add_column("Category")
    cat_table.add_column("Comments", justify="right")
    for category, count in category_counter.most_common():
        cat_table.add_row(category, str(count))
    console.print(cat_table)

    file_table = Table(title=f"Top {top} Most Commented Files", show_header=True)
    file_table.add_column("File")
    file_table.add_column("Comments", justify="right")
    for file_path, count in file_counter.most_common(top):
        file_table.add_row(file_path, str(count))
    console.print(file_table)
