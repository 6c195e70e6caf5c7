"""export command: write review comments to HTML, CSV and JSON artifacts."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console

from crexport_core.config import GROUP_BY_CHOICES, ExportConfig, load_config
from crexport_core.errors import ExportError
from crexport_core.exporter import ExportFormat, run_exports

console = Console()

_FORMAT_CHOICES = [f.value for f in ExportFormat] + ["all"]

_SUCCESS_LABEL = {
    ExportFormat.HTML: "Code review file",
    ExportFormat.GITLAB: "GitLab importable CSV file",
    ExportFormat.GITHUB: "GitHub importable CSV file",
    ExportFormat.JIRA: "JIRA importable file",
    ExportFormat.JSON: "JSON file",
}


def _selected_formats(formats: tuple[str, ...]) -> list[ExportFormat]:
    if not formats or "all" in formats:
        return list(ExportFormat) if formats else [ExportFormat.HTML]
    # Keep the requested order but drop repeats.
    return [ExportFormat.parse(f) for f in dict.fromkeys(formats)]


@click.command("export")
@click.option(
    "--format",
    "-f",
    "formats",
    type=click.Choice(_FORMAT_CHOICES, case_sensitive=False),
    multiple=True,
    help="Export format; repeat for several. Defaults to html.",
)
@click.option(
    "--workspace",
    "-w",
    type=click.Path(file_okay=False, exists=True),
    default=".",
    show_default=True,
    help="Workspace root holding the comment table and the reviewed sources.",
)
@click.option("--filename", default=None, help="Base name of the comment table and exports. Overrides config file.")
@click.option(
    "--group-by",
    type=click.Choice(list(GROUP_BY_CHOICES)),
    default=None,
    help="Section the HTML report by file or category. Overrides config file.",
)
@click.option(
    "--include-code/--no-include-code",
    default=None,
    help="Embed the commented source ranges in the export. Overrides config file.",
)
@click.option(
    "--template",
    type=click.Path(dir_okay=False),
    default=None,
    help="Custom Jinja2 template for the HTML report. Overrides config file.",
)
@click.pass_context
def export_cmd(
    ctx,
    formats: tuple[str, ...],
    workspace: str,
    filename: str | None,
    group_by: str | None,
    include_code: bool | None,
    template: str | None,
):
    """Export the review comments of a workspace.

    Reads <filename>.csv from the workspace root and writes
    <filename>.html, .gitlab.csv, .github.csv, .jira.csv or .json next to it.
    """
    base = ctx.obj.get("config") if ctx.obj else None
    if base is None:
        base = load_config()
    overrides = {"filename": filename, "group_by": group_by, "include_code": include_code, "template": template}
    merged = {**base, **{k: v for k, v in overrides.items() if v is not None}}

    try:
        config = ExportConfig.from_dict(merged)
    except ValueError as e:
        raise click.UsageError(str(e))

    selected = _selected_formats(formats)
    results = asyncio.run(run_exports(selected, workspace, config))

    failed = 0
    for fmt, result in zip(selected, results):
        if isinstance(result, ExportError):
            console.print(f"[red]{fmt.value} export failed: {result}[/red]")
            failed += 1
        elif isinstance(result, BaseException):
            raise result
        else:
            console.print(
                f"[green]{_SUCCESS_LABEL[fmt]}: '{result.output_path}' successfully created "
                f"({result.rows} comment(s)).[/green]"
            )

    if failed:
        ctx.exit(1)
