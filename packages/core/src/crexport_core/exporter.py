"""Export orchestration: comment table in, one artifact per format out."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import AsyncIterator

import aiofiles

from crexport_core.config import ExportConfig
from crexport_core.errors import ExportWriteError, InputError, ResolutionError
from crexport_core.normalize import normalize_row, to_storage
from crexport_core.ranges import encode_code, resolve_code
from crexport_core.renderers.base import BufferedRenderer, Renderer, StreamedRenderer
from crexport_core.renderers.html import HtmlRenderer
from crexport_core.renderers.jira import JiraCsvRenderer
from crexport_core.renderers.json_dump import JsonRenderer
from crexport_core.renderers.markdown_csv import GitHubCsvRenderer, GitLabCsvRenderer
from crexport_store.base import BaseRowSource, SourceError
from crexport_store.csv_source import CsvRowSource
from crexport_store.models import CommentRow

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    HTML = "html"
    GITLAB = "gitlab"
    GITHUB = "github"
    JIRA = "jira"
    JSON = "json"

    @classmethod
    def parse(cls, value: str | ExportFormat) -> ExportFormat:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown export format: {value!r}. Choose one of: {choices}.")


_RENDERERS: dict[ExportFormat, type[Renderer]] = {
    ExportFormat.HTML: HtmlRenderer,
    ExportFormat.GITLAB: GitLabCsvRenderer,
    ExportFormat.GITHUB: GitHubCsvRenderer,
    ExportFormat.JIRA: JiraCsvRenderer,
    ExportFormat.JSON: JsonRenderer,
}


@dataclass
class ExportResult:
    """Outcome of a successful export, returned to the caller."""

    format: ExportFormat
    output_path: Path
    rows: int


def get_renderer(export_format: ExportFormat | str, config: ExportConfig) -> Renderer:
    return _RENDERERS[ExportFormat.parse(export_format)](config)


def source_path(workspace_root: str | Path, config: ExportConfig) -> Path:
    return Path(workspace_root) / f"{config.filename}.csv"


def output_path(workspace_root: str | Path, config: ExportConfig, renderer: Renderer) -> Path:
    return Path(workspace_root) / f"{config.filename}{renderer.suffix}"


async def attach_code(row: CommentRow, workspace_root: str | Path, config: ExportConfig, encode: bool) -> CommentRow:
    """Fill row.code when code inclusion is on; a stale range yields empty code.

    A malformed selector is an input error and propagates.
    """
    if not config.include_code:
        return row
    # Filenames are recorded relative to the workspace, sometimes with a leading slash.
    path = Path(workspace_root) / row.filename.lstrip("/\\")
    try:
        code = await resolve_code(path, row.lines)
    except ResolutionError as e:
        logger.warning("No code for %s (%s): %s", row.filename, row.lines, e)
        code = ""
    if code and encode:
        code = encode_code(code)
    return replace(row, code=code)


async def _iter_rows(
    source: BaseRowSource, workspace_root: str | Path, config: ExportConfig, renderer: Renderer
) -> AsyncIterator[CommentRow]:
    try:
        async for raw in source.iter_raw_rows():
            row = normalize_row(raw)
            yield await attach_code(row, workspace_root, config, renderer.encode_code)
    except SourceError as e:
        raise InputError(str(e)) from e


async def _run_streamed(renderer: StreamedRenderer, rows: AsyncIterator[CommentRow], out_path: Path) -> int:
    # Pulling the first row validates the comment table before the output is truncated.
    first = await anext(rows, None)
    count = 0
    try:
        async with aiofiles.open(out_path, "w", encoding="utf-8", newline="") as out:
            await out.write(renderer.header())
            if first is not None:
                await out.write(renderer.render_row(first))
                count += 1
                async for row in rows:
                    await out.write(renderer.render_row(row))
                    count += 1
    except OSError as e:
        raise ExportWriteError(f"Could not write '{out_path}': {e}") from e
    return count


async def _run_buffered(renderer: BufferedRenderer, rows: AsyncIterator[CommentRow], out_path: Path) -> int:
    buffered = [row async for row in rows]
    document = renderer.render(buffered)
    try:
        async with aiofiles.open(out_path, "w", encoding="utf-8") as out:
            await out.write(document)
    except OSError as e:
        raise ExportWriteError(f"Could not write '{out_path}': {e}") from e
    return len(buffered)


async def run_export(
    export_format: ExportFormat | str,
    workspace_root: str | Path,
    config: ExportConfig,
    source: BaseRowSource | None = None,
) -> ExportResult:
    """Export the workspace's comment table to one format.

    Raises InputError when the comment table or template is missing or
    malformed and ExportWriteError when the output cannot be written.
    Buffered formats write nothing unless the whole run succeeds; streamed
    formats start with the header and append one record per row.
    """
    export_format = ExportFormat.parse(export_format)
    renderer = get_renderer(export_format, config)
    source = source or CsvRowSource(source_path(workspace_root, config))
    out_path = output_path(workspace_root, config, renderer)

    if not source.exists():
        raise InputError(f"Comment file not found for export: '{source_path(workspace_root, config)}'")
    await renderer.prepare()

    logger.debug("Exporting %s to %s (buffered=%s)", export_format.value, out_path, renderer.buffered)
    rows = _iter_rows(source, workspace_root, config, renderer)
    if renderer.buffered:
        count = await _run_buffered(renderer, rows, out_path)
    else:
        count = await _run_streamed(renderer, rows, out_path)

    logger.info("Exported %d comment(s) to %s", count, out_path)
    return ExportResult(format=export_format, output_path=out_path, rows=count)


async def run_exports(
    formats: list[ExportFormat | str],
    workspace_root: str | Path,
    config: ExportConfig,
) -> list[ExportResult | BaseException]:
    """Run several exports concurrently; each has its own output file.

    Results come back in the order of ``formats``; a failed export is
    returned as its exception rather than cancelling the others.
    """
    tasks = [run_export(fmt, workspace_root, config) for fmt in formats]
    return await asyncio.gather(*tasks, return_exceptions=True)


async def record_comment(
    row: CommentRow,
    workspace_root: str | Path,
    config: ExportConfig,
    source: BaseRowSource | None = None,
) -> None:
    """Append a comment to the workspace's comment table."""
    source = source or CsvRowSource(source_path(workspace_root, config))
    try:
        await source.append(to_storage(row))
    except SourceError as e:
        raise ExportWriteError(str(e)) from e
