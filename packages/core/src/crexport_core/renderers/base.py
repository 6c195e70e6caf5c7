"""Renderer interface shared by every export format.

A renderer is built once per export with an explicit ExportConfig. Streamed
renderers produce a header plus one chunk per row and are written
incrementally; buffered renderers receive every row at once and return the
whole document.
"""

from __future__ import annotations

import csv
import io
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crexport_core.config import ExportConfig
    from crexport_store.models import CommentRow

TITLE_MAX_CHARS = 255
DERIVED_TITLE_CHARS = 100
ELLIPSIS = "..."
TITLE_PREFIX = "[code review] "


def summary_title(row: CommentRow) -> str:
    """Issue title: the explicit title (max 255 chars) or the start of the comment."""
    if row.title:
        return row.title[:TITLE_MAX_CHARS]
    if len(row.comment) > DERIVED_TITLE_CHARS:
        return row.comment[:DERIVED_TITLE_CHARS] + ELLIPSIS
    return row.comment


def csv_line(values: list) -> str:
    """Format one fully quoted CSV record."""
    buf = io.StringIO()
    csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n").writerow(values)
    return buf.getvalue()


class Renderer(ABC):
    """Format descriptor: output suffix, buffering policy and rendering steps."""

    suffix: str = ""
    buffered: bool = False
    # When True the orchestrator stores row.code base64-encoded.
    encode_code: bool = False

    def __init__(self, config: ExportConfig):
        self.config = config

    async def prepare(self) -> None:
        """Load anything the renderer needs before the output file is touched."""


class StreamedRenderer(Renderer):
    buffered = False

    @abstractmethod
    def header(self) -> str:
        """Text written once before the first row."""

    @abstractmethod
    def render_row(self, row: CommentRow) -> str:
        """Text appended for a single row."""


class BufferedRenderer(Renderer):
    buffered = True

    @abstractmethod
    def render(self, rows: list[CommentRow]) -> str:
        """Return the complete document for all rows."""
