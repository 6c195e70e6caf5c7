"""Range selectors and source code extraction.

A range selector names one or more spans of a file:

    selector := token ('|' token)*
    token    := LINE ':' COL '-' LINE ':' COL

LINE is 1-indexed. COL is a 0-indexed character offset into the line and the
end column is exclusive, matching editor cursor positions. So ``2:0-2:5``
over a second line ``return x;`` selects ``retur``, and ``3:4-5:0`` selects
the end of line 3 and all of line 4. A selection that runs to the end of a
file ending in a line break is recorded as ``N+1:0``, one line past the last.

Selectors are recorded by editors, so the offsets must be read the way the
editor wrote them. Reading the start column as 1-indexed would turn the
example above into ``eturn`` and shift every multi-line selection by one
character.
"""

from __future__ import annotations

import base64
import logging
import textwrap
from pathlib import Path
from typing import NamedTuple

import aiofiles

from crexport_core.errors import RangeSelectorError, ResolutionError

logger = logging.getLogger(__name__)

SPAN_SEPARATOR = "..."


class Span(NamedTuple):
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


def _parse_position(text: str, token: str) -> tuple[int, int]:
    line, sep, col = text.partition(":")
    if not sep:
        raise RangeSelectorError(f"Range token {token!r} is missing a ':' between line and column")
    try:
        line_no, col_no = int(line), int(col)
    except ValueError:
        raise RangeSelectorError(f"Range token {token!r} contains a non-numeric position")
    if line_no < 0 or col_no < 0:
        raise RangeSelectorError(f"Range token {token!r} contains a negative position")
    return line_no, col_no


def parse_token(token: str) -> Span:
    token = token.strip()
    start, sep, end = token.partition("-")
    if not sep:
        raise RangeSelectorError(f"Range token {token!r} is missing a '-' between start and end")
    return Span(*_parse_position(start, token), *_parse_position(end, token))


def parse_selector(selector: str | None) -> list[Span]:
    """Parse a selector into spans, in the order they were written."""
    if not selector or not selector.strip():
        return []
    return [parse_token(token) for token in selector.split("|")]


def sort_selector(selector: str | None) -> str:
    """Return the selector with its tokens in ascending document order."""
    spans = parse_selector(selector)
    return "|".join(str(span) for span in sorted(spans))


def extract_span(lines: list[str], span: Span) -> str:
    """Return the text covered by ``span`` in a file split into ``lines``."""
    line_count = len(lines)
    if span.start_line < 1:
        raise ResolutionError(f"Range {span} starts before the first line")
    # The position just after a trailing line break is N+1:0.
    last_line = line_count + 1 if span.end_col == 0 else line_count
    if span.start_line > line_count or span.end_line > last_line:
        raise ResolutionError(f"Range {span} exceeds the file's {line_count} line(s)")
    if (span.end_line, span.end_col) < (span.start_line, span.start_col):
        raise ResolutionError(f"Range {span} ends before it starts")

    if span.start_line == span.end_line:
        return lines[span.start_line - 1][span.start_col : span.end_col]

    parts = [lines[span.start_line - 1][span.start_col :]]
    parts.extend(lines[span.start_line : span.end_line - 1])
    # A selection ending at column 0 stops at the end of the previous line.
    if span.end_col > 0:
        parts.append(lines[span.end_line - 1][: span.end_col])
    return "\n".join(parts)


def join_spans(lines: list[str], spans: list[Span]) -> str:
    """Extract ``spans`` in ascending order and join them into one snippet.

    Spans that touch or follow on the next line are joined with a plain line
    break; gaps are marked with a ``...`` line. Spans that cannot be resolved
    are skipped. Shared leading indentation is removed from the result.
    """
    resolved: list[tuple[Span, str]] = []
    for span in sorted(spans):
        try:
            resolved.append((span, extract_span(lines, span)))
        except ResolutionError as e:
            logger.warning("Skipping range: %s", e)
    if not resolved:
        raise ResolutionError("None of the selected ranges could be resolved")

    # Dedent the extracted text alone; the separator lines carry no indentation.
    dedented = textwrap.dedent("\n".join(text for _, text in resolved)).split("\n")

    chunks: list[str] = []
    previous: Span | None = None
    offset = 0
    for span, text in resolved:
        height = text.count("\n") + 1
        if previous is not None:
            chunks.append("\n" if span.start_line <= previous.end_line + 1 else f"\n{SPAN_SEPARATOR}\n")
        chunks.append("\n".join(dedented[offset : offset + height]))
        offset += height
        previous = span
    return "".join(chunks)


async def read_source(path: str | Path) -> list[str]:
    """Read a source file and split it into lines without line terminators."""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
            content = await f.read()
    except FileNotFoundError:
        raise ResolutionError(f"Source file not found: '{path}'")
    except OSError as e:
        raise ResolutionError(f"Could not read source file '{path}': {e}")
    return content.splitlines()


async def resolve_code(path: str | Path, selector: str) -> str:
    """Return the code selected by ``selector`` in the file at ``path``.

    Raises RangeSelectorError for a malformed selector and ResolutionError
    when the file is missing or no span can be extracted.
    """
    spans = parse_selector(selector)
    if not spans:
        return ""
    lines = await read_source(path)
    return join_spans(lines, spans)


def encode_code(code: str) -> str:
    """Encode code for safe embedding inside markup (reverse with decode_code)."""
    return base64.b64encode(code.encode("utf-8")).decode("ascii")


def decode_code(encoded: str | None) -> str:
    if not encoded:
        return ""
    return base64.b64decode(encoded.encode("ascii")).decode("utf-8")
