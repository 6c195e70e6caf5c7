"""Row normalization between the comment table and the export pipeline.

Free-text fields are stored with a backslash escape convention so a comment
always fits on one CSV line:

    backslash  ->  \\\\
    LF         ->  \\n
    CR         ->  \\r

Decoding leaves any other backslash sequence untouched, which keeps tables
written by tools that only escaped newlines readable.
"""

from __future__ import annotations

import logging
import re

from crexport_core.config import ExportConfig
from crexport_store.models import CommentRow

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"

ESCAPED_FIELDS = ("comment", "title", "additional")

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}
_ESCAPE_RE = re.compile(r"[\\\n\r]")
_UNESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def escape_text(text: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def unescape_text(text: str) -> str:
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), text)


def parse_priority(value) -> int | None:
    """Parse a stored priority; blank or non-numeric values mean 'unset'."""
    if value is None or isinstance(value, int):
        return value
    value = str(value).strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.debug("Ignoring non-numeric priority %r", value)
        return None


def priority_label(priority: int | None, config: ExportConfig) -> str:
    if priority is None:
        return config.unset_priority_label
    return config.priority_labels.get(priority, config.unset_priority_label)


def has_priority(priority: int | None, config: ExportConfig) -> bool:
    """True when the priority maps to a real label rather than the unset one."""
    return priority_label(priority, config) != config.unset_priority_label


def normalize_row(raw: dict) -> CommentRow:
    """Turn a stored row into a CommentRow ready for rendering."""
    values = {str(key).strip(): (value or "") for key, value in raw.items() if key is not None}
    for name in ESCAPED_FIELDS:
        values[name] = unescape_text(values.get(name, ""))

    return CommentRow(
        filename=values.get("filename", "").strip(),
        lines=values.get("lines", "").strip(),
        comment=values["comment"],
        priority=parse_priority(values.get("priority")),
        title=values["title"],
        category=values.get("category", "").strip() or DEFAULT_CATEGORY,
        additional=values["additional"],
        sha=values.get("sha", "").strip(),
        url=values.get("url", "").strip(),
    )


def to_storage(row: CommentRow) -> dict:
    """Inverse of normalize_row(): the column values to store for a row."""
    values = row.to_dict()
    for name in ESCAPED_FIELDS:
        values[name] = escape_text(values[name])
    values["priority"] = "" if row.priority is None else str(row.priority)
    return values
