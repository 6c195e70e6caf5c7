"""JIRA issue import CSV.

The description uses JIRA wiki markup, and the raw comment fields are carried
in extra columns so they can be mapped to custom fields during import.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from crexport_core.renderers.base import TITLE_PREFIX, StreamedRenderer, csv_line, summary_title

if TYPE_CHECKING:
    from crexport_store.models import CommentRow

JIRA_COLUMNS = [
    "Summary",
    "Description",
    "Priority",
    "sha",
    "filename",
    "url",
    "lines",
    "title",
    "category",
    "comment",
    "additional",
]

# Internal scale is 1 (low) .. 3 (high); JIRA priority ids count down from 1 (highest).
_JIRA_PRIORITY = {3: 1, 2: 2, 1: 3}
JIRA_LOWEST_PRIORITY = 3


def jira_priority(priority: int | None) -> int:
    return _JIRA_PRIORITY.get(priority, JIRA_LOWEST_PRIORITY)


def jira_description(row: CommentRow) -> str:
    file_ref = f"[{row.filename}|{row.url}]" if row.url else row.filename
    affected = ["h2. Affected", f"* file: {file_ref}", f"* lines: {row.lines}"]
    if row.sha:
        affected.append(f"* SHA: {row.sha}")

    sections = ["\n".join(affected) + "\n"]
    if row.category:
        sections.append(f"h2. Category\n{row.category}\n")
    sections.append(f"h2. Comment\n{row.comment}\n")
    if row.additional:
        sections.append(f"h2. Additional information\n{row.additional}\n")
    if row.code:
        sections.append(f"h2. Source Code\n\n{{code}}\n{row.code}\n{{code}}\n")
    return "\n".join(sections)


class JiraCsvRenderer(StreamedRenderer):
    suffix = ".jira.csv"

    def header(self) -> str:
        return ",".join(JIRA_COLUMNS) + "\n"

    def render_row(self, row: CommentRow) -> str:
        return csv_line(
            [
                TITLE_PREFIX + summary_title(row),
                jira_description(row),
                jira_priority(row.priority),
                row.sha,
                row.filename,
                row.url,
                row.lines,
                row.title,
                row.category,
                row.comment,
                row.additional,
            ]
        )
