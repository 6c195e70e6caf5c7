"""GitLab and GitHub issue import CSVs.

Both trackers take a Markdown description; GitHub's importer additionally
wants labels, state and assignee columns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from crexport_core.normalize import has_priority, priority_label
from crexport_core.renderers.base import TITLE_PREFIX, StreamedRenderer, csv_line, summary_title

if TYPE_CHECKING:
    from crexport_core.config import ExportConfig
    from crexport_store.models import CommentRow


def markdown_description(row: CommentRow, config: ExportConfig) -> str:
    """Build the issue body: priority, category, affected code, comment, extras, source."""
    sections = []
    if has_priority(row.priority, config):
        sections.append(f"## Priority\n{priority_label(row.priority, config)}\n")
    if row.category:
        sections.append(f"## Category\n{row.category}\n")

    file_ref = f"[{row.filename}]({row.url})" if row.url else row.filename
    affected = ["## Affected", f"- file: {file_ref}", f"- lines: {row.lines}"]
    if row.sha:
        affected.append(f"- SHA: {row.sha}")
    sections.append("\n".join(affected) + "\n")

    sections.append(f"## Comment\n{row.comment}\n")
    if row.additional:
        sections.append(f"## Additional information\n{row.additional}\n")
    if row.code:
        sections.append(f"## Source Code\n\n```\n{row.code}\n```\n")
    return "\n".join(sections)


class GitLabCsvRenderer(StreamedRenderer):
    suffix = ".gitlab.csv"

    def header(self) -> str:
        return "title,description\n"

    def render_row(self, row: CommentRow) -> str:
        return csv_line([TITLE_PREFIX + summary_title(row), markdown_description(row, self.config)])


class GitHubCsvRenderer(StreamedRenderer):
    suffix = ".github.csv"

    labels = "code-review"
    state = "open"

    def header(self) -> str:
        return "title,description,labels,state,assignee\n"

    def render_row(self, row: CommentRow) -> str:
        return csv_line(
            [
                TITLE_PREFIX + summary_title(row),
                markdown_description(row, self.config),
                self.labels,
                self.state,
                "",
            ]
        )
