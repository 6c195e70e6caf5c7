"""Review comment data model.

Decoupled from crexport_core so the comment table can be read and written
without pulling in the rendering pipeline.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

# Column order of a freshly created comment table.
CSV_COLUMNS = [
    "sha",
    "filename",
    "url",
    "lines",
    "title",
    "comment",
    "priority",
    "category",
    "additional",
]

REQUIRED_COLUMNS = {"filename", "lines", "comment", "priority"}


@dataclass
class CommentRow:
    """A single review comment attached to one or more ranges of a file.

    ``code`` is derived at export time and only set when code inclusion is
    enabled; it is never read from or written to the comment table.
    """

    filename: str
    lines: str = ""
    comment: str = ""
    priority: int | None = None
    title: str = ""
    category: str = ""
    additional: str = ""
    sha: str = ""
    url: str = ""
    code: str | None = None

    def to_dict(self, include_code: bool = False) -> dict:
        data = asdict(self)
        if not include_code:
            data.pop("code")
        return data
