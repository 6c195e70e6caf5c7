"""Partition comment rows into report sections."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from crexport_core.config import GROUP_BY_CHOICES
from crexport_core.ranges import sort_selector
from crexport_store.models import CommentRow


@dataclass
class ExportGroup:
    """Rows sharing one value of the grouping key, in input order."""

    group: str
    rows: list[CommentRow] = field(default_factory=list)


def group_rows(rows: list[CommentRow], group_by: str = "filename") -> list[ExportGroup]:
    """Group rows by ``filename`` or ``category``.

    Groups appear in the order their key is first seen. When grouping by
    filename, each row's range tokens are re-sorted into document order since
    comments are rarely recorded top to bottom. Input rows are not mutated.
    """
    if group_by not in GROUP_BY_CHOICES:
        raise ValueError(f"Unknown grouping key: {group_by!r}. Choose 'filename' or 'category'.")

    groups: dict[str, ExportGroup] = {}
    for row in rows:
        if group_by == "filename":
            row = replace(row, lines=sort_selector(row.lines))
        key = getattr(row, group_by)
        if key not in groups:
            groups[key] = ExportGroup(group=key)
        groups[key].rows.append(row)

    return list(groups.values())
