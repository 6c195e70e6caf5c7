"""HTML report rendered through a Jinja2 template.

Template contract: the context variable ``groups`` is a list of
``{"group": str, "rows": [row, ...]}``. Each row carries the CommentRow
fields, ``priority`` replaced by its label and ``priority_value`` holding the
number. ``row.code`` is base64-encoded; templates must pass it through the
``decode_code`` filter before output. Autoescaping is on.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import aiofiles
from jinja2 import Environment, TemplateError, select_autoescape

from crexport_core.errors import InputError
from crexport_core.grouping import group_rows
from crexport_core.normalize import priority_label
from crexport_core.ranges import decode_code
from crexport_core.renderers.base import BufferedRenderer

if TYPE_CHECKING:
    from crexport_store.models import CommentRow

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATE = Path(__file__).parent.parent / "templates" / "report.html.j2"


def build_environment() -> Environment:
    env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))
    env.filters["decode_code"] = decode_code
    return env


class HtmlRenderer(BufferedRenderer):
    suffix = ".html"
    encode_code = True

    def __init__(self, config):
        super().__init__(config)
        self.env = build_environment()
        self._source: str | None = None

    async def prepare(self) -> None:
        """Load the custom template if one is configured, else the built-in one."""
        path = Path(self.config.template) if self.config.template else BUILTIN_TEMPLATE
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                source = await f.read()
        except OSError as e:
            raise InputError(f"Error when reading the template file: '{path}' ({e})")
        if not source.strip():
            raise InputError(f"Template file is empty: '{path}'")
        logger.debug("Using HTML template %s", path)
        self._source = source

    def _row_context(self, row: CommentRow) -> dict:
        context = row.to_dict(include_code=True)
        context["priority"] = priority_label(row.priority, self.config)
        context["priority_value"] = row.priority
        return context

    def render(self, rows: list[CommentRow]) -> str:
        if self._source is None:
            raise RuntimeError("HtmlRenderer.prepare() must be awaited before render()")
        groups = [
            {"group": g.group, "rows": [self._row_context(r) for r in g.rows]}
            for g in group_rows(rows, self.config.group_by)
        ]
        try:
            template = self.env.from_string(self._source)
            return template.render(groups=groups)
        except TemplateError as e:
            raise InputError(f"Could not render HTML template: {e}")
