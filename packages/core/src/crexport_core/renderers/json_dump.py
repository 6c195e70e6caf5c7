"""Raw JSON dump of every comment row."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from crexport_core.renderers.base import BufferedRenderer

if TYPE_CHECKING:
    from crexport_store.models import CommentRow


class JsonRenderer(BufferedRenderer):
    suffix = ".json"

    def render(self, rows: list[CommentRow]) -> str:
        data = [row.to_dict(include_code=self.config.include_code) for row in rows]
        return json.dumps(data, indent=2, ensure_ascii=False)
