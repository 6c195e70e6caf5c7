from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_PRIORITY_LABELS: dict[int, str] = {0: "none", 1: "low", 2: "medium", 3: "high"}

GROUP_BY_CHOICES = ("filename", "category")

DEFAULT_CONFIG: dict = {
    "filename": "code-review",  # base name of the comment table and every export
    "group_by": "filename",
    "priority_labels": None,  # None = DEFAULT_PRIORITY_LABELS
    "unset_priority_label": "none",
    "include_code": False,
    "template": None,  # None = built-in HTML template; set to a path string to override
}


def load_config(config_path: str = ".crexport.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .crexport.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


@dataclass(frozen=True)
class ExportConfig:
    """Settings threaded explicitly into every stage of one export run."""

    filename: str = "code-review"
    group_by: str = "filename"
    priority_labels: dict[int, str] = field(default_factory=lambda: dict(DEFAULT_PRIORITY_LABELS))
    unset_priority_label: str = "none"
    include_code: bool = False
    template: Optional[str] = None

    @classmethod
    def from_dict(cls, config: dict) -> ExportConfig:
        """Build an ExportConfig from a load_config() dict.

        ``group_by`` of ``-`` or empty falls back to ``filename``. Priority
        label keys may come from YAML as strings and are converted to int.
        """
        group_by = config.get("group_by") or "filename"
        if group_by == "-":
            group_by = "filename"
        if group_by not in GROUP_BY_CHOICES:
            raise ValueError(f"Unknown group_by: {group_by!r}. Choose 'filename' or 'category'.")

        labels = config.get("priority_labels") or DEFAULT_PRIORITY_LABELS
        try:
            priority_labels = {int(k): str(v) for k, v in labels.items()}
        except (AttributeError, TypeError, ValueError):
            raise ValueError(f"priority_labels must map integers to names, got {labels!r}")

        return cls(
            filename=config.get("filename") or "code-review",
            group_by=group_by,
            priority_labels=priority_labels,
            unset_priority_label=config.get("unset_priority_label") or "none",
            include_code=bool(config.get("include_code", False)),
            template=config.get("template") or None,
        )
