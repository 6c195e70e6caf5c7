"""Tests for configuration loading."""

import pytest

from crexport_core.config import DEFAULT_PRIORITY_LABELS, ExportConfig, load_config


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["filename"] == "code-review"
    assert config["group_by"] == "filename"
    assert config["include_code"] is False
    assert config["template"] is None


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".crexport.yml"
    cfg.write_text("filename: team-review\ninclude_code: true\n")
    config = load_config(config_path=str(cfg))
    assert config["filename"] == "team-review"
    assert config["include_code"] is True


def test_empty_config_file_keeps_defaults(tmp_path):
    cfg = tmp_path / ".crexport.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["filename"] == "code-review"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".crexport.yml"
    cfg.write_text("group_by: category\n")
    config = load_config(config_path=str(cfg), cli_overrides={"group_by": "filename"})
    assert config["group_by"] == "filename"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".crexport.yml"
    cfg.write_text("group_by: category\n")
    config = load_config(config_path=str(cfg), cli_overrides={"group_by": None})
    assert config["group_by"] == "category"


class TestExportConfigFromDict:
    def test_defaults(self):
        config = ExportConfig.from_dict(load_config(config_path="nonexistent.yml"))
        assert config == ExportConfig()
        assert config.priority_labels == DEFAULT_PRIORITY_LABELS

    @pytest.mark.parametrize("value", ["-", "", None])
    def test_group_by_placeholder_falls_back_to_filename(self, value):
        assert ExportConfig.from_dict({"group_by": value}).group_by == "filename"

    def test_unknown_group_by_raises(self):
        with pytest.raises(ValueError, match="group_by"):
            ExportConfig.from_dict({"group_by": "author"})

    def test_priority_label_keys_from_yaml(self, tmp_path):
        cfg = tmp_path / ".crexport.yml"
        cfg.write_text("priority_labels:\n  '1': minor\n  2: major\n")
        config = ExportConfig.from_dict(load_config(config_path=str(cfg)))
        assert config.priority_labels == {1: "minor", 2: "major"}

    def test_invalid_priority_labels_raise(self):
        with pytest.raises(ValueError, match="priority_labels"):
            ExportConfig.from_dict({"priority_labels": ["low", "high"]})

    def test_default_labels_are_not_shared(self):
        a = ExportConfig()
        b = ExportConfig()
        a.priority_labels[9] = "urgent"
        assert 9 not in b.priority_labels
