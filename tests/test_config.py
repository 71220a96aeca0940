"""
Tests for configuration loading.
"""

import json
import logging

import pytest

from inspectdoc.config import GridConfig, LayoutConfig, ReportConfig, load_config
from inspectdoc.exceptions import InspectDocError


class TestDefaults:
    """Test cases for default values."""

    def test_layout_defaults(self):
        config = LayoutConfig()

        assert config.page_size == "A4"
        assert config.margin == 36.0
        assert config.footer_reserved == 40.0
        assert config.table_width == pytest.approx(523.0)
        assert config.photo_grid == GridConfig(columns=4, tile_height=100.0)
        assert config.video_grid.tile_height == 64.0
        assert config.max_video_tiles == 8

    def test_report_defaults(self):
        config = ReportConfig()

        assert config.fetch.max_workers == 4
        assert config.fetch.timeout_seconds == 5.0
        assert config.company_name == "Property Stewards PTE. LTD"


class TestFromDict:
    """Test cases for merging overrides."""

    def test_nested_overrides(self):
        config = ReportConfig.from_dict(
            {
                "layout": {
                    "margin": 20,
                    "column_widths": [100, 100, 200, 123],
                    "photo_grid": {"columns": 3},
                },
                "fetch": {"max_workers": 8},
                "company_name": "Acme Inspections",
            }
        )

        assert config.layout.margin == 20
        assert config.layout.column_widths == (100, 100, 200, 123)
        assert config.layout.photo_grid.columns == 3
        assert config.layout.photo_grid.tile_height == 100.0
        assert config.layout.video_grid.tile_height == 64.0
        assert config.fetch.max_workers == 8
        assert config.company_name == "Acme Inspections"

    def test_unknown_keys_are_ignored_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = ReportConfig.from_dict({"layout": {"colour": "red"}, "extra": 1})

        assert config == ReportConfig()
        assert "Ignoring unknown config key: colour" in caplog.text
        assert "Ignoring unknown config key: extra" in caplog.text

    def test_empty_overrides(self):
        assert ReportConfig.from_dict(None) == ReportConfig()


class TestLoadConfig:
    """Test cases for load_config."""

    def test_none_gives_defaults(self):
        assert load_config(None) == ReportConfig()

    def test_loads_file(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"footer_text": "Handover"}), encoding="utf-8")

        assert load_config(path).footer_text == "Handover"

    def test_missing_file(self, temp_dir):
        with pytest.raises(InspectDocError, match="Config file not found"):
            load_config(temp_dir / "nope.json")

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("[", encoding="utf-8")
        with pytest.raises(InspectDocError, match="not valid JSON"):
            load_config(path)

    def test_non_object_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(InspectDocError, match="JSON object"):
            load_config(str(path))
