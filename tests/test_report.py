"""
Tests for report assembly.
"""

from dataclasses import replace
from datetime import datetime
from unittest.mock import patch

import pytest

from inspectdoc.config import ReportConfig
from inspectdoc.exceptions import RenderingError, SurfaceError
from inspectdoc.loader import parse_record
from inspectdoc.models import ChecklistItem, InspectionRecord, Task
from inspectdoc.report import (
    ReportOptions,
    RenderContext,
    append_checklist_section,
    build_report_pdf,
    render_report,
    report_title,
    scope_items,
)
from inspectdoc.surface.recording import RecordingSurface

from .factories import A4_HEIGHT, A4_WIDTH, data_uri, png_bytes, record_data

GENERATED = datetime(2024, 6, 1, 8, 0)


@pytest.fixture
def record():
    return parse_record(record_data())


@pytest.fixture
def options():
    return ReportOptions(generated_on=GENERATED)


class TestHelpers:
    """Test cases for title and scope helpers."""

    def test_title_from_contract_type(self, record, options):
        assert report_title(record, options) == "Handover Report"

    def test_title_override_and_fallback(self, record):
        assert report_title(record, ReportOptions(title="  Final walk  ")) == "Final walk"
        assert report_title(replace(record, contract_type=None), ReportOptions()) == "Inspection Report"

    def test_scope_items(self, record):
        assert [item.id for item in scope_items(record.items, None)] == ["item-1", "item-2"]
        assert [item.id for item in scope_items(record.items, "wo-scope")] == ["item-1"]
        assert [item.id for item in scope_items(record.items, "other-scope")] == ["item-1", "item-2"]


class TestRenderReport:
    """Test cases for render_report on a recording surface."""

    def test_full_report(self, surface, record, options, stub_cache):
        render_report(surface, record, options, image_cache=stub_cache)
        texts = surface.texts()
        title = next(op for op in surface.ops_named("text") if op.params["font_size"] == pytest.approx(18.0))

        assert title.params["text"] == "Handover Report"
        assert title.params["align"] == "center"
        assert "Version: v1" in texts
        assert "Generated: 1 Jun 2024, 8:00 am" in texts
        assert "Contract ID: wo-1001" in texts
        assert "Status: Completed" in texts
        assert "Postal Code: 238888" in texts
        assert "Inspection Checklist" in texts
        assert "Inspectors: Alice, Bob" in texts
        assert "1. Bedroom (completed)" in texts
        assert "2. Store" in texts
        assert "Sign-Off" in texts
        assert "Property Stewards PTE. LTD" in texts
        assert stub_cache.calls == ["https://cdn.example.com/door-0.jpg"]

    def test_every_page_has_a_footer(self, record, options, stub_cache):
        surface = RecordingSurface(A4_WIDTH, 420)
        render_report(surface, record, options, image_cache=stub_cache)
        footer = [(op.page, op.params["text"]) for op in surface.ops_named("text") if op.params["text"].startswith("Page ")]

        assert surface.page_count > 1
        assert footer == [(page, f"Page {page}") for page in range(1, surface.page_count + 1)]

    def test_sign_off_is_last_and_above_footer(self, surface, record, options, stub_cache):
        config = ReportConfig()
        render_report(surface, record, options, config, image_cache=stub_cache)
        bottom = surface.page_height - config.layout.margin - config.layout.footer_reserved
        boxes = [op for op in surface.ops_named("rect") if op.params["radius"] == pytest.approx(6.0)]

        assert len(boxes) == 2
        assert all(op.page == surface.page_count for op in boxes)
        assert all(op.params["y"] + op.params["height"] <= bottom for op in boxes)

    def test_scope_filter(self, surface, record, stub_cache):
        options = ReportOptions(generated_on=GENERATED, filter_by_scope_id="wo-scope")
        render_report(surface, record, options, image_cache=stub_cache)
        assert "2. Store" not in surface.texts()

    def test_empty_record(self, surface, options, stub_cache):
        render_report(surface, InspectionRecord(id="wo-2"), options, image_cache=stub_cache)
        texts = surface.texts()

        assert "No checklist items found." in texts
        assert "Inspection Report" in texts
        assert "Sign-Off" in texts

    def test_unusable_surface(self, record, options, stub_cache):
        with pytest.raises(SurfaceError):
            render_report(RecordingSurface(0, 0), record, options, image_cache=stub_cache)

    def test_report_is_deterministic(self, record, options, stub_cache):
        first = RecordingSurface(A4_WIDTH, A4_HEIGHT)
        second = RecordingSurface(A4_WIDTH, A4_HEIGHT)
        render_report(first, record, options, image_cache=stub_cache)
        render_report(second, record, options, image_cache=stub_cache)

        assert first.ops == second.ops

    def test_owned_cache_is_closed(self, surface, record, options):
        with patch("inspectdoc.report.ImageCache") as cache_cls:
            cache_cls.return_value.resolve.return_value = None
            render_report(surface, record, options)

        cache_cls.return_value.close.assert_called_once()


class TestChecklistSection:
    """Test cases for append_checklist_section."""

    def test_starts_on_new_page(self, surface, record, stub_cache):
        context = RenderContext(image_cache=stub_cache)
        options = ReportOptions(start_on_new_page=True, include_meta=False)
        append_checklist_section(surface, record.items, context, options, 300.0, record)

        heading = next(op for op in surface.ops_named("text") if op.params["text"] == "Inspection Checklist")
        assert heading.page == 2
        assert heading.params["y"] == pytest.approx(36.0)
        assert "Inspectors: Alice, Bob" not in surface.texts()

    def test_filtered_out_items_give_empty_message(self, surface, stub_cache):
        item = ChecklistItem(id="i", name="Hall", tasks=(Task(id="t", name="Wall", condition="GOOD"),))
        context = RenderContext(image_cache=stub_cache)
        options = ReportOptions(allowed_conditions=("POOR",), include_meta=False)
        result = append_checklist_section(surface, [item], context, options, 36.0)

        assert "No checklist items found." in surface.texts()
        assert result.page_count == 1
        assert surface.ops_named("rect") == []

    def test_item_without_tasks_survives_condition_filter(self, surface, stub_cache):
        item = ChecklistItem(id="i", name="Hall")
        context = RenderContext(image_cache=stub_cache)
        options = ReportOptions(allowed_conditions=("POOR",), include_meta=False)
        append_checklist_section(surface, [item], context, options, 36.0)

        assert "No subtasks" in surface.texts()
        assert "No checklist items found." not in surface.texts()


class TestBuildReportPdf:
    """Test cases for PDF output."""

    def test_writes_pdf(self, temp_dir):
        record = parse_record(record_data(photo_uri=data_uri(png_bytes(40, 30))))
        output = build_report_pdf(record, temp_dir / "out" / "report.pdf", ReportOptions(generated_on=GENERATED))

        assert output.exists()
        assert output.read_bytes().startswith(b"%PDF")

    def test_writes_pdf_without_media(self, temp_dir):
        record = parse_record(record_data())
        with patch("inspectdoc.media.image_cache.httpx.Client") as client_cls:
            output = build_report_pdf(record, temp_dir / "plain.pdf", ReportOptions(include_media=False))

        client_cls.assert_not_called()
        assert output.read_bytes().startswith(b"%PDF")

    def test_bad_page_size_raises_rendering_error(self, temp_dir):
        config = ReportConfig.from_dict({"layout": {"page_size": "B7"}})
        with pytest.raises(RenderingError, match="Invalid page size"):
            build_report_pdf(parse_record(record_data()), temp_dir / "x.pdf", ReportOptions(include_media=False), config)
