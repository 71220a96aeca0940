"""
Tests for record loading.
"""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from inspectdoc.exceptions import RecordError
from inspectdoc.loader import load_record, parse_record
from inspectdoc.models import MediaType

from .factories import record_data


class TestParseRecord:
    """Test cases for parse_record."""

    def test_record_fields(self):
        record = parse_record(record_data())

        assert record.id == "wo-1001"
        assert record.contract_type == "HANDOVER"
        assert record.inspectors == ("Alice", "Bob")
        assert record.scheduled_start == datetime(2024, 5, 2, 9, 0)
        assert record.scheduled_start.tzinfo is None
        assert record.scheduled_end == datetime(2024, 5, 2, 12, 0)
        assert record.actual_start is None
        assert [item.id for item in record.items] == ["item-1", "item-2"]

    def test_item_tree(self):
        item = parse_record(record_data()).items[0]

        assert item.locations[0].remarks == "Fresh paint"
        assert [task.id for task in item.tasks] == ["t-window", "t-door"]
        assert item.tasks[0].entries == ()
        assert item.entries[0].author.name == "Bob"
        assert item.entries[0].author.role == "inspector"
        assert item.entries[0].task_id is None

    def test_task_entries_default_to_their_task(self):
        entry = parse_record(record_data()).items[0].tasks[1].entries[0]

        assert entry.task_id == "t-door"
        assert entry.include_in_report is True
        assert entry.created_on == datetime(2024, 5, 2, 10, 30)

    def test_media_references(self):
        media = parse_record(record_data()).items[0].tasks[1].entries[0].media

        assert media[0].uri == "https://cdn.example.com/door-0.jpg"
        assert media[0].media_type is MediaType.PHOTO
        assert media[0].caption == "Hinge"
        assert media[0].order == 1
        assert media[1].is_video
        assert media[1].order is None

    def test_media_without_uri_is_skipped(self, caplog):
        data = record_data()
        data["items"][0]["entries"][0]["media"] = [{"caption": "nothing here"}]
        with caplog.at_level(logging.WARNING):
            record = parse_record(data)

        assert record.items[0].entries[0].media == ()
        assert "Skipping media without uri" in caplog.text

    def test_offset_timestamps_become_naive_utc(self):
        data = record_data()
        data["actual_start"] = "2024-05-02T18:30:00+08:00"
        data["actual_end"] = datetime(2024, 5, 2, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        record = parse_record(data)

        assert record.actual_start == datetime(2024, 5, 2, 10, 30)
        assert record.actual_end == datetime(2024, 5, 2, 12, 0)
        assert record.actual_start < record.scheduled_end

    @pytest.mark.parametrize("order", ["first", "1.5x", [1]])
    def test_invalid_media_order_raises(self, order):
        data = record_data()
        data["items"][0]["tasks"][1]["entries"][0]["media"][0]["order"] = order
        with pytest.raises(RecordError, match="Invalid media order"):
            parse_record(data)

    def test_numeric_string_order_is_accepted(self):
        data = record_data()
        data["items"][0]["tasks"][1]["entries"][0]["media"][0]["order"] = "3"
        assert parse_record(data).items[0].tasks[1].entries[0].media[0].order == 3

    def test_item_summary_fields(self):
        data = record_data()
        data["items"][0].update(
            remarks="Freshly painted",
            media=[{"uri": "https://cdn.example.com/room.jpg"}, {"uri": "https://cdn.example.com/room.mp4", "type": "video"}],
            entered_by={"name": "Dana", "role": "admin"},
            entered_on="2024-05-01T09:00:00",
        )
        item = parse_record(data).items[0]

        assert item.remarks == "Freshly painted"
        assert [ref.media_type for ref in item.media] == [MediaType.PHOTO, MediaType.VIDEO]
        assert item.entered_by.role == "admin"
        assert item.entered_on == datetime(2024, 5, 1, 9, 0)
        assert parse_record(record_data()).items[0].media == ()

    def test_blank_strings_become_none(self):
        data = record_data()
        data["customer_name"] = "   "
        assert parse_record(data).customer_name is None

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda data: data.pop("id"),
            lambda data: data.__setitem__("items", {"id": "x"}),
            lambda data: data["items"][0]["tasks"][0].pop("id"),
            lambda data: data.__setitem__("scheduled_start", "2nd of May"),
            lambda data: data["items"][0]["entries"][0].__setitem__("author", 42),
            lambda data: data["items"][0]["entries"][0].__setitem__("media", [{"uri": "a.ogg", "type": "AUDIO"}]),
            lambda data: data["items"].append("not an object"),
        ],
    )
    def test_invalid_records_raise(self, mutate):
        data = record_data()
        mutate(data)
        with pytest.raises(RecordError):
            parse_record(data)

    def test_top_level_must_be_object(self):
        with pytest.raises(RecordError, match="Expected an object"):
            parse_record([])


class TestLoadRecord:
    """Test cases for load_record."""

    def test_loads_file(self, record_file):
        assert load_record(record_file).id == "wo-1001"

    def test_missing_file(self, temp_dir):
        with pytest.raises(RecordError) as exc_info:
            load_record(temp_dir / "missing.json")
        assert exc_info.value.message == "Record file not found"

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RecordError, match="not valid JSON"):
            load_record(path)

    def test_round_trip_through_json(self, temp_dir):
        path = temp_dir / "record.json"
        path.write_text(json.dumps(record_data()), encoding="utf-8")
        assert load_record(str(path)) == parse_record(record_data())
