"""Build an :class:`InspectionRecord` from JSON data."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import RecordError
from .models import (
    Author,
    ChecklistItem,
    Entry,
    InspectionRecord,
    Location,
    MediaRef,
    MediaType,
    Task,
)

logger = logging.getLogger(__name__)


def load_record(path: str | Path) -> InspectionRecord:
    """Read a record JSON file."""
    record_path = Path(path)
    try:
        data = json.loads(record_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise RecordError("Record file not found", str(record_path)) from exc
    except json.JSONDecodeError as exc:
        raise RecordError("Record file is not valid JSON", str(exc)) from exc
    return parse_record(data)


def parse_record(data: Any) -> InspectionRecord:
    mapping = _require_mapping(data, "record")
    items = tuple(
        _parse_item(item, index)
        for index, item in enumerate(_list(mapping, "items", "record"))
    )
    record = InspectionRecord(
        id=_require_id(mapping, "record"),
        title=_optional_str(mapping.get("title")),
        contract_type=_optional_str(mapping.get("contract_type")),
        status=_optional_str(mapping.get("status")),
        customer_name=_optional_str(mapping.get("customer_name")),
        address=_optional_str(mapping.get("address")),
        postal_code=_optional_str(mapping.get("postal_code")),
        scheduled_start=_parse_datetime(mapping.get("scheduled_start"), "scheduled_start"),
        scheduled_end=_parse_datetime(mapping.get("scheduled_end"), "scheduled_end"),
        actual_start=_parse_datetime(mapping.get("actual_start"), "actual_start"),
        actual_end=_parse_datetime(mapping.get("actual_end"), "actual_end"),
        inspectors=tuple(str(name) for name in _list(mapping, "inspectors", "record")),
        items=items,
    )
    logger.debug(f"Loaded record {record.id} with {len(items)} item(s)")
    return record


def _parse_item(data: Any, index: int) -> ChecklistItem:
    where = f"items[{index}]"
    mapping = _require_mapping(data, where)
    return ChecklistItem(
        id=_require_id(mapping, where),
        name=str(mapping.get("name") or ""),
        status=_optional_str(mapping.get("status")),
        locations=tuple(
            _parse_location(location, f"{where}.locations[{i}]")
            for i, location in enumerate(_list(mapping, "locations", where))
        ),
        tasks=tuple(
            _parse_task(task, f"{where}.tasks[{i}]")
            for i, task in enumerate(_list(mapping, "tasks", where))
        ),
        entries=tuple(
            _parse_entry(entry, f"{where}.entries[{i}]")
            for i, entry in enumerate(_list(mapping, "entries", where))
        ),
        scope_id=_optional_str(mapping.get("scope_id")),
        remarks=_optional_str(mapping.get("remarks")),
        media=_parse_media_list(_list(mapping, "media", where), where),
        entered_by=_parse_author(mapping.get("entered_by")),
        entered_on=_parse_datetime(mapping.get("entered_on"), f"{where}.entered_on"),
    )


def _parse_location(data: Any, where: str) -> Location:
    mapping = _require_mapping(data, where)
    return Location(
        id=_require_id(mapping, where),
        name=str(mapping.get("name") or ""),
        remarks=_optional_str(mapping.get("remarks")),
        condition=_optional_str(mapping.get("condition")),
    )


def _parse_task(data: Any, where: str) -> Task:
    mapping = _require_mapping(data, where)
    task_id = _require_id(mapping, where)
    return Task(
        id=task_id,
        name=str(mapping.get("name") or ""),
        condition=_optional_str(mapping.get("condition")),
        location_id=_optional_str(mapping.get("location_id")),
        location_name=_optional_str(mapping.get("location_name")),
        entries=tuple(
            _parse_entry(entry, f"{where}.entries[{i}]", default_task_id=task_id)
            for i, entry in enumerate(_list(mapping, "entries", where))
        ),
        media=_parse_media_list(_list(mapping, "media", where), where),
        cause=_optional_str(mapping.get("cause")),
        resolution=_optional_str(mapping.get("resolution")),
    )


def _parse_entry(data: Any, where: str, default_task_id: Optional[str] = None) -> Entry:
    mapping = _require_mapping(data, where)
    return Entry(
        id=_require_id(mapping, where),
        author=_parse_author(mapping.get("author")),
        remarks=_optional_str(mapping.get("remarks")),
        condition=_optional_str(mapping.get("condition")),
        cause=_optional_str(mapping.get("cause")),
        resolution=_optional_str(mapping.get("resolution")),
        created_on=_parse_datetime(mapping.get("created_on"), f"{where}.created_on"),
        media=_parse_media_list(_list(mapping, "media", where), where),
        include_in_report=bool(mapping.get("include_in_report", False)),
        task_id=_optional_str(mapping.get("task_id")) or default_task_id,
        location_id=_optional_str(mapping.get("location_id")),
    )


def _parse_author(data: Any) -> Optional[Author]:
    if data is None:
        return None
    if isinstance(data, str):
        return Author(name=data)
    if isinstance(data, dict):
        return Author(name=str(data.get("name") or ""), role=str(data.get("role") or "inspector"))
    raise RecordError("Author must be a name or an object", repr(data))


def _parse_media_list(values: List[Any], where: str) -> Tuple[MediaRef, ...]:
    refs: List[MediaRef] = []
    for index, value in enumerate(values):
        mapping = _require_mapping(value, f"{where}.media[{index}]")
        uri = mapping.get("uri") or mapping.get("url")
        if not uri:
            logger.warning(f"Skipping media without uri at {where}.media[{index}]")
            continue
        kind = str(mapping.get("type") or "PHOTO").upper()
        try:
            media_type = MediaType(kind)
        except ValueError as exc:
            raise RecordError("Unknown media type", f"{where}.media[{index}]: {kind}") from exc
        order = mapping.get("order")
        if order is not None:
            try:
                order = int(order)
            except (TypeError, ValueError) as exc:
                raise RecordError("Invalid media order", f"{where}.media[{index}]: {order!r}") from exc
        refs.append(
            MediaRef(
                uri=str(uri),
                media_type=media_type,
                caption=_optional_str(mapping.get("caption")),
                order=order,
            )
        )
    return tuple(refs)


def _parse_datetime(value: Any, where: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _naive_utc(datetime.fromisoformat(text))
    except ValueError as exc:
        raise RecordError("Invalid datetime", f"{where}: {value}") from exc


def _naive_utc(value: datetime) -> datetime:
    # Offset-aware values are converted to UTC so they compare with naive ones.
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _require_mapping(data: Any, where: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise RecordError("Expected an object", where)
    return data


def _require_id(mapping: Dict[str, Any], where: str) -> str:
    value = mapping.get("id")
    if value in (None, ""):
        raise RecordError("Missing id", where)
    return str(value)


def _list(mapping: Dict[str, Any], key: str, where: str) -> List[Any]:
    value = mapping.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise RecordError(f"'{key}' must be a list", where)
    return value


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None
