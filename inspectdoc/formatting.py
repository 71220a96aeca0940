"""Text formatting for report labels and entry lines."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from .models import Author, ChecklistItem, Entry

UNKNOWN_AUTHOR = "Team member"
NOT_AVAILABLE = "N/A"


def format_enum(value: Optional[str]) -> str:
    """``NOT_APPLICABLE`` -> ``Not Applicable``."""
    if not value:
        return ""
    words = str(value).replace("-", "_").split("_")
    return " ".join(word.capitalize() for word in words if word)


def format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return NOT_AVAILABLE
    hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    return f"{value.day} {value.strftime('%b')} {value.year}, {hour}:{value.minute:02d} {suffix}"


def format_schedule_range(start: Optional[datetime], end: Optional[datetime]) -> str:
    if start is None and end is None:
        return NOT_AVAILABLE
    return f"{format_datetime(start)} - {format_datetime(end)}"


def author_name(author: Optional[Author]) -> str:
    if author is None or not author.name.strip():
        return UNKNOWN_AUTHOR
    return author.name.strip()


def _author_label(author: Optional[Author]) -> str:
    role = "Admin" if author is not None and author.role == "admin" else "Inspector"
    return f"{role}: {author_name(author)}"


def entry_meta_line(entry: Entry) -> str:
    """Return the "Inspector: X • Recorded: date" line of an entry."""
    return f"{_author_label(entry.author)} • Recorded: {format_datetime(entry.created_on)}"


def item_meta_line(item: ChecklistItem) -> Optional[str]:
    """Who summarised the item, or ``None`` when nobody is named."""
    if author_name(item.entered_by) == UNKNOWN_AUTHOR:
        return None
    parts = [_author_label(item.entered_by)]
    if item.entered_on is not None:
        parts.append(f"Recorded: {format_datetime(item.entered_on)}")
    return " • ".join(parts)


def entry_detail_lines(entry: Entry) -> List[str]:
    lines: List[str] = []
    if entry.remarks and entry.remarks.strip():
        lines.append(f"Remarks: {entry.remarks.strip()}")
    if entry.cause and entry.cause.strip():
        lines.append(f"Cause: {entry.cause.strip()}")
    if entry.resolution and entry.resolution.strip():
        lines.append(f"Resolution: {entry.resolution.strip()}")
    return lines


def format_entry(entry: Entry) -> str:
    return "\n".join([entry_meta_line(entry), *entry_detail_lines(entry)])


def condition_text(condition: Optional[str], cause: Optional[str] = None, resolution: Optional[str] = None) -> str:
    lines = [format_enum(condition) or NOT_AVAILABLE]
    if cause and cause.strip():
        lines.append(f"Cause: {cause.strip()}")
    if resolution and resolution.strip():
        lines.append(f"Resolution: {resolution.strip()}")
    return "\n".join(lines)
