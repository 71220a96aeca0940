"""Inspection record data model.

Read-only snapshot of one work order: checklist items with their
locations, tasks, entries and media references.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class MediaType(str, Enum):
    PHOTO = "PHOTO"
    VIDEO = "VIDEO"


@dataclass(frozen=True, slots=True)
class Author:
    name: str
    role: str = "inspector"


@dataclass(frozen=True, slots=True)
class MediaRef:
    """Reference to a photo or video asset."""
    uri: str
    media_type: MediaType = MediaType.PHOTO
    caption: Optional[str] = None
    order: Optional[int] = None

    @property
    def is_video(self) -> bool:
        return self.media_type is MediaType.VIDEO


@dataclass(frozen=True, slots=True)
class Entry:
    """One contribution (remark plus media) recorded by an inspector."""
    id: str
    author: Optional[Author] = None
    remarks: Optional[str] = None
    condition: Optional[str] = None
    cause: Optional[str] = None
    resolution: Optional[str] = None
    created_on: Optional[datetime] = None
    media: Tuple[MediaRef, ...] = ()
    include_in_report: bool = False
    task_id: Optional[str] = None
    location_id: Optional[str] = None

    @property
    def photos(self) -> Tuple[MediaRef, ...]:
        return tuple(ref for ref in self.media if not ref.is_video)

    @property
    def videos(self) -> Tuple[MediaRef, ...]:
        return tuple(ref for ref in self.media if ref.is_video)


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    name: str
    condition: Optional[str] = None
    location_id: Optional[str] = None
    location_name: Optional[str] = None
    entries: Tuple[Entry, ...] = ()
    media: Tuple[MediaRef, ...] = ()
    cause: Optional[str] = None
    resolution: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Location:
    id: str
    name: str
    remarks: Optional[str] = None
    condition: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ChecklistItem:
    """An inspected unit such as a room."""
    id: str
    name: str
    status: Optional[str] = None
    locations: Tuple[Location, ...] = ()
    tasks: Tuple[Task, ...] = ()
    entries: Tuple[Entry, ...] = ()
    scope_id: Optional[str] = None
    remarks: Optional[str] = None
    media: Tuple[MediaRef, ...] = ()
    entered_by: Optional[Author] = None
    entered_on: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class InspectionRecord:
    """Envelope of one report: work order details plus checklist items."""
    id: str
    title: Optional[str] = None
    contract_type: Optional[str] = None
    status: Optional[str] = None
    customer_name: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None
    inspectors: Tuple[str, ...] = ()
    items: Tuple[ChecklistItem, ...] = ()
