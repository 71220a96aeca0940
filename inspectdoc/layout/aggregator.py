"""
Content aggregation: checklist items -> ordered row descriptors.

Walks each item's locations, tasks and entries and produces the rows of
the report table: task rows, media-only rows bucketed by inspector visit,
and merged remark rows. A photo or video URI is emitted at most once per
item.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from ..config import LayoutConfig
from ..formatting import (
    NOT_AVAILABLE,
    author_name,
    condition_text,
    entry_meta_line,
    format_enum,
    format_entry,
    item_meta_line,
)
from ..models import ChecklistItem, Entry, Location, MediaRef, MediaType, Task
from .rows import Cell, MediaBlock, MediaTile, RowDescriptor, RowKind, Segment

logger = logging.getLogger(__name__)

OTHERS_TASK_NAME = "Others"
REMARKS_PER_ROW = 4
COLUMN_COUNT = 4


def with_others_task(item: ChecklistItem) -> Tuple[Task, ...]:
    """Return the item's tasks plus a catch-all "Others" task when it has none.

    Items without any task or location are left alone so they still render
    as a "No subtasks" row.
    """
    if any(_is_others(task) for task in item.tasks):
        return item.tasks
    if not item.tasks and not item.locations:
        return item.tasks
    synthetic = Task(id=f"synthetic-{item.id}", name=OTHERS_TASK_NAME)
    return item.tasks + (synthetic,)


@dataclass(slots=True)
class TaskGroup:
    key: str
    label: str
    location: Optional[Location] = None
    tasks: List[Task] = field(default_factory=list)


def build_groups(item: ChecklistItem, tasks: Sequence[Task]) -> List[TaskGroup]:
    """Group tasks by location in first-seen order, then add task-less locations."""
    general_label = _general_label(item)
    locations = {location.id: location for location in item.locations}
    groups: List[TaskGroup] = []
    index: Dict[str, TaskGroup] = {}

    for task in tasks:
        location = locations.get(task.location_id) if task.location_id else None
        raw_name = (task.location_name or "").strip()
        others = _is_others(task)
        if task.location_id:
            key = f"loc-{task.location_id}"
        elif raw_name:
            key = f"locname-{raw_name.lower()}"
        elif others:
            key = "others"
        else:
            key = "general"

        if others and not task.location_id and not raw_name:
            label = OTHERS_TASK_NAME
        else:
            label = (location.name.strip() if location and location.name else "") or raw_name or general_label

        group = index.get(key)
        if group is None:
            group = TaskGroup(key=key, label=label, location=location)
            index[key] = group
            groups.append(group)
        group.tasks.append(task)
        if location is not None and group.location is None:
            group.location = location

    for location in item.locations:
        key = f"loc-{location.id}"
        existing = index.get(key)
        if existing is None:
            group = TaskGroup(key=key, label=location.name.strip() or general_label, location=location)
            index[key] = group
            groups.append(group)
            continue
        if existing.location is None:
            existing.location = location
        if existing.label == general_label and location.name.strip():
            existing.label = location.name.strip()

    return groups


def normalize_conditions(allowed_conditions: Optional[Iterable[str]]) -> Optional[Set[str]]:
    """Upper-cased allow-set, or ``None`` when no filter is active."""
    if not allowed_conditions:
        return None
    allowed = {value.strip().upper() for value in allowed_conditions if value and value.strip()}
    return allowed or None


def condition_allowed(condition: Optional[str], allowed: Optional[Set[str]]) -> bool:
    """A missing condition never passes an active filter."""
    if allowed is None:
        return True
    if not condition or not condition.strip():
        return False
    return condition.strip().upper() in allowed


def sorted_media(refs: Iterable[MediaRef]) -> List[MediaRef]:
    return sorted(refs, key=lambda ref: (ref.order is None, ref.order if ref.order is not None else 0))


def photo_uris(items: Iterable[ChecklistItem]) -> List[str]:
    """Every photo URI an item tree references, in traversal order."""
    uris: List[str] = []
    for item in items:
        uris.extend(ref.uri for ref in item.media if not ref.is_video)
        for entry in item.entries:
            uris.extend(ref.uri for ref in entry.photos)
        for task in item.tasks:
            uris.extend(ref.uri for ref in task.media if not ref.is_video)
            for entry in task.entries:
                uris.extend(ref.uri for ref in entry.photos)
    return list(dict.fromkeys(uris))


@dataclass(slots=True)
class _ItemState:
    item: ChecklistItem
    number: int
    seen_photos: Set[str] = field(default_factory=set)
    seen_videos: Set[str] = field(default_factory=set)
    item_labelled: bool = False

    @property
    def label(self) -> str:
        status = format_enum(self.item.status)
        suffix = f" ({status.lower()})" if status else ""
        name = self.item.name or f"Checklist Item {self.number}"
        return f"{self.number}. {name}{suffix}"

    def take_item_label(self) -> str:
        if self.item_labelled:
            return ""
        self.item_labelled = True
        return self.label


@dataclass(slots=True)
class _Bucket:
    meta: str
    untasked: List[Tuple[MediaRef, str]] = field(default_factory=list)
    tasked: List[Tuple[MediaRef, str]] = field(default_factory=list)


class ContentAggregator:
    """Turn checklist items into :class:`RowDescriptor` lists."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def build_rows(
        self,
        items: Sequence[ChecklistItem],
        image_cache,
        allowed_conditions: Optional[Iterable[str]] = None,
        entry_only: bool = False,
        include_media: bool = True,
    ) -> List[RowDescriptor]:
        """
        Build the table rows for ``items``.

        Args:
            items: Checklist items in report order
            image_cache: Object with ``resolve(uri)`` returning a raster buffer or None
            allowed_conditions: Task conditions to keep (case-insensitive); empty keeps all
            entry_only: Only show entry content (no location remarks, no task media)
            include_media: Emit photo and video tiles at all

        Returns:
            Ordered list of row descriptors
        """
        allowed = normalize_conditions(allowed_conditions)
        rows: List[RowDescriptor] = []
        for index, item in enumerate(items):
            state = _ItemState(item=item, number=index + 1)
            rows.extend(self._item_rows(state, image_cache, allowed, entry_only, include_media))
        logger.debug(f"Aggregated {len(rows)} row(s) from {len(items)} item(s)")
        return rows

    # ------------------------------------------------------------------
    # Per item
    # ------------------------------------------------------------------
    def _item_rows(
        self,
        state: _ItemState,
        image_cache,
        allowed: Optional[Set[str]],
        entry_only: bool,
        include_media: bool,
    ) -> Iterator[RowDescriptor]:
        item = state.item
        standalone = [entry for entry in item.entries if entry.include_in_report and not entry.task_id]
        groups = build_groups(item, with_others_task(item))
        group_ids = {group.location.id for group in groups if group.location is not None}

        if not entry_only:
            yield from self._summary_rows(state, image_cache, include_media)

        if not groups:
            yield RowDescriptor(
                kind=RowKind.FALLBACK,
                cells=(
                    Cell(),
                    Cell.of(state.take_item_label(), bold=True),
                    Cell.of("No subtasks"),
                    Cell.of(format_enum(item.status) or NOT_AVAILABLE),
                ),
                grouping_key=f"{item.id}:none",
            )

        for group_index, group in enumerate(groups):
            location_number = f"{state.number}.{group_index + 1}"
            grouping_key = f"{item.id}:{group.key}"
            location_text = self._location_text(group)
            group_entries: List[Entry] = []
            if group.location is not None:
                group_entries.extend(e for e in standalone if e.location_id == group.location.id)

            task_labels: Dict[str, str] = {}
            for task_index, task in enumerate(group.tasks):
                task_label = f"{location_number}.{task_index + 1} {task.name or 'Subtask'}"
                if not condition_allowed(task.condition, allowed):
                    logger.debug(f"Skipping task {task_label!r}: condition {task.condition!r} filtered out")
                    continue
                task_labels[task.id] = task_label
                group_entries.extend(e for e in task.entries if e.include_in_report)

                media = None
                if include_media and not entry_only and task.media:
                    media = self._media_block(
                        None,
                        [(ref, _with_caption(task_label, ref.caption)) for ref in sorted_media(task.media)],
                        state,
                        image_cache,
                    )

                yield RowDescriptor(
                    kind=RowKind.TASK,
                    cells=(
                        Cell.of(location_text, bold=True),
                        Cell.of(state.take_item_label(), bold=True),
                        Cell.of(task_label),
                        Cell.of(self._condition_cell(task)),
                    ),
                    media=media,
                    grouping_key=grouping_key,
                )
                location_text = ""

            location_remark = None
            if not entry_only and group.location is not None and group.location.remarks:
                location_remark = group.location.remarks.strip() or None

            yield from self._entry_rows(
                group_entries,
                group.label,
                task_labels,
                location_remark,
                grouping_key,
                state,
                image_cache,
                allowed,
                entry_only,
                include_media,
            )

        general_entries = [e for e in standalone if not e.location_id or e.location_id not in group_ids]
        if general_entries:
            yield from self._entry_rows(
                general_entries,
                _general_label(item),
                {},
                None,
                f"{item.id}:general",
                state,
                image_cache,
                allowed,
                entry_only,
                include_media,
            )

    def _summary_rows(self, state: _ItemState, image_cache, include_media: bool) -> Iterator[RowDescriptor]:
        """Item-level remarks and media, ahead of the location groups."""
        item = state.item
        grouping_key = f"{item.id}:summary"
        meta = item_meta_line(item)
        remarks = item.remarks.strip() if item.remarks else ""
        if remarks:
            text = "\n".join(line for line in (meta, f"Summary - {remarks}") if line)
            cells = [Cell(segments=(Segment(text=text),))]
            cells.extend(Cell() for _ in range(COLUMN_COUNT - 1))
            yield RowDescriptor(kind=RowKind.REMARK, cells=tuple(cells), grouping_key=grouping_key, merge=True)

        if not include_media or not item.media:
            return
        label = f"{item.name} - Summary" if item.name else "Summary"
        block = self._media_block(
            None if remarks else meta,
            [(ref, _with_caption(label, ref.caption)) for ref in sorted_media(item.media)],
            state,
            image_cache,
        )
        if block is not None:
            yield RowDescriptor(kind=RowKind.MEDIA, media=block, grouping_key=grouping_key)

    def _entry_rows(
        self,
        entries: Sequence[Entry],
        group_label: str,
        task_labels: Dict[str, str],
        location_remark: Optional[str],
        grouping_key: str,
        state: _ItemState,
        image_cache,
        allowed: Optional[Set[str]],
        entry_only: bool,
        include_media: bool,
    ) -> Iterator[RowDescriptor]:
        if include_media:
            for bucket in self._buckets(entries, group_label, task_labels):
                for captioned in (bucket.untasked, bucket.tasked):
                    if not captioned:
                        continue
                    block = self._media_block(bucket.meta, captioned, state, image_cache)
                    if block is None or not block.tile_count:
                        continue
                    yield RowDescriptor(kind=RowKind.MEDIA, media=block, grouping_key=grouping_key)

        remarks: List[str] = []
        if location_remark:
            remarks.append(location_remark)
        for entry in entries:
            if entry_only and allowed is not None and not condition_allowed(entry.condition, allowed):
                continue
            if not (entry.remarks or entry.cause or entry.resolution):
                continue
            remarks.append(format_entry(entry))

        for start in range(0, len(remarks), REMARKS_PER_ROW):
            chunk = remarks[start:start + REMARKS_PER_ROW]
            cells = [Cell(segments=(Segment(text=text),)) for text in chunk]
            cells.extend(Cell() for _ in range(COLUMN_COUNT - len(cells)))
            yield RowDescriptor(kind=RowKind.REMARK, cells=tuple(cells), grouping_key=grouping_key, merge=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _buckets(self, entries: Sequence[Entry], group_label: str, task_labels: Dict[str, str]) -> List[_Bucket]:
        buckets: Dict[Tuple[Optional[date], str], _Bucket] = {}
        for entry in entries:
            if not entry.media:
                continue
            key = (_day(entry.created_on), author_name(entry.author))
            bucket = buckets.get(key)
            if bucket is None:
                bucket = _Bucket(meta=entry_meta_line(entry))
                buckets[key] = bucket
            task_label = task_labels.get(entry.task_id) if entry.task_id else None
            for ref in sorted_media(entry.media):
                if task_label:
                    bucket.tasked.append((ref, _with_caption(task_label, ref.caption)))
                else:
                    bucket.untasked.append((ref, _with_caption(group_label, ref.caption)))
        return list(buckets.values())

    def _media_block(
        self,
        text: Optional[str],
        captioned: Sequence[Tuple[MediaRef, str]],
        state: _ItemState,
        image_cache,
    ) -> Optional[MediaBlock]:
        photos: List[MediaTile] = []
        videos: List[MediaTile] = []
        for ref, caption in captioned:
            if ref.media_type is MediaType.VIDEO:
                if ref.uri in state.seen_videos:
                    continue
                state.seen_videos.add(ref.uri)
                videos.append(MediaTile(kind=MediaType.VIDEO, uri=ref.uri, caption=caption))
            else:
                if ref.uri in state.seen_photos:
                    continue
                state.seen_photos.add(ref.uri)
                photos.append(
                    MediaTile(kind=MediaType.PHOTO, uri=ref.uri, buffer=image_cache.resolve(ref.uri), caption=caption)
                )

        limit = self.config.max_video_tiles
        if len(videos) > limit:
            hidden = len(videos) - limit
            videos = videos[:limit]
            overflow = f"+{hidden} more video link{'s' if hidden != 1 else ''}"
            text = f"{text}\n{overflow}" if text else overflow

        if not photos and not videos:
            return None
        return MediaBlock(text=text, photos=tuple(photos), videos=tuple(videos))

    def _location_text(self, group: TaskGroup) -> str:
        if group.location is not None and group.location.condition:
            return f"{group.label}\nCondition: {format_enum(group.location.condition)}"
        return group.label

    def _condition_cell(self, task: Task) -> str:
        eligible = [e for e in task.entries if e.include_in_report and (e.cause or e.resolution)]
        newest = sorted(eligible, key=lambda e: (e.created_on is not None, e.created_on or datetime.min), reverse=True)
        if newest:
            return condition_text(task.condition, newest[0].cause, newest[0].resolution)
        return condition_text(task.condition, task.cause, task.resolution)


def _is_others(task: Task) -> bool:
    return (task.name or "").strip().lower() == OTHERS_TASK_NAME.lower()


def _general_label(item: ChecklistItem) -> str:
    return f"{item.name} - General" if item.name else "General"


def _with_caption(label: str, caption: Optional[str]) -> str:
    if caption and caption.strip():
        return f"{label} - {caption.strip()}"
    return label


def _day(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None
