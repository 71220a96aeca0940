"""Row descriptors produced by the aggregator and consumed by the paginator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..media.raster import RasterBuffer
from ..models import MediaType


class RowKind(str, Enum):
    TASK = "task"
    REMARK = "remark"
    MEDIA = "media"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class MediaTile:
    kind: MediaType
    uri: str
    buffer: Optional[RasterBuffer] = None
    caption: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Segment:
    """Optional text followed by photo and video grids."""
    text: Optional[str] = None
    photos: Tuple[MediaTile, ...] = ()
    videos: Tuple[MediaTile, ...] = ()

    @property
    def has_media(self) -> bool:
        return bool(self.photos or self.videos)

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())


@dataclass(frozen=True, slots=True)
class Cell:
    segments: Tuple[Segment, ...] = ()
    bold: bool = False

    @classmethod
    def of(cls, text: Optional[str], bold: bool = False) -> "Cell":
        if not text:
            return cls(bold=bold)
        return cls(segments=(Segment(text=text),), bold=bold)

    @property
    def text(self) -> str:
        return "\n".join(s.text for s in self.segments if s.text)


@dataclass(frozen=True, slots=True)
class MediaBlock:
    """Full-width block that the paginator may split between grid rows."""
    text: Optional[str] = None
    photos: Tuple[MediaTile, ...] = ()
    videos: Tuple[MediaTile, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.photos or self.videos or (self.text and self.text.strip()))

    @property
    def tile_count(self) -> int:
        return len(self.photos) + len(self.videos)


@dataclass(frozen=True, slots=True)
class RowDescriptor:
    kind: RowKind
    cells: Tuple[Cell, ...] = ()
    media: Optional[MediaBlock] = None
    grouping_key: Optional[str] = None
    merge: bool = False

    @property
    def is_media_only(self) -> bool:
        return not self.cells
