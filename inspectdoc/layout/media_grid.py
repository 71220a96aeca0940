"""Tile grid planning for photo and video blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..engine.text_metrics import TextMetrics


@dataclass(slots=True)
class GridPlan:
    """Geometry of a media grid: fixed tile width, per-row heights."""
    tile_width: float
    row_heights: List[float] = field(default_factory=list)
    total_height: float = 0.0
    columns: int = 4
    gutter: float = 8.0

    @property
    def row_count(self) -> int:
        return len(self.row_heights)

    def span_height(self, start: int, count: int) -> float:
        """Height of ``count`` rows starting at row ``start``, inner gutters included."""
        rows = self.row_heights[start:start + count]
        if not rows:
            return 0.0
        return sum(rows) + self.gutter * (len(rows) - 1)

    def rows_fitting(self, start: int, available_height: float) -> int:
        """Number of whole rows from ``start`` that fit into ``available_height``."""
        used = 0.0
        fitted = 0
        for height in self.row_heights[start:]:
            needed = height if fitted == 0 else height + self.gutter
            if used + needed > available_height:
                break
            used += needed
            fitted += 1
        return fitted


def plan_grid(
    count: int,
    captions: Optional[Sequence[Optional[str]]],
    available_width: float,
    tile_height: float,
    *,
    columns: int = 4,
    gutter: float = 8.0,
    caption_gap: float = 4.0,
    caption_font_size: float = 8.0,
    font_name: str = "Helvetica",
    metrics: Optional[TextMetrics] = None,
) -> GridPlan:
    """
    Lay ``count`` tiles out in rows of ``columns``.

    Each row is as tall as its tallest tile, where a captioned tile adds the
    caption gap plus the wrapped caption height at the tile width.

    Args:
        count: Number of tiles
        captions: Optional caption per tile (shorter lists mean no caption)
        available_width: Width of the block in points
        tile_height: Height of the image area of a tile

    Returns:
        GridPlan; ``count == 0`` gives no rows and a zero total height
    """
    columns = max(1, int(columns))
    tile_width = (available_width - gutter * (columns - 1)) / columns
    if count <= 0:
        return GridPlan(tile_width=tile_width, row_heights=[], total_height=0.0, columns=columns, gutter=gutter)

    metrics = metrics or TextMetrics()
    captions = list(captions or [])
    row_heights: List[float] = []
    for row_start in range(0, count, columns):
        row_height = tile_height
        for index in range(row_start, min(row_start + columns, count)):
            caption = captions[index] if index < len(captions) else None
            if not caption:
                continue
            caption_height = metrics.height_of_string(caption, tile_width, font_name, caption_font_size)
            if caption_height > 0:
                row_height = max(row_height, tile_height + caption_gap + caption_height)
        row_heights.append(row_height)

    total_height = sum(row_heights) + gutter * (len(row_heights) - 1)
    return GridPlan(
        tile_width=tile_width,
        row_heights=row_heights,
        total_height=total_height,
        columns=columns,
        gutter=gutter,
    )
