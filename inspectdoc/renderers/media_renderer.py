"""Rendering routines for photo and video tiles."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..config import GridConfig, LayoutConfig
from ..layout.media_grid import GridPlan, plan_grid
from ..layout.rows import MediaTile
from ..surface.base import DrawingSurface

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "Photo unavailable"


class MediaRenderer:
    """Draw tile grids using the surface's drawing primitives."""

    def __init__(self, surface: DrawingSurface, config: LayoutConfig) -> None:
        self.surface = surface
        self.config = config

    def plan(self, tiles: Sequence[MediaTile], width: float, grid: GridConfig) -> GridPlan:
        return plan_grid(
            len(tiles),
            [tile.caption for tile in tiles],
            width,
            grid.tile_height,
            columns=grid.columns,
            gutter=grid.gutter,
            caption_gap=grid.caption_gap,
            caption_font_size=self.config.caption_font_size,
            font_name=self.config.font_name,
            metrics=self.surface.metrics,
        )

    def draw_rows(
        self,
        tiles: Sequence[MediaTile],
        plan: GridPlan,
        grid: GridConfig,
        x: float,
        y: float,
        start_row: int = 0,
        row_count: Optional[int] = None,
        *,
        video: bool = False,
    ) -> float:
        """Draw whole grid rows ``start_row`` .. ``start_row + row_count``; return the height used."""
        if row_count is None:
            row_count = plan.row_count - start_row
        cursor = y
        for row in range(start_row, min(start_row + row_count, plan.row_count)):
            if row > start_row:
                cursor += plan.gutter
            first = row * plan.columns
            for column, tile in enumerate(tiles[first:first + plan.columns]):
                tile_x = x + column * (plan.tile_width + plan.gutter)
                if video:
                    self.draw_video(tile, first + column + 1, tile_x, cursor, plan.tile_width, grid.tile_height)
                else:
                    self.draw_photo(tile, tile_x, cursor, plan.tile_width, grid.tile_height)
                self._draw_caption(tile.caption, tile_x, cursor + grid.tile_height + grid.caption_gap, plan.tile_width)
            cursor += plan.row_heights[row]
        return cursor - y

    def draw_photo(self, tile: MediaTile, x: float, y: float, width: float, height: float) -> None:
        if tile.buffer is None:
            self.draw_placeholder(x, y, width, height)
            return
        try:
            self.surface.image(tile.buffer, x, y, fit=(width, height), align="center", valign="center")
        except Exception as exc:
            logger.error(f"Failed to draw photo {tile.uri[:80]}: {exc}")
            self.draw_placeholder(x, y, width, height)

    def draw_placeholder(self, x: float, y: float, width: float, height: float) -> None:
        color = self.config.placeholder_color
        self.surface.rect(x, y, width, height, stroke=color, line_width=1.0)
        font_size = self.config.caption_font_size
        text_y = y + (height - self.surface.metrics.line_height(font_size)) / 2.0
        self.surface.text(
            PLACEHOLDER_TEXT,
            x + 4,
            text_y,
            width=max(width - 8, 1.0),
            align="center",
            font_name=self.config.font_name,
            font_size=font_size,
            color=color,
        )

    def draw_video(self, tile: MediaTile, number: int, x: float, y: float, width: float, height: float) -> None:
        self.surface.rect(x, y, width, height, fill=self.config.video_fill, radius=8.0)
        cx = x + width / 2.0
        cy = y + height / 2.0 - 6.0
        self.surface.circle(cx, cy, 12.0, fill=self.config.video_icon_fill)
        self.surface.polygon(
            [(cx - 4.0, cy - 6.0), (cx - 4.0, cy + 6.0), (cx + 6.0, cy)],
            fill="#ffffff",
        )
        self.surface.text(
            f"Video {number}",
            x + 4,
            cy + 16.0,
            width=max(width - 8, 1.0),
            align="center",
            font_name=self.config.font_name,
            font_size=self.config.caption_font_size,
            color="#ffffff",
        )

    def _draw_caption(self, caption: Optional[str], x: float, y: float, width: float) -> None:
        if not caption:
            return
        self.surface.text(
            caption,
            x,
            y,
            width=width,
            font_name=self.config.font_name,
            font_size=self.config.caption_font_size,
            color=self.config.text_color,
        )
