"""Rendering routines for report table rows and full-width media blocks."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ..config import LayoutConfig
from ..layout.media_grid import GridPlan
from ..layout.rows import Cell, MediaBlock, MediaTile, Segment
from ..surface.base import DrawingSurface
from .media_renderer import MediaRenderer

logger = logging.getLogger(__name__)


class TableRenderer:
    """Measure and draw fixed-column table rows."""

    def __init__(self, surface: DrawingSurface, config: Optional[LayoutConfig] = None) -> None:
        self.surface = surface
        self.config = config or LayoutConfig()
        self.media = MediaRenderer(surface, self.config)
        self.left = self.config.margin

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def table_width(self) -> float:
        return self.config.table_width

    def column_x(self, index: int) -> float:
        return self.left + sum(self.config.column_widths[:index])

    def inner_width(self, index: int) -> float:
        return max(self.config.column_widths[index] - 2 * self.config.cell_padding, 1.0)

    def header_cells(self) -> List[Cell]:
        return [Cell.of(label, bold=True) for label in self.config.header_labels]

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------
    def text_height(self, text: Optional[str], width: float, bold: bool = False) -> float:
        if not text:
            return 0.0
        font = self.config.bold_font_name if bold else self.config.font_name
        return self.surface.height_of_string(text, width, font, self.config.body_font_size)

    def segment_height(self, segment: Segment, width: float, bold: bool = False) -> float:
        text_height = self.text_height(segment.text, width, bold)
        media_height = self._media_height(segment.photos, segment.videos, width)
        if text_height and media_height:
            return text_height + self.config.media_gutter + media_height
        return text_height + media_height

    def cell_height(self, cell: Cell, width: float) -> float:
        heights = [self.segment_height(segment, width, cell.bold) for segment in cell.segments]
        heights = [height for height in heights if height > 0]
        if not heights:
            return 0.0
        return sum(heights) + self.config.segment_spacing * (len(heights) - 1)

    def row_height(self, cells: Sequence[Cell]) -> float:
        """Height a row needs: tallest cell plus padding, never below the minimum."""
        content = 0.0
        for index, cell in enumerate(cells[: len(self.config.column_widths)]):
            content = max(content, self.cell_height(cell, self.inner_width(index)))
        return max(content + 2 * self.config.cell_padding, self.config.min_row_height)

    def _media_height(self, photos: Sequence[MediaTile], videos: Sequence[MediaTile], width: float) -> float:
        photo_plan = self.media.plan(photos, width, self.config.photo_grid)
        video_plan = self.media.plan(videos, width, self.config.video_grid)
        height = photo_plan.total_height + video_plan.total_height
        if photo_plan.total_height and video_plan.total_height:
            height += self.config.media_gutter
        return height

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw_header(self, y: float) -> float:
        return self.draw_row(y, self.header_cells(), header=True)

    def draw_row(
        self,
        y: float,
        cells: Sequence[Cell],
        header: bool = False,
        background: Optional[str] = None,
        merge_columns: bool = False,
    ) -> float:
        """Draw one row with its top edge at ``y``; return the height consumed."""
        height = self.row_height(cells)
        border = self.config.border_color
        line_width = self.config.border_width

        if merge_columns:
            self.surface.rect(
                self.left,
                y,
                self.table_width,
                height,
                stroke=border,
                fill=background,
                line_width=line_width,
                fill_opacity=self.config.band_opacity,
            )
        else:
            for index, width in enumerate(self.config.column_widths):
                if header:
                    self.surface.rect(
                        self.column_x(index), y, width, height,
                        stroke=border, fill=self.config.header_fill, line_width=line_width,
                    )
                else:
                    self.surface.rect(
                        self.column_x(index), y, width, height,
                        stroke=border, fill=background, line_width=line_width,
                        fill_opacity=self.config.band_opacity,
                    )

        for index, cell in enumerate(cells[: len(self.config.column_widths)]):
            self._draw_cell(cell, index, y + self.config.cell_padding, bold=header or cell.bold)

        return height

    def _draw_cell(self, cell: Cell, index: int, y: float, bold: bool) -> None:
        x = self.column_x(index) + self.config.cell_padding
        width = self.inner_width(index)
        cursor = y
        drawn = 0
        for segment in cell.segments:
            if self.segment_height(segment, width, bold) <= 0:
                continue
            if drawn:
                cursor += self.config.segment_spacing
            cursor += self._draw_segment(segment, x, cursor, width, bold)
            drawn += 1

    def _draw_segment(self, segment: Segment, x: float, y: float, width: float, bold: bool) -> float:
        cursor = y
        if segment.has_text:
            cursor += self.surface.text(
                segment.text,
                x,
                cursor,
                width=width,
                font_name=self.config.bold_font_name if bold else self.config.font_name,
                font_size=self.config.body_font_size,
                color=self.config.text_color,
            )
            if segment.has_media:
                cursor += self.config.media_gutter
        if segment.photos:
            plan = self.media.plan(segment.photos, width, self.config.photo_grid)
            cursor += self.media.draw_rows(segment.photos, plan, self.config.photo_grid, x, cursor)
            if segment.videos:
                cursor += self.config.media_gutter
        if segment.videos:
            plan = self.media.plan(segment.videos, width, self.config.video_grid)
            cursor += self.media.draw_rows(segment.videos, plan, self.config.video_grid, x, cursor, video=True)
        return cursor - y

    # ------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------
    def split_cells(self, cells: Sequence[Cell], available: float) -> Tuple[Optional[List[Cell]], List[Cell]]:
        """
        Split a row so its first part fits in ``available`` points.

        Text breaks between wrapped lines; segments carrying media move
        whole to the second part.

        Returns:
            ``(head, tail)``, or ``(None, cells)`` when not even one line fits
        """
        budget = available - 2 * self.config.cell_padding
        cells = list(cells[: len(self.config.column_widths)])
        if budget < self.surface.metrics.line_height(self.config.body_font_size):
            return None, cells

        head: List[Cell] = []
        tail: List[Cell] = []
        for index, cell in enumerate(cells):
            first, rest = self._split_cell(cell, self.inner_width(index), budget)
            head.append(first)
            tail.append(rest)

        if not any(cell.segments for cell in head):
            return None, cells
        return head, tail

    def _split_cell(self, cell: Cell, width: float, budget: float) -> Tuple[Cell, Cell]:
        font = self.config.bold_font_name if cell.bold else self.config.font_name
        line_height = self.surface.metrics.line_height(self.config.body_font_size)
        used = 0.0
        taken: List[Segment] = []
        rest = list(cell.segments)
        while rest:
            segment = rest[0]
            height = self.segment_height(segment, width, cell.bold)
            if height <= 0:
                rest.pop(0)
                continue
            spacing = self.config.segment_spacing if taken else 0.0
            if used + spacing + height <= budget:
                taken.append(segment)
                used += spacing + height
                rest.pop(0)
                continue

            if segment.has_text:
                lines = self.surface.metrics.wrap(segment.text, width, font, self.config.body_font_size)
                count = min(int((budget - used - spacing + 1e-6) // line_height), len(lines))
                if count > 0:
                    taken.append(Segment(text="\n".join(lines[:count])))
                    rest[0] = Segment(
                        text="\n".join(lines[count:]) or None,
                        photos=segment.photos,
                        videos=segment.videos,
                    )
            break
        return Cell(segments=tuple(taken), bold=cell.bold), Cell(segments=tuple(rest), bold=cell.bold)

    # ------------------------------------------------------------------
    # Full-width media blocks
    # ------------------------------------------------------------------
    @property
    def block_content_width(self) -> float:
        return self.table_width - 2 * self.config.cell_padding

    def block_plans(self, block: MediaBlock) -> tuple[GridPlan, GridPlan]:
        return (
            self.media.plan(block.photos, self.block_content_width, self.config.photo_grid),
            self.media.plan(block.videos, self.block_content_width, self.config.video_grid),
        )

    def block_text_height(self, text: Optional[str]) -> float:
        return self.text_height(text, self.block_content_width)

    def media_chunk_height(self, text: Optional[str], plan: GridPlan, start_row: int, row_count: int) -> float:
        """Height of a bordered block piece: padding, optional text, ``row_count`` grid rows, padding."""
        text_height = self.block_text_height(text)
        rows_height = plan.span_height(start_row, row_count)
        height = 2 * self.config.cell_padding + text_height + rows_height
        if text_height and rows_height:
            height += self.config.media_gutter
        return height

    def draw_media_chunk(
        self,
        y: float,
        text: Optional[str],
        tiles: Sequence[MediaTile],
        plan: GridPlan,
        start_row: int,
        row_count: int,
        *,
        video: bool = False,
    ) -> float:
        """Draw one bordered piece of a full-width media block; return the height consumed."""
        height = self.media_chunk_height(text, plan, start_row, row_count)
        self.surface.rect(
            self.left,
            y,
            self.table_width,
            height,
            stroke=self.config.border_color,
            line_width=self.config.border_width,
        )

        x = self.left + self.config.cell_padding
        cursor = y + self.config.cell_padding
        if text:
            text_height = self.surface.text(
                text,
                x,
                cursor,
                width=self.block_content_width,
                font_name=self.config.font_name,
                font_size=self.config.body_font_size,
                color=self.config.text_color,
            )
            cursor += text_height
            if text_height and row_count:
                cursor += self.config.media_gutter
        if row_count:
            grid = self.config.video_grid if video else self.config.photo_grid
            self.media.draw_rows(tiles, plan, grid, x, cursor, start_row, row_count, video=video)
        return height
