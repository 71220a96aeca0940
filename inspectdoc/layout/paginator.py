"""
Paginator for the report table.

Handles:
- page breaks before rows that do not fit above the footer band
- rows taller than a page continued on the next page, line by line
- header row redrawn at the top of every new page
- splitting media blocks between whole grid rows
- alternating background bands per location group
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import LayoutConfig
from ..exceptions import LayoutError
from ..renderers.table_renderer import TableRenderer
from ..surface.base import DrawingSurface
from .media_grid import GridPlan
from .rows import Cell, MediaBlock, MediaTile, RowDescriptor, RowKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChunkRecord:
    """One drawn piece of a media block."""
    page: int
    kind: str
    start_row: int
    row_count: int
    tile_count: int
    y: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(slots=True)
class PaginationResult:
    final_y: float
    page_count: int
    pages_added: int = 0
    rows_drawn: int = 0
    chunks: List[ChunkRecord] = field(default_factory=list)


class Paginator:
    """
    Drive row descriptors onto a drawing surface, page by page.

    The paginator owns the vertical cursor. Rows taller than a page break
    between wrapped text lines; media blocks break only between grid rows.
    """

    def __init__(self, surface: DrawingSurface, renderer: TableRenderer, config: Optional[LayoutConfig] = None):
        self.surface = surface
        self.renderer = renderer
        self.config = config or renderer.config
        self.cursor = self.config.margin
        self._fresh_top: Optional[float] = None
        self._band = 0
        self._last_key: Optional[str] = None
        self._result: Optional[PaginationResult] = None

    @property
    def page_bottom(self) -> float:
        return self.surface.page_height - self.config.margin - self.config.footer_reserved

    @property
    def remaining(self) -> float:
        return self.page_bottom - self.cursor

    def run(self, rows: Sequence[RowDescriptor], y: float, draw_header: bool = True) -> PaginationResult:
        """
        Place ``rows`` starting at ``y``.

        Args:
            rows: Row descriptors from the aggregator
            y: Starting cursor on the current page
            draw_header: Draw the header row before the first row

        Returns:
            PaginationResult with the final cursor and chunk records

        Raises:
            LayoutError: when content cannot fit even on an empty page
        """
        start_page = self.surface.page_number
        self.cursor = y
        self._fresh_top = None
        self._band = 0
        self._last_key = None
        self._result = PaginationResult(final_y=y, page_count=1)

        if draw_header:
            header_height = self.renderer.row_height(self.renderer.header_cells())
            if header_height > self.remaining:
                self.new_page(draw_header=False)
            self.cursor += self.renderer.draw_header(self.cursor)
            self._fresh_top = self.cursor

        for row in rows:
            self._place_row(row)

        result = self._result
        result.final_y = self.cursor
        result.page_count = self.surface.page_number - start_page + 1
        logger.debug(
            f"Paginated {len(rows)} row(s) over {result.page_count} page(s), {len(result.chunks)} media chunk(s)"
        )
        return result

    def new_page(self, draw_header: bool = True) -> None:
        self.surface.add_page()
        self.cursor = self.config.margin
        if draw_header:
            self.cursor += self.renderer.draw_header(self.cursor)
        self._fresh_top = self.cursor
        if self._result is not None:
            self._result.pages_added += 1
        logger.debug(f"Page break, continuing on page {self.surface.page_number}")

    def _on_fresh_page(self) -> bool:
        return self._fresh_top is not None and self.cursor <= self._fresh_top

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    def _place_row(self, row: RowDescriptor) -> None:
        background = self._background_for(row)

        if not row.is_media_only:
            self._place_cells(list(row.cells), background, row.merge)

        if row.media is not None and not row.media.is_empty:
            self._place_media(row.media)

    def _place_cells(self, cells: List[Cell], background: Optional[str], merge: bool) -> None:
        """Draw a row, breaking it between wrapped lines when no page could hold it whole."""
        while True:
            height = self.renderer.row_height(cells)
            if height <= self.remaining:
                self.cursor += self.renderer.draw_row(self.cursor, cells, background=background, merge_columns=merge)
                self._result.rows_drawn += 1
                return
            if not self._on_fresh_page() and height <= self._fresh_page_room():
                self.new_page()
                continue

            head, tail = self.renderer.split_cells(cells, self.remaining)
            if head is None:
                if self._on_fresh_page():
                    raise LayoutError("Row cannot fit the page content area", f"height={height:.1f}")
                self.new_page()
                continue

            self.cursor += self.renderer.draw_row(self.cursor, head, background=background, merge_columns=merge)
            self._result.rows_drawn += 1
            if not any(cell.segments for cell in tail):
                return
            logger.debug(f"Split row of height {height:.1f} on page {self.surface.page_number}")
            cells = tail
            self.new_page()

    def _fresh_page_room(self) -> float:
        header = self.renderer.row_height(self.renderer.header_cells())
        return self.page_bottom - self.config.margin - header

    def _background_for(self, row: RowDescriptor) -> Optional[str]:
        colors = self.config.band_colors
        if not colors:
            return None
        if row.kind is RowKind.TASK:
            if self._last_key is not None and row.grouping_key != self._last_key:
                self._band = (self._band + 1) % len(colors)
            self._last_key = row.grouping_key
        return colors[self._band % len(colors)]

    # ------------------------------------------------------------------
    # Media blocks
    # ------------------------------------------------------------------
    def _place_media(self, block: MediaBlock) -> None:
        photo_plan, video_plan = self.renderer.block_plans(block)
        pending_text = block.text if block.text and block.text.strip() else None
        parts = [
            ("photo", block.photos, photo_plan),
            ("video", block.videos, video_plan),
        ]
        for kind, tiles, plan in parts:
            if plan.row_count:
                pending_text = self._stream_rows(kind, tiles, plan, pending_text)

        if pending_text:
            self._place_text_only(pending_text)

    def _stream_rows(
        self,
        kind: str,
        tiles: Sequence[MediaTile],
        plan: GridPlan,
        pending_text: Optional[str],
    ) -> Optional[str]:
        row = 0
        while row < plan.row_count:
            overhead = self.renderer.media_chunk_height(pending_text, plan, row, 0)
            if pending_text:
                overhead += self.config.media_gutter
            fitting = plan.rows_fitting(row, self.remaining - overhead)

            if fitting == 0:
                if not self._on_fresh_page():
                    self.new_page()
                    continue
                if pending_text and self.renderer.media_chunk_height(pending_text, plan, row, 0) <= self.remaining:
                    self._draw_chunk(kind, pending_text, tiles, plan, row, 0)
                    pending_text = None
                    continue
                raise LayoutError(
                    "Media row cannot fit on an empty page",
                    f"row height {plan.row_heights[row]:.1f}, available {self.remaining:.1f}",
                )

            self._draw_chunk(kind, pending_text, tiles, plan, row, fitting)
            pending_text = None
            row += fitting
            if row < plan.row_count:
                self.new_page()
        return pending_text

    def _place_text_only(self, text: str) -> None:
        needed = self.renderer.media_chunk_height(text, GridPlan(tile_width=0.0), 0, 0)
        if needed > self.remaining:
            if self._on_fresh_page():
                raise LayoutError("Block text cannot fit on an empty page", f"height={needed:.1f}")
            self.new_page()
        self.cursor += self.renderer.draw_media_chunk(self.cursor, text, (), GridPlan(tile_width=0.0), 0, 0)

    def _draw_chunk(
        self,
        kind: str,
        text: Optional[str],
        tiles: Sequence[MediaTile],
        plan: GridPlan,
        start_row: int,
        row_count: int,
    ) -> None:
        top = self.cursor
        height = self.renderer.draw_media_chunk(
            top, text, tiles, plan, start_row, row_count, video=(kind == "video")
        )
        first = start_row * plan.columns
        last = min((start_row + row_count) * plan.columns, len(tiles))
        tile_count = max(last - first, 0)
        self._result.chunks.append(
            ChunkRecord(
                page=self.surface.page_number,
                kind=kind,
                start_row=start_row,
                row_count=row_count,
                tile_count=tile_count,
                y=top,
                height=height,
            )
        )
        self.cursor += height
        logger.debug(
            f"Drew {kind} chunk rows {start_row}-{start_row + row_count - 1} "
            f"({tile_count} tile(s)) on page {self.surface.page_number}"
        )
