"""Drawing surface backed by a ReportLab canvas."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, Tuple, Union

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from ..engine.text_metrics import TextMetrics
from .base import DrawingSurface
from .colors import to_color

logger = logging.getLogger(__name__)


class ReportLabSurface(DrawingSurface):
    """Translate top-left layout coordinates into ReportLab canvas calls."""

    def __init__(
        self,
        output: Union[str, Path, BinaryIO],
        page_size: Tuple[float, float],
        *,
        title: Optional[str] = None,
        metrics: Optional[TextMetrics] = None,
    ) -> None:
        super().__init__(page_size[0], page_size[1], metrics)
        target = str(output) if isinstance(output, Path) else output
        self.canvas = Canvas(target, pagesize=(self.page_width, self.page_height))
        if title:
            self.canvas.setTitle(title)

    def _flip(self, y: float) -> float:
        return self.page_height - y

    def _start_new_page(self) -> None:
        self.canvas.showPage()

    def text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        width: float,
        align: str = "left",
        font_name: str = "Helvetica",
        font_size: float = 10.0,
        color: str = "#111827",
    ) -> float:
        lines = self.metrics.wrap(text, width, font_name, font_size)
        if not lines:
            return 0.0

        leading = self.metrics.line_height(font_size)
        ascent = pdfmetrics.getAscent(font_name, font_size)

        self.canvas.saveState()
        self.canvas.setFont(font_name, font_size)
        self.canvas.setFillColor(to_color(color))
        for index, line in enumerate(lines):
            baseline = y + index * leading + ascent
            line_width = self.metrics.string_width(line, font_name, font_size)
            if align == "center":
                line_x = x + max((width - line_width) / 2.0, 0.0)
            elif align in {"right", "end"}:
                line_x = x + max(width - line_width, 0.0)
            else:
                line_x = x
            self.canvas.drawString(line_x, self._flip(baseline), line)
        self.canvas.restoreState()
        return len(lines) * leading

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        stroke: Optional[str] = None,
        fill: Optional[str] = None,
        line_width: float = 0.7,
        radius: float = 0.0,
        fill_opacity: float = 1.0,
    ) -> None:
        if not stroke and not fill:
            return

        self.canvas.saveState()
        if fill:
            self.canvas.setFillColor(to_color(fill))
            if fill_opacity < 1.0:
                self.canvas.setFillAlpha(fill_opacity)
        if stroke:
            self.canvas.setStrokeColor(to_color(stroke))
            self.canvas.setLineWidth(line_width)

        bottom = self._flip(y + height)
        if radius > 0:
            self.canvas.roundRect(x, bottom, width, height, radius, stroke=1 if stroke else 0, fill=1 if fill else 0)
        else:
            self.canvas.rect(x, bottom, width, height, stroke=1 if stroke else 0, fill=1 if fill else 0)
        self.canvas.restoreState()

    def image(
        self,
        buffer,
        x: float,
        y: float,
        *,
        fit: Tuple[float, float],
        align: str = "center",
        valign: str = "top",
    ) -> None:
        reader = ImageReader(io.BytesIO(buffer.data))
        image_width, image_height = reader.getSize()
        if image_width <= 0 or image_height <= 0:
            raise ValueError("Image has no pixels")

        box_width, box_height = fit
        scale = min(box_width / image_width, box_height / image_height)
        draw_width = image_width * scale
        draw_height = image_height * scale

        if align == "center":
            draw_x = x + (box_width - draw_width) / 2.0
        elif align in {"right", "end"}:
            draw_x = x + box_width - draw_width
        else:
            draw_x = x

        if valign == "center":
            draw_y = y + (box_height - draw_height) / 2.0
        elif valign == "bottom":
            draw_y = y + box_height - draw_height
        else:
            draw_y = y

        self.canvas.drawImage(
            reader,
            draw_x,
            self._flip(draw_y + draw_height),
            width=draw_width,
            height=draw_height,
            mask="auto",
        )

    def circle(self, cx: float, cy: float, radius: float, *, fill: Optional[str] = None, stroke: Optional[str] = None) -> None:
        self.canvas.saveState()
        if fill:
            self.canvas.setFillColor(to_color(fill))
        if stroke:
            self.canvas.setStrokeColor(to_color(stroke))
        self.canvas.circle(cx, self._flip(cy), radius, stroke=1 if stroke else 0, fill=1 if fill else 0)
        self.canvas.restoreState()

    def polygon(self, points: Sequence[Tuple[float, float]], *, fill: Optional[str] = None, stroke: Optional[str] = None) -> None:
        if len(points) < 3:
            return
        self.canvas.saveState()
        path = self.canvas.beginPath()
        first_x, first_y = points[0]
        path.moveTo(first_x, self._flip(first_y))
        for px, py in points[1:]:
            path.lineTo(px, self._flip(py))
        path.close()
        if fill:
            self.canvas.setFillColor(to_color(fill))
        if stroke:
            self.canvas.setStrokeColor(to_color(stroke))
        self.canvas.drawPath(path, stroke=1 if stroke else 0, fill=1 if fill else 0)
        self.canvas.restoreState()

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: str = "#111827", line_width: float = 0.7) -> None:
        self.canvas.saveState()
        self.canvas.setStrokeColor(to_color(color))
        self.canvas.setLineWidth(line_width)
        self.canvas.line(x1, self._flip(y1), x2, self._flip(y2))
        self.canvas.restoreState()

    def finish(self) -> None:
        self.canvas.save()
        logger.info(f"PDF written with {self.page_number} page(s)")
