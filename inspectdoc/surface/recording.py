"""Headless drawing surface that records every draw call.

Used to unit-test height computation and pagination without producing a
PDF. Text is measured with the same ReportLab font metrics as the real
surface, so page breaks land in the same places.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..engine.text_metrics import TextMetrics
from .base import DrawingSurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawOp:
    """One recorded draw call."""
    name: str
    page: int
    params: Dict[str, Any] = field(default_factory=dict)


class RecordingSurface(DrawingSurface):
    """Collect draw calls as :class:`DrawOp` records."""

    def __init__(self, page_width: float, page_height: float, metrics: Optional[TextMetrics] = None):
        super().__init__(page_width, page_height, metrics)
        self.ops: List[DrawOp] = []

    def _record(self, name: str, **params: Any) -> None:
        self.ops.append(DrawOp(name=name, page=self.page_number, params=params))

    def _start_new_page(self) -> None:
        self._record("add_page")

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
        height = self.metrics.height_of_string(text, width, font_name, font_size)
        if height <= 0:
            return 0.0
        self._record(
            "text",
            text=text,
            x=x,
            y=y,
            width=width,
            height=height,
            align=align,
            font_name=font_name,
            font_size=font_size,
            color=color,
        )
        return height

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
        self._record(
            "rect",
            x=x,
            y=y,
            width=width,
            height=height,
            stroke=stroke,
            fill=fill,
            line_width=line_width,
            radius=radius,
            fill_opacity=fill_opacity,
        )

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
        if buffer is None or not getattr(buffer, "data", None):
            raise ValueError("Cannot draw an empty raster buffer")
        self._record(
            "image",
            source=getattr(buffer, "source", None),
            x=x,
            y=y,
            width=fit[0],
            height=fit[1],
            align=align,
            valign=valign,
        )

    def circle(self, cx: float, cy: float, radius: float, *, fill: Optional[str] = None, stroke: Optional[str] = None) -> None:
        self._record("circle", cx=cx, cy=cy, radius=radius, fill=fill, stroke=stroke)

    def polygon(self, points: Sequence[Tuple[float, float]], *, fill: Optional[str] = None, stroke: Optional[str] = None) -> None:
        self._record("polygon", points=tuple(points), fill=fill, stroke=stroke)

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: str = "#111827", line_width: float = 0.7) -> None:
        self._record("line", x1=x1, y1=y1, x2=x2, y2=y2, color=color, line_width=line_width)

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    def ops_named(self, name: str) -> List[DrawOp]:
        return [op for op in self.ops if op.name == name]

    def texts(self) -> List[str]:
        return [op.params["text"] for op in self.ops_named("text")]

    def image_sources(self) -> List[Optional[str]]:
        return [op.params["source"] for op in self.ops_named("image")]

    @property
    def page_count(self) -> int:
        return self.page_number
