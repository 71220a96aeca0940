"""Abstract drawing surface used by the layout engine.

All coordinates are in points with a top-left origin and y growing
downward. The surface is the only way the engine produces output; apart
from :meth:`DrawingSurface.height_of_string` it has no return channel.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

from ..engine.text_metrics import TextMetrics
from ..exceptions import SurfaceError

logger = logging.getLogger(__name__)

PageListener = Callable[["DrawingSurface"], None]


class DrawingSurface(ABC):
    """Drawing primitives plus page metrics."""

    def __init__(self, page_width: float, page_height: float, metrics: Optional[TextMetrics] = None):
        self._page_width = float(page_width)
        self._page_height = float(page_height)
        self.metrics = metrics or TextMetrics()
        self.page_number = 1
        self._page_listeners: List[PageListener] = []
        self._notifying = False

    @property
    def page_width(self) -> float:
        return self._page_width

    @property
    def page_height(self) -> float:
        return self._page_height

    def validate(self, margin: float = 0.0) -> None:
        """Reject a surface no content could ever be drawn on."""
        if self._page_width <= 0 or self._page_height <= 0:
            raise SurfaceError(
                "Drawing surface has no usable area",
                f"page size {self._page_width}x{self._page_height}",
            )
        if self._page_width - 2 * margin <= 0 or self._page_height - 2 * margin <= 0:
            raise SurfaceError("Margins leave no content area", f"margin={margin}")

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    def on_page_added(self, listener: PageListener) -> None:
        """Register a callback run after every :meth:`add_page`."""
        self._page_listeners.append(listener)

    def add_page(self) -> None:
        self._start_new_page()
        self.page_number += 1
        logger.debug(f"Started page {self.page_number}")
        if self._notifying:
            return
        self._notifying = True
        try:
            for listener in self._page_listeners:
                listener(self)
        finally:
            self._notifying = False

    @abstractmethod
    def _start_new_page(self) -> None:
        """Close the current page and open a blank one."""

    # ------------------------------------------------------------------
    # Measurement
    # ------------------------------------------------------------------
    def height_of_string(self, text: str, width: float, font_name: str, font_size: float) -> float:
        return self.metrics.height_of_string(text, width, font_name, font_size)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------
    @abstractmethod
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
        """Draw wrapped text with its top edge at ``y``; return the height used."""

    @abstractmethod
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
        """Draw a (rounded) rectangle, filled and/or stroked."""

    @abstractmethod
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
        """Draw a raster buffer scaled to fit the box; raise if it cannot be drawn."""

    @abstractmethod
    def circle(self, cx: float, cy: float, radius: float, *, fill: Optional[str] = None, stroke: Optional[str] = None) -> None:
        """Draw a circle centred on ``(cx, cy)``."""

    @abstractmethod
    def polygon(self, points: Sequence[Tuple[float, float]], *, fill: Optional[str] = None, stroke: Optional[str] = None) -> None:
        """Draw a closed polygon."""

    @abstractmethod
    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: str = "#111827", line_width: float = 0.7) -> None:
        """Draw a straight line."""

    def finish(self) -> None:
        """Flush any pending output."""
