"""Sign-off boxes at the end of a report."""

from __future__ import annotations

import logging

from ..config import LayoutConfig
from ..surface.base import DrawingSurface

logger = logging.getLogger(__name__)

BOX_HEIGHT = 110.0
BOX_GAP = 16.0
HEADING_SIZE = 12.0
REQUIRED_SPACE = BOX_HEIGHT + 40.0


class SignOffRenderer:
    """Customer and company signature boxes side by side."""

    def __init__(self, config: LayoutConfig, company_name: str) -> None:
        self.config = config
        self.company_name = company_name

    def draw(self, surface: DrawingSurface, y: float, customer_name: str | None = None) -> float:
        """Draw the section at ``y`` (or on a new page); return the cursor below it."""
        bottom = surface.page_height - self.config.margin - self.config.footer_reserved
        if bottom - y < REQUIRED_SPACE:
            surface.add_page()
            y = self.config.margin
            logger.debug("Sign-off moved to a new page")

        margin = self.config.margin
        width = surface.page_width - 2 * margin
        y += surface.text(
            "Sign-Off",
            margin,
            y + 6.0,
            width=width,
            font_name=self.config.bold_font_name,
            font_size=HEADING_SIZE,
            color=self.config.text_color,
        ) + 14.0

        box_width = (width - BOX_GAP) / 2.0
        self._draw_box(surface, margin, y, box_width, f"Customer: {customer_name or 'Customer'}")
        self._draw_box(surface, margin + box_width + BOX_GAP, y, box_width, self.company_name)
        return y + BOX_HEIGHT

    def _draw_box(self, surface: DrawingSurface, x: float, top: float, width: float, label: str) -> None:
        config = self.config
        surface.rect(x, top, width, BOX_HEIGHT, stroke=config.border_color, line_width=config.border_width, radius=6.0)
        surface.text(
            label,
            x + 10,
            top + 10,
            width=width - 20,
            font_name=config.bold_font_name,
            font_size=config.body_font_size,
            color=config.text_color,
        )
        for caption, offset in (("Signature:", 28.0), ("Date:", 64.0)):
            surface.text(
                caption,
                x + 10,
                top + offset,
                width=64,
                font_name=config.font_name,
                font_size=config.body_font_size,
                color=config.text_color,
            )
            line_y = top + offset + 14.0
            surface.line(x + 80, line_y, x + width - 10, line_y, color=config.border_color, line_width=config.border_width)
