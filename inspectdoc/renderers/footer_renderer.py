"""Rendering utilities for page footers."""

from __future__ import annotations

from ..config import LayoutConfig
from ..surface.base import DrawingSurface


class FooterRenderer:
    """Draw the footer band: a rule, the footer text and the page number."""

    def __init__(self, config: LayoutConfig, text: str = "") -> None:
        self.config = config
        self.text = text

    def attach(self, surface: DrawingSurface) -> None:
        """Draw on the current page and on every page added afterwards."""
        self.draw(surface)
        surface.on_page_added(self.draw)

    def draw(self, surface: DrawingSurface) -> None:
        margin = self.config.margin
        band_top = surface.page_height - margin - self.config.footer_reserved
        width = surface.page_width - 2 * margin
        font_size = self.config.caption_font_size
        text_y = band_top + (self.config.footer_reserved - surface.metrics.line_height(font_size)) / 2.0

        surface.line(margin, band_top, margin + width, band_top, color=self.config.border_color, line_width=0.5)
        if self.text:
            surface.text(
                self.text,
                margin,
                text_y,
                width=width / 2.0,
                font_name=self.config.font_name,
                font_size=font_size,
                color=self.config.text_color,
            )
        surface.text(
            f"Page {surface.page_number}",
            margin + width / 2.0,
            text_y,
            width=width / 2.0,
            align="right",
            font_name=self.config.font_name,
            font_size=font_size,
            color=self.config.text_color,
        )
