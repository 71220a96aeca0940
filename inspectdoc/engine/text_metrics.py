"""
TextMetrics - width, wrapping and height of text.

Uses ReportLab font metrics so measurements are identical whether a real
canvas or a headless surface is doing the drawing:
- text width
- line breaking at a maximum width (explicit newlines are honoured)
- text height (line count times line spacing)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Tuple

from reportlab.pdfbase import pdfmetrics

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8192)
def _string_width(text: str, font_name: str, font_size: float) -> float:
    return pdfmetrics.stringWidth(text, font_name, font_size)


@lru_cache(maxsize=4096)
def _wrap(text: str, font_name: str, font_size: float, max_width: float) -> Tuple[str, ...]:
    lines: List[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if _string_width(candidate, font_name, font_size) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            if _string_width(word, font_name, font_size) <= max_width:
                current = word
                continue

            # Word is wider than the line: break it by characters
            piece = ""
            for char in word:
                if piece and _string_width(piece + char, font_name, font_size) > max_width:
                    lines.append(piece)
                    piece = char
                else:
                    piece += char
            current = piece

        if current:
            lines.append(current)

    return tuple(lines)


class TextMetrics:
    """
    Text measurement shared by the renderers and the paginator.

    Heights are ``line_count * font_size * line_spacing``; an empty or blank
    string measures zero so callers can treat it as "no text".
    """

    def __init__(self, line_spacing: float = 1.2):
        self.line_spacing = line_spacing

    def string_width(self, text: str, font_name: str, font_size: float) -> float:
        if not text:
            return 0.0
        return _string_width(text, font_name, float(font_size))

    def line_height(self, font_size: float) -> float:
        return float(font_size) * self.line_spacing

    def wrap(self, text: str, max_width: float, font_name: str, font_size: float) -> List[str]:
        """
        Break text into lines no wider than ``max_width``.

        Args:
            text: Text to break; ``\\n`` starts a new line
            max_width: Maximum line width in points
            font_name: Registered ReportLab font name
            font_size: Font size in points

        Returns:
            List of lines (empty list for blank text)
        """
        if not text or not text.strip():
            return []
        if max_width <= 0:
            logger.warning(f"Cannot wrap text into non-positive width {max_width}")
            return [text]
        return list(_wrap(text.strip(), font_name, float(font_size), float(max_width)))

    def height_of_string(self, text: str, max_width: float, font_name: str, font_size: float) -> float:
        lines = self.wrap(text, max_width, font_name, font_size)
        return len(lines) * self.line_height(font_size)
