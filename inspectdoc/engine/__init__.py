"""Geometry and text measurement."""

from .geometry import PAGE_SIZES, ensure_page_size
from .text_metrics import TextMetrics

__all__ = ["PAGE_SIZES", "ensure_page_size", "TextMetrics"]
