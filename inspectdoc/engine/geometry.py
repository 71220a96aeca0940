"""Page size presets and helpers."""

from __future__ import annotations

from typing import Iterable, Tuple, Union

from reportlab.lib.pagesizes import A4, LETTER


PAGE_SIZES = {
    "A4": A4,
    "LETTER": LETTER,
}


def ensure_page_size(page_size: Union[str, Iterable[float], None]) -> Tuple[float, float]:
    """Resolve a preset name or a ``(width, height)`` pair to points."""
    if page_size is None:
        return float(A4[0]), float(A4[1])

    if isinstance(page_size, str):
        preset = PAGE_SIZES.get(page_size.upper())
        if preset:
            return float(preset[0]), float(preset[1])
        raise ValueError(f"Unsupported page size preset: {page_size}")

    values = list(page_size)
    if len(values) != 2:
        raise ValueError("Page size iterable must contain exactly two values")
    return float(values[0]), float(values[1])
