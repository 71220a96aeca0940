"""Layout, fetch and report configuration.

Defaults reproduce the printed inspection report: A4 pages, 36pt margins,
a 40pt footer band and four fixed table columns. Every value can be
overridden from a JSON file (see :func:`load_config`).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, is_dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .exceptions import InspectDocError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GridConfig:
    """Tile grid used for one kind of media."""
    columns: int = 4
    tile_height: float = 100.0
    gutter: float = 8.0
    caption_gap: float = 4.0


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """Page and table geometry."""
    page_size: str = "A4"
    margin: float = 36.0
    footer_reserved: float = 40.0
    column_widths: Tuple[float, ...] = (120.0, 120.0, 170.0, 113.0)
    header_labels: Tuple[str, ...] = ("Location", "Item", "Subtask", "Condition")
    cell_padding: float = 8.0
    min_row_height: float = 24.0
    segment_spacing: float = 12.0
    media_gutter: float = 8.0
    font_name: str = "Helvetica"
    bold_font_name: str = "Helvetica-Bold"
    body_font_size: float = 10.0
    caption_font_size: float = 8.0
    line_spacing: float = 1.2
    photo_grid: GridConfig = field(default_factory=GridConfig)
    video_grid: GridConfig = field(default_factory=lambda: GridConfig(tile_height=64.0))
    max_video_tiles: int = 8
    text_color: str = "#111827"
    border_color: str = "#111827"
    border_width: float = 0.7
    header_fill: str = "#e2e8f0"
    band_colors: Tuple[str, ...] = ("#eef2ff", "#f8fafc")
    band_opacity: float = 0.6
    placeholder_color: str = "#ef4444"
    video_fill: str = "#1e293b"
    video_icon_fill: str = "#0ea5e9"

    @property
    def table_width(self) -> float:
        return float(sum(self.column_widths))


@dataclass(frozen=True, slots=True)
class FetchConfig:
    """Image resolution settings."""
    max_workers: int = 4
    timeout_seconds: float = 5.0
    max_dimension: int = 1600
    jpeg_quality: int = 85


@dataclass(frozen=True, slots=True)
class ReportConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    company_name: str = "Property Stewards PTE. LTD"
    footer_text: str = "Inspection Report"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ReportConfig":
        """Merge a nested dictionary of overrides onto the defaults."""
        return _merge(cls(), data or {})


def _merge(instance: Any, overrides: Dict[str, Any]) -> Any:
    known = {f.name: f for f in fields(instance)}
    changes: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        current = getattr(instance, key)
        if is_dataclass(current) and isinstance(value, dict):
            changes[key] = _merge(current, value)
        elif isinstance(current, tuple) and isinstance(value, list):
            changes[key] = tuple(value)
        else:
            changes[key] = value
    return replace(instance, **changes)


def load_config(path: Optional[str | Path]) -> ReportConfig:
    """Load a :class:`ReportConfig` from a JSON file of overrides."""
    if path is None:
        return ReportConfig()

    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise InspectDocError("Config file not found", str(config_path)) from exc
    except json.JSONDecodeError as exc:
        raise InspectDocError("Config file is not valid JSON", str(exc)) from exc

    if not isinstance(data, dict):
        raise InspectDocError("Config file must contain a JSON object", str(config_path))

    return ReportConfig.from_dict(data)
