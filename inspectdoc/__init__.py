"""
inspectdoc - paginated PDF reports for property inspections.

Turns an inspection record (checklist items, locations, tasks, entries and
their photos/videos) into a bordered multi-page table:

- ContentAggregator: record -> row descriptors
- Paginator: row descriptors -> draw calls, page breaks, split media blocks
- ImageCache: photo references -> raster buffers, fetched once per render
- build_report_pdf: the whole report as a PDF file
"""

from .config import FetchConfig, GridConfig, LayoutConfig, ReportConfig, load_config
from .exceptions import (
    InspectDocError,
    LayoutError,
    MediaError,
    RecordError,
    RenderingError,
    SurfaceError,
)
from .loader import load_record, parse_record
from .report import ReportOptions, build_report_pdf, render_report
from .version import __version__

__all__ = [
    "FetchConfig",
    "GridConfig",
    "LayoutConfig",
    "ReportConfig",
    "load_config",
    "InspectDocError",
    "LayoutError",
    "MediaError",
    "RecordError",
    "RenderingError",
    "SurfaceError",
    "load_record",
    "parse_record",
    "ReportOptions",
    "build_report_pdf",
    "render_report",
    "__version__",
]
