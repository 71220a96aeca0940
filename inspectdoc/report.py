"""
Report assembly: title block, checklist table and sign-off.

``render_report`` draws onto any :class:`DrawingSurface`; ``build_report_pdf``
wires it to a ReportLab canvas and an image cache for one PDF file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import ReportConfig
from .engine.geometry import ensure_page_size
from .engine.text_metrics import TextMetrics
from .exceptions import RenderingError
from .formatting import format_datetime, format_enum, format_schedule_range
from .layout.aggregator import ContentAggregator, photo_uris
from .layout.paginator import PaginationResult, Paginator
from .media.image_cache import ImageCache
from .models import ChecklistItem, InspectionRecord
from .renderers.footer_renderer import FooterRenderer
from .renderers.signoff_renderer import SignOffRenderer
from .renderers.table_renderer import TableRenderer
from .surface.base import DrawingSurface
from .surface.reportlab_surface import ReportLabSurface

logger = logging.getLogger(__name__)

TITLE_SIZE = 18.0
HEADING_SIZE = 14.0
META_SIZE = 10.0


@dataclass(frozen=True)
class ReportOptions:
    """Options controlling what the checklist section shows."""
    heading: str = "Inspection Checklist"
    start_on_new_page: bool = False
    include_meta: bool = True
    filter_by_scope_id: Optional[str] = None
    allowed_conditions: Tuple[str, ...] = ()
    entry_only: bool = False
    include_media: bool = True
    title: Optional[str] = None
    version_label: str = "v1"
    generated_on: Optional[datetime] = None


@dataclass
class RenderContext:
    """State shared by one report render."""
    image_cache: ImageCache
    config: ReportConfig = field(default_factory=ReportConfig)


def scope_items(items: Iterable[ChecklistItem], scope_id: Optional[str]) -> List[ChecklistItem]:
    """Items without a scope, or in the requested scope, pass."""
    return [item for item in items if not item.scope_id or not scope_id or item.scope_id == scope_id]


def report_title(record: InspectionRecord, options: ReportOptions) -> str:
    if options.title and options.title.strip():
        return options.title.strip()
    return f"{format_enum(record.contract_type) or 'Inspection'} Report"


def render_report(
    surface: DrawingSurface,
    record: InspectionRecord,
    options: Optional[ReportOptions] = None,
    config: Optional[ReportConfig] = None,
    image_cache: Optional[ImageCache] = None,
) -> PaginationResult:
    """Draw a complete report; return the pagination result of the checklist table."""
    options = options or ReportOptions()
    config = config or ReportConfig()
    layout = config.layout
    surface.validate(layout.margin)

    owns_cache = image_cache is None
    cache = image_cache or ImageCache(config.fetch)
    try:
        FooterRenderer(layout, config.footer_text).attach(surface)
        context = RenderContext(image_cache=cache, config=config)
        width = surface.page_width - 2 * layout.margin

        y = layout.margin
        y += surface.text(
            report_title(record, options),
            layout.margin,
            y,
            width=width,
            align="center",
            font_name=layout.bold_font_name,
            font_size=TITLE_SIZE,
            color=layout.text_color,
        )
        y += 10.0
        y = write_lines(surface, _contract_lines(record, options), y, config)
        y += 10.0

        result = append_checklist_section(surface, record.items, context, options, y, record)
        SignOffRenderer(layout, config.company_name).draw(surface, result.final_y + 12.0, record.customer_name)
        logger.info(f"Rendered report {record.id} on {surface.page_number} page(s)")
        return result
    finally:
        if owns_cache:
            cache.close()


def append_checklist_section(
    surface: DrawingSurface,
    items: Sequence[ChecklistItem],
    context: RenderContext,
    options: ReportOptions,
    y: float,
    record: Optional[InspectionRecord] = None,
) -> PaginationResult:
    """Draw the section heading, optional meta lines and the checklist table."""
    config = context.config
    layout = config.layout
    if options.start_on_new_page:
        surface.add_page()
        y = layout.margin

    y = write_lines(surface, [options.heading], y, config, bold=True, font_size=HEADING_SIZE)
    y += 4.0
    if options.include_meta and record is not None:
        y = write_lines(surface, _meta_lines(record), y, config)
        y += 8.0

    scoped = scope_items(items, options.filter_by_scope_id)
    rows = []
    if scoped:
        aggregator = ContentAggregator(layout)
        rows = aggregator.build_rows(
            scoped,
            context.image_cache,
            allowed_conditions=options.allowed_conditions,
            entry_only=options.entry_only,
            include_media=options.include_media,
        )

    if not rows:
        y = write_lines(surface, ["No checklist items found."], y, config)
        return PaginationResult(final_y=y, page_count=1)

    renderer = TableRenderer(surface, layout)
    return Paginator(surface, renderer, layout).run(rows, y)


def build_report_pdf(
    record: InspectionRecord,
    output_path: str | Path,
    options: Optional[ReportOptions] = None,
    config: Optional[ReportConfig] = None,
) -> Path:
    """Render ``record`` into a PDF file at ``output_path``."""
    options = options or ReportOptions()
    config = config or ReportConfig()
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        page_size = ensure_page_size(config.layout.page_size)
    except ValueError as exc:
        raise RenderingError("Invalid page size", str(exc)) from exc
    metrics = TextMetrics(line_spacing=config.layout.line_spacing)
    surface = ReportLabSurface(output, page_size, title=report_title(record, options), metrics=metrics)

    with ImageCache(config.fetch) as cache:
        if options.include_media:
            items = scope_items(record.items, options.filter_by_scope_id)
            cache.prefetch(photo_uris(items))
        render_report(surface, record, options, config, image_cache=cache)

    try:
        surface.finish()
    except OSError as exc:
        raise RenderingError("Cannot write PDF", f"{output}: {exc}") from exc
    logger.info(f"Report written to {output}")
    return output


def write_lines(
    surface: DrawingSurface,
    lines: Iterable[str],
    y: float,
    config: ReportConfig,
    *,
    bold: bool = False,
    font_size: float = META_SIZE,
) -> float:
    """Write left-aligned lines, breaking the page above the footer band."""
    layout = config.layout
    font = layout.bold_font_name if bold else layout.font_name
    width = surface.page_width - 2 * layout.margin
    bottom = surface.page_height - layout.margin - layout.footer_reserved
    for line in lines:
        if not line:
            continue
        height = surface.height_of_string(line, width, font, font_size)
        if y + height > bottom:
            surface.add_page()
            y = layout.margin
        y += surface.text(line, layout.margin, y, width=width, font_name=font, font_size=font_size, color=layout.text_color)
    return y


def _contract_lines(record: InspectionRecord, options: ReportOptions) -> List[str]:
    generated = options.generated_on or datetime.now()
    lines = [
        f"Version: {options.version_label}",
        f"Generated: {format_datetime(generated)}",
        f"Contract ID: {record.id}",
        f"Status: {format_enum(record.status) or 'N/A'}",
    ]
    if record.scheduled_start or record.scheduled_end:
        lines.append(f"Schedule: {format_schedule_range(record.scheduled_start, record.scheduled_end)}")
    if record.customer_name:
        lines.append(f"Customer: {record.customer_name}")
    if record.address:
        lines.append(f"Property: {record.address}")
    if record.postal_code:
        lines.append(f"Postal Code: {record.postal_code}")
    return lines


def _meta_lines(record: InspectionRecord) -> List[str]:
    lines = []
    if record.scheduled_start or record.scheduled_end:
        lines.append(f"Scheduled: {format_schedule_range(record.scheduled_start, record.scheduled_end)}")
    if record.actual_start or record.actual_end:
        lines.append(f"Actual: {format_schedule_range(record.actual_start, record.actual_end)}")
    names = [name for name in record.inspectors if name]
    if names:
        lines.append(f"Inspectors: {', '.join(names)}")
    return lines
