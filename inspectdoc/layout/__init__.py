"""Row aggregation, media grids and pagination.

The paginator depends on the renderers and is imported from
``inspectdoc.layout.paginator`` directly.
"""

from .aggregator import ContentAggregator, build_groups, with_others_task
from .media_grid import GridPlan, plan_grid
from .rows import Cell, MediaBlock, MediaTile, RowDescriptor, RowKind, Segment

__all__ = [
    "ContentAggregator",
    "build_groups",
    "with_others_task",
    "GridPlan",
    "plan_grid",
    "Cell",
    "MediaBlock",
    "MediaTile",
    "RowDescriptor",
    "RowKind",
    "Segment",
]
