"""Drawing surfaces."""

from .base import DrawingSurface
from .recording import DrawOp, RecordingSurface
from .reportlab_surface import ReportLabSurface

__all__ = ["DrawingSurface", "DrawOp", "RecordingSurface", "ReportLabSurface"]
