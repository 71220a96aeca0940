"""Drawing routines for table rows, media tiles, footers and sign-off."""

from .footer_renderer import FooterRenderer
from .media_renderer import MediaRenderer
from .signoff_renderer import SignOffRenderer
from .table_renderer import TableRenderer

__all__ = ["FooterRenderer", "MediaRenderer", "SignOffRenderer", "TableRenderer"]
