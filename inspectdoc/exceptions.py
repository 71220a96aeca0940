"""Custom exceptions for inspectdoc."""

from typing import Optional


class InspectDocError(Exception):
    """Base exception for inspection report errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class RecordError(InspectDocError):
    """Exception raised when an inspection record cannot be read."""

    pass


class LayoutError(InspectDocError):
    """Exception raised when content cannot be placed on a page."""

    pass


class RenderingError(InspectDocError):
    """Exception raised during report rendering."""

    pass


class SurfaceError(InspectDocError):
    """Exception raised when the drawing surface is unusable."""

    pass


class MediaError(InspectDocError):
    """Exception raised during media resolution."""

    pass
