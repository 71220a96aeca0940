"""Image resolution and decoding."""

from .image_cache import ImageCache
from .raster import RasterBuffer, decode_raster

__all__ = ["ImageCache", "RasterBuffer", "decode_raster"]
