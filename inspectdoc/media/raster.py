"""Decode and normalise raw image bytes into drawable raster buffers."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ..exceptions import MediaError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = frozenset({"JPEG", "PNG", "GIF", "WEBP", "BMP"})


@dataclass(frozen=True, slots=True)
class RasterBuffer:
    """Encoded image ready for a drawing surface."""
    data: bytes
    width: int
    height: int
    format: str
    source: str = ""


def decode_raster(data: bytes, source: str = "", *, max_dimension: int = 1600, jpeg_quality: int = 85) -> RasterBuffer:
    """
    Decode image bytes with Pillow and re-encode them for embedding.

    Images are downscaled so neither side exceeds ``max_dimension``. Images
    with transparency are written as PNG, everything else as JPEG.

    Raises:
        MediaError: if the bytes are empty, unreadable or of an unsupported format
    """
    if not data:
        raise MediaError("Empty image data", source)

    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = (image.format or "").upper()
            if image_format not in SUPPORTED_FORMATS:
                raise MediaError("Unsupported image format", f"{source}: {image_format or 'unknown'}")
            image.load()
            has_alpha = image.mode in {"RGBA", "LA"} or (image.mode == "P" and "transparency" in image.info)
            converted = image.convert("RGBA" if has_alpha else "RGB")
    except UnidentifiedImageError as exc:
        raise MediaError("Cannot identify image", source) from exc
    except Image.DecompressionBombError as exc:
        raise MediaError("Image too large to decode", source) from exc
    except (OSError, ValueError) as exc:
        raise MediaError("Cannot decode image", f"{source}: {exc}") from exc

    if max(converted.size) > max_dimension:
        converted.thumbnail((max_dimension, max_dimension))
        logger.debug(f"Downscaled {source or 'image'} to {converted.size[0]}x{converted.size[1]}")

    output = io.BytesIO()
    if has_alpha:
        converted.save(output, format="PNG", optimize=True)
        out_format = "PNG"
    else:
        converted.save(output, format="JPEG", quality=jpeg_quality)
        out_format = "JPEG"

    width, height = converted.size
    return RasterBuffer(data=output.getvalue(), width=width, height=height, format=out_format, source=source)
