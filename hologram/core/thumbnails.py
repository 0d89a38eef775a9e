"""Preview thumbnail generation.

Thumbnails are JPEGs bounded to a square box (aspect ratio kept), returned
as base64 text so they can travel inline with a photo record.
"""

import base64
import io
import logging
from typing import Optional

import rawpy
from PIL import Image, ImageOps

from hologram.core.formats import FileKind, classify

logger = logging.getLogger(__name__)

DEFAULT_THUMBNAIL_SIZE = 200
DEFAULT_THUMBNAIL_QUALITY = 80


def _open_raw_preview(path: str) -> Image.Image:
    """Decode a RAW file into a Pillow image for previewing.

    The embedded preview is used when the file carries one; otherwise the
    sensor data is demosaiced at half size.

    Raises:
        rawpy.LibRawError: If the file cannot be decoded.
    """
    with rawpy.imread(path) as raw:
        try:
            thumb = raw.extract_thumb()
        except (rawpy.LibRawNoThumbnailError, rawpy.LibRawUnsupportedThumbnailError):
            thumb = None

        if thumb is not None and thumb.format == rawpy.ThumbFormat.JPEG:
            img = Image.open(io.BytesIO(thumb.data))
            img.load()
            return img
        if thumb is not None and thumb.format == rawpy.ThumbFormat.BITMAP:
            return Image.fromarray(thumb.data)

        rgb = raw.postprocess(half_size=True, use_camera_wb=True)
        return Image.fromarray(rgb)


def encode_jpeg_base64(img: Image.Image, quality: int = DEFAULT_THUMBNAIL_QUALITY) -> str:
    """Encode an image as JPEG and return it as base64 text."""
    if img.mode != "RGB":
        img = img.convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=quality)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def generate_thumbnail(
    path: str,
    size: int = DEFAULT_THUMBNAIL_SIZE,
    quality: int = DEFAULT_THUMBNAIL_QUALITY
) -> Optional[str]:
    """Generate a base64 JPEG thumbnail for a photo.

    Args:
        path: Path to a supported photo file.
        size: Longest side of the thumbnail in pixels.
        quality: JPEG quality (1-95).

    Returns:
        Base64-encoded JPEG, or None if the image cannot be decoded.
    """
    try:
        if classify(path) is FileKind.RAW:
            img = _open_raw_preview(path)
        else:
            with Image.open(path) as src:
                # Returns a detached, upright copy
                img = ImageOps.exif_transpose(src)

        img.thumbnail((size, size))
        return encode_jpeg_base64(img, quality)
    except (OSError, ValueError, rawpy.LibRawError, Image.DecompressionBombError) as e:
        logger.debug(f"Cannot generate thumbnail for {path}: {e}")
    except Exception as e:
        logger.debug(f"Unexpected error generating thumbnail for {path}: {e}")
    return None
