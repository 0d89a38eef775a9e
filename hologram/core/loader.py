"""Full-resolution image delivery."""

import logging
import os

from hologram.core.errors import ImageNotFoundError, UnsupportedFormatError
from hologram.core.formats import is_supported

logger = logging.getLogger(__name__)


def load_full_resolution_image(file_path: str) -> bytes:
    """Read a photo file's bytes unchanged.

    Args:
        file_path: Path to a supported photo file.

    Returns:
        The file contents.

    Raises:
        ImageNotFoundError: If the file does not exist.
        UnsupportedFormatError: If the extension is not supported.
        OSError: If the file exists but cannot be read.
    """
    if not os.path.exists(file_path):
        raise ImageNotFoundError(file_path)
    if not is_supported(file_path):
        raise UnsupportedFormatError(file_path)

    with open(file_path, "rb") as f:
        data = f.read()
    logger.debug(f"Loaded {len(data)} bytes from {file_path}")
    return data
