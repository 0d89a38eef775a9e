"""Reading and writing photo catalogs.

A catalog is a JSON array of Photo dicts, the same shape the boundary
operations hand to a front-end. Saving one lets a collection be filtered or
summarized later without scanning again.
"""

import logging
import os
from typing import List

import orjson

from hologram.core.errors import CatalogError
from hologram.core.models import Photo

logger = logging.getLogger(__name__)


def dumps_photos(photos: List[Photo], indent: bool = False) -> bytes:
    """Serialize photos to JSON bytes."""
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps([p.to_dict() for p in photos], option=option)


def loads_photos(data: bytes) -> List[Photo]:
    """Parse photos from JSON bytes.

    Raises:
        CatalogError: If the data is not a JSON array of photo objects.
    """
    try:
        content = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise CatalogError(f"Invalid catalog JSON: {e}") from e

    if not isinstance(content, list):
        raise CatalogError("Catalog must be a JSON array of photos")

    photos = []
    for i, item in enumerate(content):
        if not isinstance(item, dict):
            raise CatalogError(f"Catalog entry {i} is not an object")
        try:
            photos.append(Photo.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Catalog entry {i} is invalid: {e}") from e
    return photos


def save_catalog(path: str, photos: List[Photo]) -> str:
    """Write photos to a catalog file, creating its directory if needed.

    Returns:
        The path written.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "wb") as f:
        f.write(dumps_photos(photos, indent=True))
    logger.info(f"Saved {len(photos)} photos to {path}")
    return path


def load_catalog(path: str) -> List[Photo]:
    """Read photos from a catalog file.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e
    photos = loads_photos(data)
    logger.debug(f"Loaded {len(photos)} photos from {path}")
    return photos
