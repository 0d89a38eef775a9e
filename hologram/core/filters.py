"""Filtering of photo collections."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Tuple

from hologram.core.models import Photo, PhotoFilter

logger = logging.getLogger(__name__)

# Below this, thread pool overhead outweighs the benefit
_PARALLEL_FILTER_THRESHOLD = 5000
_FILTER_CHUNK_SIZE = 2000


def _contains(value: Optional[str], needle: Optional[str]) -> bool:
    if needle is None:
        return True
    return value is not None and needle in value


def _in_range(value: Any, bounds: Optional[Tuple[Any, Any]]) -> bool:
    if bounds is None:
        return True
    if value is None:
        return False
    low, high = bounds
    return low <= value <= high


def matches(photo: Photo, photo_filter: PhotoFilter) -> bool:
    """Check one photo against every constraint set on the filter.

    String constraints match by case-sensitive substring, ranges are
    inclusive, ``file_type`` must match exactly. A photo without the field a
    constraint refers to never matches that constraint.
    """
    exif = photo.exif
    return (
        _contains(exif.camera_make, photo_filter.camera_make)
        and _contains(exif.camera_model, photo_filter.camera_model)
        and _contains(exif.lens_model, photo_filter.lens_model)
        and _in_range(exif.focal_length, photo_filter.focal_length_range)
        and _in_range(exif.aperture, photo_filter.aperture_range)
        and _in_range(exif.iso, photo_filter.iso_range)
        and _in_range(exif.date_taken, photo_filter.date_range)
        and (photo_filter.file_type is None or photo.file_type == photo_filter.file_type)
    )


def _filter_chunk(photos: List[Photo], photo_filter: PhotoFilter) -> List[Photo]:
    return [p for p in photos if matches(p, photo_filter)]


def filter_photos(
    photos: List[Photo],
    photo_filter: PhotoFilter,
    max_workers: Optional[int] = None
) -> List[Photo]:
    """Return the photos matching all constraints of a filter.

    Input order is preserved. The input is not modified.

    Args:
        photos: Collection to filter.
        photo_filter: Constraints to apply; an empty filter keeps everything.
        max_workers: Threads for large collections (default: executor default).

    Returns:
        New list of matching photos.
    """
    if photo_filter.is_empty():
        return list(photos)

    if len(photos) < _PARALLEL_FILTER_THRESHOLD:
        result = _filter_chunk(photos, photo_filter)
    else:
        chunks = [
            photos[i:i + _FILTER_CHUNK_SIZE]
            for i in range(0, len(photos), _FILTER_CHUNK_SIZE)
        ]
        result = []
        # map() yields in submission order
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for chunk_result in executor.map(lambda c: _filter_chunk(c, photo_filter), chunks):
                result.extend(chunk_result)

    logger.debug(f"Filter kept {len(result)} of {len(photos)} photos")
    return result
