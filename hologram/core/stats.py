"""Aggregate statistics over photo collections."""

from collections import Counter
from typing import List

from hologram.core.formats import is_raw
from hologram.core.models import Photo, PhotoStats


def compute_stats(photos: List[Photo]) -> PhotoStats:
    """Summarize a photo collection.

    ``jpeg_count`` is every non-RAW photo, whatever its actual format.
    ``paired_count`` counts photos, so each pair contributes two.

    Args:
        photos: Collection to summarize.

    Returns:
        PhotoStats with counts and camera/lens histograms.
    """
    raw_count = sum(1 for p in photos if is_raw(p.file_path))
    cameras = Counter(p.exif.camera_model for p in photos if p.exif.camera_model is not None)
    lenses = Counter(p.exif.lens_model for p in photos if p.exif.lens_model is not None)

    return PhotoStats(
        total_photos=len(photos),
        raw_count=raw_count,
        jpeg_count=len(photos) - raw_count,
        paired_count=sum(1 for p in photos if p.paired_with is not None),
        cameras=dict(cameras),
        lenses=dict(lenses),
    )
