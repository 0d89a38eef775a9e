"""RAW/raster sibling pairing.

A camera shooting RAW+JPEG writes two files with the same stem, e.g.
``IMG_0001.CR2`` and ``IMG_0001.JPG``. Photos are grouped by stem (the
directory is ignored) and each group contributes at most one RAW/raster
pair. Which members form the pair when a group holds several candidates of
one kind is decided by a PairingPolicy.
"""

import logging
from collections import defaultdict
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from hologram.core.formats import is_raw
from hologram.core.models import Photo
from hologram.core.utils import get_stem, normalize_filename

logger = logging.getLogger(__name__)


class PairingPolicy(Enum):
    """How to resolve a stem group with more than one candidate of a kind."""
    # The last RAW and the last raster in scan order are paired
    LAST_SEEN = "last"
    # The RAW/raster combination closest together in modification time is paired
    NEAREST_MTIME = "nearest"
    # Ambiguous groups are left unpaired
    SKIP_AMBIGUOUS = "skip"

    @classmethod
    def from_name(cls, name: str) -> "PairingPolicy":
        """Look up a policy by its settings name ("last", "nearest", "skip").

        Raises:
            ValueError: If name is not a known policy.
        """
        for policy in cls:
            if policy.value == name:
                return policy
        raise ValueError(f"Unknown pairing policy: {name!r}")


def _mtime(photo: Photo) -> datetime:
    return photo.modified_at


def _group_by_stem(photos: List[Photo]) -> Dict[str, List[Photo]]:
    groups: Dict[str, List[Photo]] = defaultdict(list)
    for photo in photos:
        groups[normalize_filename(get_stem(photo.file_path))].append(photo)
    return groups


def _pick_last_seen(raws: List[Photo], rasters: List[Photo]) -> Tuple[Photo, Photo]:
    return raws[-1], rasters[-1]


def _pick_nearest(raws: List[Photo], rasters: List[Photo]) -> Tuple[Photo, Photo]:
    best: Optional[Tuple[Photo, Photo]] = None
    best_gap = None
    for raw in raws:
        for raster in rasters:
            gap = abs((_mtime(raw) - _mtime(raster)).total_seconds())
            # Strict comparison keeps the earliest combination on ties
            if best_gap is None or gap < best_gap:
                best, best_gap = (raw, raster), gap
    return best


def select_pair(
    group: List[Photo],
    policy: PairingPolicy = PairingPolicy.LAST_SEEN
) -> Optional[Tuple[Photo, Photo]]:
    """Choose the (raw, raster) pair for one stem group.

    Args:
        group: Photos sharing a stem, in scan order.
        policy: How to resolve groups with several candidates of one kind.

    Returns:
        (raw, raster) tuple, or None if the group yields no pair.
    """
    raws = [p for p in group if is_raw(p.file_path)]
    rasters = [p for p in group if not is_raw(p.file_path)]
    if not raws or not rasters:
        return None

    if len(raws) == 1 and len(rasters) == 1:
        return raws[0], rasters[0]

    logger.debug(
        f"Ambiguous pairing group '{get_stem(group[0].file_path)}': "
        f"{len(raws)} RAW, {len(rasters)} raster ({policy.value})"
    )
    if policy is PairingPolicy.SKIP_AMBIGUOUS:
        return None
    if policy is PairingPolicy.NEAREST_MTIME:
        return _pick_nearest(raws, rasters)
    return _pick_last_seen(raws, rasters)


def pair_photos(
    photos: List[Photo],
    policy: PairingPolicy = PairingPolicy.LAST_SEEN
) -> int:
    """Link RAW and raster photos that share a filename stem.

    Sets ``paired_with`` on both members of each pair, pointing at each
    other. Photos outside a pair are not touched. Must only be called once
    no other thread is reading or writing the photos.

    Args:
        photos: Collection to pair in place.
        policy: How to resolve groups with several candidates of one kind.

    Returns:
        Number of pairs formed.
    """
    pair_count = 0
    for group in _group_by_stem(photos).values():
        if len(group) < 2:
            continue
        pair = select_pair(group, policy)
        if pair is None:
            continue
        raw, raster = pair
        raw.paired_with = raster.id
        raster.paired_with = raw.id
        pair_count += 1

    logger.debug(f"Paired {pair_count} RAW/raster sibling(s) among {len(photos)} photos")
    return pair_count
