"""Boundary operations of Hologram.

These are the calls a front-end makes. Each is a thin wrapper around the
core components; transport of the results is up to the caller.
"""

import threading
from typing import Any, Dict, List, Optional, Union

from hologram.core.config import Settings
from hologram.core.filters import filter_photos as _filter_photos
from hologram.core.loader import load_full_resolution_image
from hologram.core.models import Photo, PhotoFilter, ProgressSink
from hologram.core.orchestrator import ScanOrchestrator
from hologram.core.stats import compute_stats


def scan(
    folder_path: str,
    settings: Optional[Settings] = None,
    cancel_event: Optional[threading.Event] = None
) -> List[Photo]:
    """Scan a folder and return its paired photo collection.

    Raises:
        FolderNotFoundError: If folder_path does not exist.
        NotAFolderError: If folder_path is not a directory.
    """
    return ScanOrchestrator(settings).scan(folder_path, cancel_event=cancel_event).photos


def scan_with_progress(
    folder_path: str,
    progress_sink: ProgressSink,
    settings: Optional[Settings] = None,
    cancel_event: Optional[threading.Event] = None
) -> List[Photo]:
    """Scan a folder, reporting a ScanProgress to progress_sink after each file.

    The last event of a completed scan reports 100% with no file name.
    Exceptions raised by progress_sink are logged and otherwise ignored.
    """
    orchestrator = ScanOrchestrator(settings)
    return orchestrator.scan(folder_path, on_progress=progress_sink, cancel_event=cancel_event).photos


def filter_photos(
    photos: List[Photo],
    photo_filter: Union[PhotoFilter, Dict[str, Any]]
) -> List[Photo]:
    """Return the photos matching every constraint of photo_filter.

    photo_filter may also be a plain dict shaped like PhotoFilter, as sent
    by a front-end; date bounds are then ISO-8601 strings.

    Raises:
        ValueError: If a dict filter holds an unparseable date bound.
    """
    if isinstance(photo_filter, dict):
        photo_filter = PhotoFilter.from_dict(photo_filter)
    return _filter_photos(photos, photo_filter)


def get_photo_stats(photos: List[Photo]) -> Dict[str, Any]:
    """Summary counts and camera/lens histograms for a collection."""
    return compute_stats(photos).to_dict()


__all__ = [
    "scan",
    "scan_with_progress",
    "filter_photos",
    "get_photo_stats",
    "load_full_resolution_image",
]
