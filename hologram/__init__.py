"""Hologram - Index photo folders with metadata, thumbnails and RAW/JPEG pairing.

High-level API:
    import hologram

    photos = hologram.scan("/path/to/photos")
    canon = hologram.filter_photos(photos, hologram.PhotoFilter(camera_make="Canon"))
    print(hologram.get_photo_stats(canon))

For progress reporting:
    hologram.scan_with_progress("/path/to/photos", lambda p: print(p.percentage))
"""

__version__ = "1.0.0"

# Public API exports
from hologram.api import (
    scan,
    scan_with_progress,
    filter_photos,
    get_photo_stats,
    load_full_resolution_image,
)
from hologram.core.config import Settings
from hologram.core.errors import (
    HologramError,
    FolderNotFoundError,
    NotAFolderError,
    ImageNotFoundError,
    UnsupportedFormatError,
)
from hologram.core.models import (
    ExifData,
    Photo,
    PhotoFilter,
    ScanProgress,
)
from hologram.core.orchestrator import ScanOrchestrator

__all__ = [
    "scan",
    "scan_with_progress",
    "filter_photos",
    "get_photo_stats",
    "load_full_resolution_image",
    "Settings",
    "HologramError",
    "FolderNotFoundError",
    "NotAFolderError",
    "ImageNotFoundError",
    "UnsupportedFormatError",
    "ExifData",
    "Photo",
    "PhotoFilter",
    "ScanProgress",
    "ScanOrchestrator",
    "__version__",
]
