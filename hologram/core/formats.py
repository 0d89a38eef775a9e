"""File format classification by extension.

Only the extension is consulted; file contents are never read. The same
check prunes directory walks, gates the full-resolution loader and decides
which side of a RAW/raster pair a photo sits on.
"""

import os
from enum import Enum

RASTER_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "tiff", "tif"})
RAW_EXTENSIONS = frozenset({"cr2", "cr3", "arw", "nef", "dng"})
SUPPORTED_EXTENSIONS = RASTER_EXTENSIONS | RAW_EXTENSIONS


class FileKind(Enum):
    """What Hologram can do with a file, judged by its extension."""
    UNSUPPORTED = "unsupported"
    RASTER = "raster"
    RAW = "raw"


def get_extension(path: str) -> str:
    """Get the lowercase extension of a path without the leading dot.

    Returns an empty string for paths without an extension. Dotfiles such
    as ``.jpg`` have no extension, matching ``os.path.splitext``.
    """
    ext = os.path.splitext(os.path.basename(path))[1]
    return ext[1:].lower()


def classify(path: str) -> FileKind:
    """Classify a path as RAW, raster or unsupported.

    Args:
        path: File path (need not exist).

    Returns:
        The FileKind for the path's extension.
    """
    ext = get_extension(path)
    if ext in RAW_EXTENSIONS:
        return FileKind.RAW
    if ext in RASTER_EXTENSIONS:
        return FileKind.RASTER
    return FileKind.UNSUPPORTED


def is_supported(path: str) -> bool:
    """True if the path has a supported raster or RAW extension."""
    return classify(path) is not FileKind.UNSUPPORTED


def is_raw(path: str) -> bool:
    """True if the path has a camera RAW extension."""
    return classify(path) is FileKind.RAW


def file_type(path: str) -> str:
    """Display type of a file: its extension uppercased, e.g. ``"NEF"``.

    Returns ``"unknown"`` when the path has no extension.
    """
    ext = os.path.splitext(os.path.basename(path))[1]
    return ext[1:].upper() if ext else "unknown"
