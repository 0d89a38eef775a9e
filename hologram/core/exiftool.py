"""ExifTool management for Hologram.

Finds the ExifTool executable and keeps one process running for metadata
reads. Used as a fallback for containers the built-in EXIF parser cannot
walk (CR3 in particular).
"""

import logging
import os
import shutil
import sys
import threading
from typing import Dict, List, Optional

import exiftool

logger = logging.getLogger(__name__)

# ExifTool paths
EXIFTOOL_DIR = os.path.join("tools", "exiftool")
EXIFTOOL_EXE = "exiftool.exe" if sys.platform == "win32" else "exiftool"

# Tags read for an ExifData record, in ExifTool "Group:Tag" form.
# A trailing "#" asks for the numeric value instead of the printed one.
EXIFTOOL_TAGS = [
    "EXIF:Make",
    "EXIF:Model",
    "EXIF:LensModel",
    "EXIF:FocalLength#",
    "EXIF:FNumber#",
    "EXIF:ISO#",
    "EXIF:ExposureTime",
    "EXIF:ExposureMode",
    "EXIF:Flash",
    "EXIF:WhiteBalance",
    "EXIF:DateTimeOriginal",
    "EXIF:OffsetTimeOriginal",
    "EXIF:ImageWidth#",
    "EXIF:ImageHeight#",
    "EXIF:Orientation#",
]


def _default_base_dir() -> str:
    # Go up from hologram/core/ to project root
    return os.path.dirname(os.path.dirname(os.path.dirname(__file__)))


def get_exiftool_path(base_dir: Optional[str] = None) -> Optional[str]:
    """Find ExifTool executable.

    Checks in order:
    1. System PATH
    2. Local tools directory

    Args:
        base_dir: Base directory for local tools folder.
                 Defaults to the project root.

    Returns:
        Path to exiftool executable, or None if not found.
    """
    if shutil.which("exiftool"):
        return "exiftool"

    if base_dir is None:
        base_dir = _default_base_dir()

    local_path = os.path.join(base_dir, EXIFTOOL_DIR, EXIFTOOL_EXE)
    if os.path.exists(local_path):
        return local_path

    return None


def is_exiftool_available(base_dir: Optional[str] = None) -> bool:
    """Check if ExifTool is available.

    Returns:
        True if ExifTool can be found.
    """
    return get_exiftool_path(base_dir) is not None


class ExifToolReader:
    """Manages an ExifTool process for metadata reads.

    Reads are serialized with a lock because one ExifTool process handles
    one request at a time; worker threads can share a single reader.

    Usage:
        with ExifToolReader() as et:
            tags = et.read_tags("/path/to/photo.cr3")
    """

    def __init__(self, base_dir: Optional[str] = None):
        """Initialize reader.

        Args:
            base_dir: Base directory for local tools folder.
        """
        self._helper = None
        self._exiftool_path: Optional[str] = None
        self._base_dir = base_dir
        self._lock = threading.Lock()

    def start(self) -> bool:
        """Start ExifTool process.

        Returns:
            True if started successfully, False otherwise.
        """
        self._exiftool_path = get_exiftool_path(self._base_dir)
        if not self._exiftool_path:
            logger.warning("ExifTool not found. Install from https://exiftool.org/")
            return False

        try:
            self._helper = exiftool.ExifToolHelper(
                executable=self._exiftool_path,
                common_args=["-G"],
                check_tag_names=False,  # allow the "#" numeric suffix
            )
            self._helper.run()
            return True
        except Exception as e:
            logger.error(f"Failed to start ExifTool: {e}")
            self._helper = None
            return False

    def stop(self) -> None:
        """Stop ExifTool process."""
        if self._helper:
            try:
                self._helper.terminate()
            except Exception as e:
                logger.debug(f"Error stopping ExifTool: {e}")
            self._helper = None

    def read_tags(self, filepath: str, tags: Optional[List[str]] = None) -> Dict:
        """Read tags from a file.

        Args:
            filepath: Path to file.
            tags: Tags to read (default: the tags needed for ExifData).

        Returns:
            Dict of tag values, empty if error.
        """
        if not self._helper:
            return {}

        try:
            with self._lock:
                result = self._helper.get_tags(filepath, tags or EXIFTOOL_TAGS)
            return result[0] if result else {}
        except Exception as e:
            logger.debug(f"Failed to read tags from {filepath}: {e}")
            return {}

    @property
    def is_running(self) -> bool:
        """Check if ExifTool is running."""
        return self._helper is not None

    @property
    def exiftool_path(self) -> Optional[str]:
        """Get the path to ExifTool executable."""
        return self._exiftool_path

    def __enter__(self) -> "ExifToolReader":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
