"""Per-file processing for Hologram.

Turns one path into one Photo record, or nothing.
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Optional

from hologram.core.formats import file_type, is_supported
from hologram.core.logger import ScanLog
from hologram.core.metadata import MetadataExtractor
from hologram.core.models import ExifData, Photo
from hologram.core.thumbnails import (
    DEFAULT_THUMBNAIL_QUALITY,
    DEFAULT_THUMBNAIL_SIZE,
    generate_thumbnail,
)
from hologram.core.utils import normalize_filename

logger = logging.getLogger(__name__)


class FileProcessor:
    """Builds Photo records from files.

    process_file() is safe to call from worker threads: it touches no shared
    state apart from the scan log, which serializes its own writes.

    Usage:
        processor = FileProcessor(thumbnail_size=200)
        photo = processor.process_file("/photos/IMG_0001.JPG")
        if photo is None:
            ...  # unsupported or unreadable
    """

    def __init__(
        self,
        extractor: Optional[MetadataExtractor] = None,
        generate_thumbnails: bool = True,
        thumbnail_size: int = DEFAULT_THUMBNAIL_SIZE,
        thumbnail_quality: int = DEFAULT_THUMBNAIL_QUALITY,
        scan_log: Optional[ScanLog] = None
    ):
        """Initialize processor.

        Args:
            extractor: Metadata extractor to use (default: a new one without
                an ExifTool fallback).
            generate_thumbnails: Whether to build preview thumbnails.
            thumbnail_size: Longest thumbnail side in pixels.
            thumbnail_quality: JPEG quality for thumbnails.
            scan_log: Optional log receiving one line per skipped file.
        """
        self.extractor = extractor or MetadataExtractor()
        self.generate_thumbnails = generate_thumbnails
        self.thumbnail_size = thumbnail_size
        self.thumbnail_quality = thumbnail_quality
        self.scan_log = scan_log

    def _skip(self, path: str, reason: str) -> None:
        logger.debug(f"Skipping {path}: {reason}")
        if self.scan_log:
            self.scan_log.log(f"Skipped: {path} ({reason})")

    def _extract(self, path: str) -> ExifData:
        try:
            return self.extractor.extract(path)
        except Exception as e:
            logger.debug(f"Metadata extraction failed for {path}: {e}")
            return ExifData()

    def _thumbnail(self, path: str) -> Optional[str]:
        if not self.generate_thumbnails:
            return None
        try:
            return generate_thumbnail(path, self.thumbnail_size, self.thumbnail_quality)
        except Exception as e:
            logger.debug(f"Thumbnail generation failed for {path}: {e}")
            return None

    def process_file(self, path: str) -> Optional[Photo]:
        """Build a Photo for one file.

        Metadata and thumbnail failures leave those parts empty; only an
        unsupported extension or an unreadable file skips the file entirely.

        Args:
            path: Path to the file.

        Returns:
            The new Photo, or None if the file was skipped.
        """
        if not is_supported(path):
            self._skip(path, "unsupported format")
            return None

        try:
            st = os.stat(path)
        except OSError as e:
            self._skip(path, f"cannot stat: {e}")
            return None

        try:
            modified_at = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            modified_at = datetime.now(timezone.utc)

        exif = self._extract(path)
        thumbnail = self._thumbnail(path)

        return Photo(
            id=str(uuid.uuid4()),
            file_path=path,
            file_name=normalize_filename(os.path.basename(path)),
            file_size=st.st_size,
            file_type=file_type(path),
            exif=exif,
            thumbnail=thumbnail,
            created_at=datetime.now(timezone.utc),
            modified_at=modified_at,
        )
