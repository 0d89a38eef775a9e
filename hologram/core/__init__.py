"""Core scanning and indexing logic for Hologram."""

from hologram.core.errors import (
    HologramError,
    FolderNotFoundError,
    NotAFolderError,
    ImageNotFoundError,
    UnsupportedFormatError,
    CatalogError,
)

from hologram.core.models import (
    ExifData,
    Photo,
    PhotoFilter,
    PhotoStats,
    ScanProgress,
    ScanResult,
    ProgressSink,
    DiscoveryCallback,
)

from hologram.core.formats import (
    FileKind,
    RASTER_EXTENSIONS,
    RAW_EXTENSIONS,
    SUPPORTED_EXTENSIONS,
    classify,
    is_supported,
    is_raw,
    file_type,
)

from hologram.core.config import Settings

from hologram.core.logger import (
    BufferedLogger,
    NullLogger,
    create_logger,
    configure_logging,
)

from hologram.core.exiftool import (
    get_exiftool_path,
    is_exiftool_available,
    ExifToolReader,
)

from hologram.core.metadata import MetadataExtractor

from hologram.core.thumbnails import generate_thumbnail

from hologram.core.scanner import FileScanner

from hologram.core.processor import FileProcessor

from hologram.core.pairing import (
    PairingPolicy,
    pair_photos,
)

from hologram.core.filters import filter_photos

from hologram.core.stats import compute_stats

from hologram.core.loader import load_full_resolution_image

from hologram.core.catalog import (
    load_catalog,
    save_catalog,
)

from hologram.core.orchestrator import ScanOrchestrator

__all__ = [
    # Errors
    "HologramError",
    "FolderNotFoundError",
    "NotAFolderError",
    "ImageNotFoundError",
    "UnsupportedFormatError",
    "CatalogError",
    # Models
    "ExifData",
    "Photo",
    "PhotoFilter",
    "PhotoStats",
    "ScanProgress",
    "ScanResult",
    "ProgressSink",
    "DiscoveryCallback",
    # Formats
    "FileKind",
    "RASTER_EXTENSIONS",
    "RAW_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "classify",
    "is_supported",
    "is_raw",
    "file_type",
    # Config
    "Settings",
    # Logger
    "BufferedLogger",
    "NullLogger",
    "create_logger",
    "configure_logging",
    # ExifTool
    "get_exiftool_path",
    "is_exiftool_available",
    "ExifToolReader",
    # Pipeline
    "MetadataExtractor",
    "generate_thumbnail",
    "FileScanner",
    "FileProcessor",
    "PairingPolicy",
    "pair_photos",
    "filter_photos",
    "compute_stats",
    "load_full_resolution_image",
    "load_catalog",
    "save_catalog",
    # Orchestrator
    "ScanOrchestrator",
]
