"""Capture metadata extraction for Hologram.

Reads the embedded EXIF container of a photo into an ExifData record. Each
field is read on its own: a field that is missing, or stored with a type
other than the one expected, is left as None without affecting the others.
Nothing here raises for a bad file; the worst case is an empty record.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import exifread
import rawpy
from PIL import Image

from hologram.core.exiftool import ExifToolReader
from hologram.core.formats import FileKind, classify
from hologram.core.models import ExifData

logger = logging.getLogger(__name__)

# TIFF field types, as reported in exifread's IfdTag.field_type
ASCII = 2
SHORT = 3
LONG = 4
RATIONAL = 5

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# exifread keys: "<IFD name> <tag name>"
TAG_MAKE = "Image Make"
TAG_MODEL = "Image Model"
TAG_LENS_MODEL = "EXIF LensModel"
TAG_FOCAL_LENGTH = "EXIF FocalLength"
TAG_FNUMBER = "EXIF FNumber"
TAG_ISO = ("EXIF ISOSpeedRatings", "EXIF PhotographicSensitivity")
TAG_EXPOSURE_TIME = "EXIF ExposureTime"
TAG_EXPOSURE_MODE = "EXIF ExposureMode"
TAG_FLASH = "EXIF Flash"
TAG_WHITE_BALANCE = "EXIF WhiteBalance"
TAG_DATE_TAKEN = ("EXIF DateTimeOriginal", "Image DateTime")
TAG_OFFSET_TIME = "EXIF OffsetTimeOriginal"
TAG_WIDTH = "Image ImageWidth"
TAG_HEIGHT = "Image ImageLength"
TAG_ORIENTATION = "Image Orientation"


def _first_value(tag: Any, field_type: int) -> Any:
    """First value of a tag if it is stored as ``field_type``, else None."""
    if tag is None or getattr(tag, "field_type", None) != field_type:
        return None
    values = getattr(tag, "values", None)
    if not values:
        return None
    return values[0]


def _ascii(tag: Any) -> Optional[str]:
    """String value of an ASCII tag, stripped; None if empty or not ASCII."""
    if tag is None or getattr(tag, "field_type", None) != ASCII:
        return None
    text = str(tag.values).strip().strip("\x00").strip()
    return text or None


def _printable(tag: Any) -> Optional[str]:
    """The tag's own display string, e.g. "1/200" for an exposure time."""
    if tag is None:
        return None
    text = str(getattr(tag, "printable", "")).strip()
    return text or None


def _ratio_to_float(value: Any) -> Optional[float]:
    """Convert an exifread Ratio to float; None for a zero denominator."""
    if hasattr(value, "num") and hasattr(value, "den"):
        if value.den == 0:
            return None
        return float(value.num) / float(value.den)
    return None


def parse_exif_datetime(text: Optional[str], offset: Optional[str] = None) -> Optional[datetime]:
    """Parse an EXIF "YYYY:MM:DD HH:MM:SS" timestamp as an aware UTC datetime.

    Args:
        text: The timestamp string.
        offset: Optional "+HH:MM" offset the timestamp was recorded in.
            Without one the timestamp is taken as UTC.

    Returns:
        Aware datetime in UTC, or None if unparseable.
    """
    if not text:
        return None
    try:
        dt = datetime.strptime(text.strip().strip("\x00")[:19], EXIF_DATE_FORMAT)
    except ValueError:
        return None

    tz = timezone.utc
    if offset:
        offset = offset.strip()
        try:
            sign = -1 if offset[0] == "-" else 1
            hours, minutes = offset.lstrip("+-").split(":")
            tz = timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))
        except (ValueError, IndexError):
            tz = timezone.utc
    return dt.replace(tzinfo=tz).astimezone(timezone.utc)


def exif_from_tags(tags: Dict[str, Any]) -> ExifData:
    """Build an ExifData record from exifread's tag dict.

    Args:
        tags: Mapping returned by ``exifread.process_file``.

    Returns:
        ExifData with every recognizable field filled in.
    """
    exif = ExifData()

    exif.camera_make = _ascii(tags.get(TAG_MAKE))
    exif.camera_model = _ascii(tags.get(TAG_MODEL))
    exif.lens_model = _ascii(tags.get(TAG_LENS_MODEL))

    exif.focal_length = _ratio_to_float(_first_value(tags.get(TAG_FOCAL_LENGTH), RATIONAL))
    exif.aperture = _ratio_to_float(_first_value(tags.get(TAG_FNUMBER), RATIONAL))

    for key in TAG_ISO:
        iso = _first_value(tags.get(key), SHORT)
        if iso is not None:
            exif.iso = int(iso)
            break

    exif.shutter_speed = _printable(tags.get(TAG_EXPOSURE_TIME))
    exif.exposure_mode = _printable(tags.get(TAG_EXPOSURE_MODE))
    exif.flash = _printable(tags.get(TAG_FLASH))
    exif.white_balance = _printable(tags.get(TAG_WHITE_BALANCE))

    offset = _ascii(tags.get(TAG_OFFSET_TIME))
    for key in TAG_DATE_TAKEN:
        date_taken = parse_exif_datetime(_ascii(tags.get(key)), offset)
        if date_taken is not None:
            exif.date_taken = date_taken
            break

    width = _first_value(tags.get(TAG_WIDTH), LONG)
    height = _first_value(tags.get(TAG_HEIGHT), LONG)
    exif.width = int(width) if width is not None else None
    exif.height = int(height) if height is not None else None

    orientation = _first_value(tags.get(TAG_ORIENTATION), SHORT)
    exif.orientation = int(orientation) if orientation is not None else None

    return exif


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def exif_from_exiftool(tags: Dict[str, Any]) -> ExifData:
    """Build an ExifData record from an ExifTool "Group:Tag" dict.

    Numeric tags must come back as numbers (requested with the "#" suffix);
    anything else is treated as absent.
    """
    exif = ExifData()

    exif.camera_make = _text(tags.get("EXIF:Make"))
    exif.camera_model = _text(tags.get("EXIF:Model"))
    exif.lens_model = _text(tags.get("EXIF:LensModel"))
    exif.focal_length = _number(tags.get("EXIF:FocalLength"))
    exif.aperture = _number(tags.get("EXIF:FNumber"))

    iso = _number(tags.get("EXIF:ISO"))
    exif.iso = int(iso) if iso is not None and iso.is_integer() else None

    exif.shutter_speed = _text(tags.get("EXIF:ExposureTime"))
    exif.exposure_mode = _text(tags.get("EXIF:ExposureMode"))
    exif.flash = _text(tags.get("EXIF:Flash"))
    exif.white_balance = _text(tags.get("EXIF:WhiteBalance"))
    exif.date_taken = parse_exif_datetime(
        _text(tags.get("EXIF:DateTimeOriginal")),
        _text(tags.get("EXIF:OffsetTimeOriginal")),
    )

    for attr, key in (("width", "EXIF:ImageWidth"), ("height", "EXIF:ImageHeight"),
                      ("orientation", "EXIF:Orientation")):
        value = tags.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            setattr(exif, attr, value)

    return exif


def read_dimensions(path: str) -> Tuple[Optional[int], Optional[int]]:
    """Read pixel dimensions from the image itself.

    RAW files report their sensor output size through rawpy; raster files
    are opened with Pillow, which only reads the header.

    Returns:
        (width, height), or (None, None) if the file cannot be decoded.
    """
    try:
        if classify(path) is FileKind.RAW:
            with rawpy.imread(path) as raw:
                return int(raw.sizes.width), int(raw.sizes.height)
        with Image.open(path) as img:
            width, height = img.size
            return int(width), int(height)
    except (OSError, ValueError, rawpy.LibRawError, Image.DecompressionBombError) as e:
        logger.debug(f"Cannot read dimensions of {path}: {e}")
    except Exception as e:
        logger.debug(f"Unexpected error reading dimensions of {path}: {e}")
    return None, None


class MetadataExtractor:
    """Extracts capture metadata from photo files.

    Usage:
        extractor = MetadataExtractor()
        exif = extractor.extract("/photos/IMG_0001.CR2")

    With an ExifTool reader, files whose embedded container yields no tags
    at all are read again through ExifTool.
    """

    def __init__(self, exiftool_reader: Optional[ExifToolReader] = None):
        """Initialize extractor.

        Args:
            exiftool_reader: Running ExifToolReader used as a fallback, or None.
        """
        self.exiftool_reader = exiftool_reader

    def read_tags(self, path: str) -> Dict[str, Any]:
        """Parse the embedded metadata container of a file.

        Returns:
            exifread's tag dict; empty if the file has no readable container.

        Raises:
            OSError: If the file cannot be opened.
        """
        with open(path, "rb") as f:
            return exifread.process_file(f, details=False)

    def extract(self, path: str) -> ExifData:
        """Extract an ExifData record from a file. Never raises.

        Args:
            path: Path to a supported photo file.

        Returns:
            ExifData; empty when the file has no metadata or cannot be parsed.
        """
        try:
            tags = self.read_tags(path)
        except OSError as e:
            logger.debug(f"Cannot open {path} for metadata: {e}")
            return ExifData()
        except Exception as e:
            # exifread raises a range of errors on malformed containers
            logger.debug(f"Corrupt metadata in {path}: {e}")
            tags = {}

        if tags:
            exif = exif_from_tags(tags)
        elif self.exiftool_reader is not None and self.exiftool_reader.is_running:
            exif = exif_from_exiftool(self.exiftool_reader.read_tags(path))
        else:
            logger.debug(f"No metadata container found in {path}")
            exif = ExifData()

        if exif.width is None or exif.height is None:
            width, height = read_dimensions(path)
            if width is not None and height is not None:
                exif.width = width
                exif.height = height

        return exif
