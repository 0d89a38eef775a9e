"""Data models for Hologram."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass through a datetime) as UTC-aware.

    Accepts a trailing ``Z``. Naive values are taken to be UTC.

    Returns:
        Aware datetime, or None if value is empty or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO-8601 for serialization (None passes through)."""
    if value is None:
        return None
    return value.isoformat()


@dataclass(slots=True)
class ExifData:
    """Capture metadata read from a photo.

    Every field is optional. A missing field means the source did not carry
    it; a record with every field missing means either no metadata at all or
    a container that could not be parsed.
    """
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    lens_model: Optional[str] = None
    focal_length: Optional[float] = None
    aperture: Optional[float] = None
    shutter_speed: Optional[str] = None
    iso: Optional[int] = None
    exposure_mode: Optional[str] = None
    flash: Optional[str] = None
    white_balance: Optional[str] = None
    date_taken: Optional[datetime] = None
    width: Optional[int] = None
    height: Optional[int] = None
    orientation: Optional[int] = None

    def is_empty(self) -> bool:
        """True if no field is present."""
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["date_taken"] = format_datetime(self.date_taken)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ExifData":
        """Create from a serialized dict; unknown keys are ignored."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["date_taken"] = parse_datetime(values.get("date_taken"))
        return cls(**values)


@dataclass(slots=True)
class Photo:
    """One indexed photo file.

    Everything except ``paired_with`` is fixed when the record is built
    during a scan. ``paired_with`` is written only by the pairing pass.

    ``file_name`` is NFC-normalized while ``file_path`` is kept as the
    filesystem reports it, so on macOS the two can spell the name differently.
    """
    id: str
    file_path: str
    file_name: str
    file_size: int
    file_type: str
    exif: ExifData = field(default_factory=ExifData)
    thumbnail: Optional[str] = None  # base64 JPEG
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    modified_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    paired_with: Optional[str] = None

    @property
    def is_paired(self) -> bool:
        return self.paired_with is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "file_path": self.file_path,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "file_type": self.file_type,
            "thumbnail": self.thumbnail,
            "exif": self.exif.to_dict(),
            "created_at": format_datetime(self.created_at),
            "modified_at": format_datetime(self.modified_at),
            "paired_with": self.paired_with,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Photo":
        """Create from a serialized dict.

        Raises:
            KeyError: If an identity field (id, file_path, ...) is missing.
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=str(data["id"]),
            file_path=data["file_path"],
            file_name=data["file_name"],
            file_size=int(data["file_size"]),
            file_type=data["file_type"],
            exif=ExifData.from_dict(data.get("exif")),
            thumbnail=data.get("thumbnail"),
            created_at=parse_datetime(data.get("created_at")) or now,
            modified_at=parse_datetime(data.get("modified_at")) or now,
            paired_with=data.get("paired_with"),
        )


@dataclass
class PhotoFilter:
    """Constraints for narrowing a photo collection.

    A field left as None places no constraint. Ranges are (min, max) and
    inclusive on both ends. String fields match by case-sensitive substring,
    ``file_type`` by exact match against the uppercase type.
    """
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    lens_model: Optional[str] = None
    focal_length_range: Optional[Tuple[float, float]] = None
    aperture_range: Optional[Tuple[float, float]] = None
    iso_range: Optional[Tuple[int, int]] = None
    date_range: Optional[Tuple[datetime, datetime]] = None
    file_type: Optional[str] = None

    def __post_init__(self):
        # Naive bounds are taken to be UTC, like every other datetime here
        if self.date_range is not None:
            start, end = self.date_range
            bounds = (parse_datetime(start), parse_datetime(end))
            if None in bounds:
                raise ValueError(f"Invalid date_range: {self.date_range!r}")
            self.date_range = bounds

    def is_empty(self) -> bool:
        """True if no constraint is set."""
        return all(getattr(self, f.name) is None for f in fields(self))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PhotoFilter":
        """Create from a dict shaped like the front-end's filter object."""
        if not data:
            return cls()

        def _pair(key, convert):
            value = data.get(key)
            if value is None:
                return None
            low, high = value
            return (convert(low), convert(high))

        date_range = data.get("date_range")
        if date_range is not None:
            date_range = tuple(date_range)

        return cls(
            camera_make=data.get("camera_make"),
            camera_model=data.get("camera_model"),
            lens_model=data.get("lens_model"),
            focal_length_range=_pair("focal_length_range", float),
            aperture_range=_pair("aperture_range", float),
            iso_range=_pair("iso_range", int),
            date_range=date_range,
            file_type=data.get("file_type"),
        )


@dataclass
class ScanProgress:
    """Progress snapshot emitted after each file of a scan completes.

    The last event of a finished scan has ``current == total``,
    ``percentage == 100.0`` and ``current_file`` set to None.
    """
    current: int
    total: int
    percentage: float
    current_file: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.current_file is None and self.current == self.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "total": self.total,
            "percentage": self.percentage,
            "current_file": self.current_file,
        }


@dataclass
class PhotoStats:
    """Aggregate counts over a photo collection."""
    total_photos: int = 0
    raw_count: int = 0
    jpeg_count: int = 0
    paired_count: int = 0
    cameras: Dict[str, int] = field(default_factory=dict)
    lenses: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_photos": self.total_photos,
            "raw_count": self.raw_count,
            "jpeg_count": self.jpeg_count,
            "paired_count": self.paired_count,
            "cameras": dict(self.cameras),
            "lenses": dict(self.lenses),
        }


@dataclass
class ScanResult:
    """Results from a folder scan.

    Returned by ScanOrchestrator.scan(). ``photos`` is already paired.
    """
    folder_path: str
    photos: List[Photo] = field(default_factory=list)
    total_files: int = 0      # Supported files discovered
    skipped_count: int = 0    # Discovered files that produced no Photo
    pair_count: int = 0
    elapsed_time: float = 0.0
    cancelled: bool = False

    @property
    def photo_count(self) -> int:
        return len(self.photos)


# Type aliases for callbacks
# Receives one ScanProgress per completed file, plus the final 100% event
ProgressSink = Callable[[ScanProgress], None]

# (files_found, message) -> None, during directory discovery
DiscoveryCallback = Callable[[int, str], None]
