"""Pytest configuration and fixtures."""

import os
import tempfile
import shutil
from datetime import datetime, timezone
from typing import Callable, Generator, Optional

import pytest
from PIL import Image

from hologram.core.models import ExifData, Photo

# EXIF tag ids written by the fixtures
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110


def write_image(
    path: str,
    size=(64, 48),
    color=(200, 30, 30),
    make: Optional[str] = None,
    model: Optional[str] = None,
    fmt: Optional[str] = None
) -> str:
    """Write a small real image, optionally with Make/Model EXIF tags."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    img = Image.new("RGB", size, color)
    kwargs = {}
    if make or model:
        exif = Image.Exif()
        if make:
            exif[TAG_MAKE] = make
        if model:
            exif[TAG_MODEL] = model
        kwargs["exif"] = exif
    img.save(path, format=fmt, **kwargs)
    return path


def write_bytes(path: str, data: bytes) -> str:
    """Write raw bytes (fake RAW files, corrupt images)."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return path


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir)


@pytest.fixture
def image_writer() -> Callable[..., str]:
    """The write_image helper, for tests that build their own trees."""
    return write_image


@pytest.fixture
def bytes_writer() -> Callable[..., str]:
    """The write_bytes helper."""
    return write_bytes


@pytest.fixture
def sample_library(temp_dir: str) -> str:
    """Create a sample photo folder for testing.

    Structure:
        temp_dir/
        ├── 2024/
        │   ├── IMG_0001.JPG      (Canon EOS R5, 64x48)
        │   ├── IMG_0001.CR2      (fake RAW bytes, pairs with the JPG)
        │   └── IMG_0002.jpg      (no EXIF, 64x48)
        ├── edits/
        │   ├── sunset.png        (120x80)
        │   └── scan.tiff         (32x32)
        ├── corrupt.jpg           (not an image)
        ├── empty.nef             (zero bytes)
        └── notes.txt             (unsupported)
    """
    year = os.path.join(temp_dir, "2024")
    write_image(os.path.join(year, "IMG_0001.JPG"), make="Canon", model="Canon EOS R5", fmt="JPEG")
    write_bytes(os.path.join(year, "IMG_0001.CR2"), b"fake raw sensor data")
    write_image(os.path.join(year, "IMG_0002.jpg"), fmt="JPEG")

    edits = os.path.join(temp_dir, "edits")
    write_image(os.path.join(edits, "sunset.png"), size=(120, 80), fmt="PNG")
    write_image(os.path.join(edits, "scan.tiff"), size=(32, 32), fmt="TIFF")

    write_bytes(os.path.join(temp_dir, "corrupt.jpg"), b"this is not a jpeg")
    write_bytes(os.path.join(temp_dir, "empty.nef"), b"")
    write_bytes(os.path.join(temp_dir, "notes.txt"), b"shopping list")

    return temp_dir


def make_photo(
    file_path: str,
    photo_id: Optional[str] = None,
    modified_at: Optional[datetime] = None,
    **exif_fields
) -> Photo:
    """Build an in-memory Photo without touching the filesystem."""
    name = os.path.basename(file_path)
    ext = os.path.splitext(name)[1]
    return Photo(
        id=photo_id or f"id-{file_path}",
        file_path=file_path,
        file_name=name,
        file_size=1024,
        file_type=ext[1:].upper() if ext else "unknown",
        exif=ExifData(**exif_fields),
        modified_at=modified_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def photo_factory() -> Callable[..., Photo]:
    """The make_photo helper as a fixture."""
    return make_photo
