"""Tests for hologram.core.filters module."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from hologram.core.filters import filter_photos, matches
from hologram.core.models import PhotoFilter


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def collection(photo_factory):
    return [
        photo_factory("/p/a.CR2", camera_make="Canon", camera_model="Canon EOS R5",
                      lens_model="RF24-70mm F2.8 L IS USM", focal_length=50.0,
                      aperture=2.8, iso=400, date_taken=utc(2024, 3, 1, 10, 0)),
        photo_factory("/p/a.JPG", camera_make="Canon", camera_model="Canon EOS R5",
                      focal_length=50.0, aperture=2.8, iso=400,
                      date_taken=utc(2024, 3, 1, 10, 0)),
        photo_factory("/p/b.NEF", camera_make="NIKON CORPORATION", camera_model="NIKON Z 6",
                      focal_length=85.0, aperture=1.8, iso=3200,
                      date_taken=utc(2023, 12, 24, 20, 0)),
        photo_factory("/p/c.jpg", camera_make="SONY", camera_model="ILCE-7M3",
                      focal_length=24.0, aperture=8.0, iso=100),
        photo_factory("/p/d.png"),
    ]


def names(photos):
    return [p.file_name for p in photos]


class TestFilterPhotos:
    """Tests for filter_photos() function."""

    def test_empty_filter_keeps_all(self, collection):
        result = filter_photos(collection, PhotoFilter())
        assert result == collection
        assert result is not collection

    def test_make_substring(self, collection):
        result = filter_photos(collection, PhotoFilter(camera_make="Canon"))
        assert names(result) == ["a.CR2", "a.JPG"]

    def test_model_substring_matches_longer_value(self, collection):
        result = filter_photos(collection, PhotoFilter(camera_model="Canon"))
        assert all("Canon" in p.exif.camera_model for p in result)
        assert len(result) == 2

    def test_string_match_is_case_sensitive(self, collection):
        assert filter_photos(collection, PhotoFilter(camera_make="canon")) == []

    def test_missing_field_never_matches(self, collection):
        result = filter_photos(collection, PhotoFilter(lens_model="RF"))
        assert names(result) == ["a.CR2"]

    def test_focal_range_inclusive(self, collection):
        result = filter_photos(collection, PhotoFilter(focal_length_range=(24.0, 50.0)))
        assert names(result) == ["a.CR2", "a.JPG", "c.jpg"]

    def test_aperture_range(self, collection):
        result = filter_photos(collection, PhotoFilter(aperture_range=(1.0, 2.0)))
        assert names(result) == ["b.NEF"]

    def test_iso_range(self, collection):
        result = filter_photos(collection, PhotoFilter(iso_range=(100, 400)))
        assert names(result) == ["a.CR2", "a.JPG", "c.jpg"]

    def test_date_range_uses_date_taken(self, collection):
        result = filter_photos(
            collection,
            PhotoFilter(date_range=(utc(2024, 1, 1), utc(2024, 12, 31, 23, 59))),
        )
        assert names(result) == ["a.CR2", "a.JPG"]

    def test_naive_date_range_taken_as_utc(self, collection):
        result = filter_photos(
            collection,
            PhotoFilter(date_range=(datetime(2024, 3, 1, 10, 0), datetime(2024, 3, 1, 10, 0))),
        )
        assert names(result) == ["a.CR2", "a.JPG"]

    def test_string_date_range(self, collection):
        result = filter_photos(
            collection,
            PhotoFilter(date_range=("2023-12-01T00:00:00Z", "2023-12-31")),
        )
        assert names(result) == ["b.NEF"]

    def test_invalid_date_range_rejected(self):
        with pytest.raises(ValueError):
            PhotoFilter(date_range=("soon", utc(2024, 1, 1)))

    def test_file_type_exact(self, collection):
        assert names(filter_photos(collection, PhotoFilter(file_type="JPG"))) == ["a.JPG", "c.jpg"]
        assert filter_photos(collection, PhotoFilter(file_type="JP")) == []

    def test_composition_is_intersection(self, collection):
        by_make = filter_photos(collection, PhotoFilter(camera_make="Canon"))
        by_type = filter_photos(collection, PhotoFilter(file_type="CR2"))
        both = filter_photos(collection, PhotoFilter(camera_make="Canon", file_type="CR2"))

        assert both == [p for p in by_make if p in by_type]
        assert names(both) == ["a.CR2"]

    def test_idempotent(self, collection):
        f = PhotoFilter(iso_range=(100, 3200), camera_make="N")
        once = filter_photos(collection, f)
        assert filter_photos(once, f) == once

    def test_input_untouched(self, collection):
        before = list(collection)
        filter_photos(collection, PhotoFilter(camera_make="SONY"))
        assert collection == before

    def test_no_match(self, collection):
        assert filter_photos(collection, PhotoFilter(iso_range=(50000, 60000))) == []

    def test_parallel_path_preserves_order(self, photo_factory):
        photos = [photo_factory(f"/p/{i:04d}.jpg", iso=i % 7) for i in range(50)]
        f = PhotoFilter(iso_range=(0, 3))
        expected = [p for p in photos if p.exif.iso <= 3]

        with patch("hologram.core.filters._PARALLEL_FILTER_THRESHOLD", 10), \
                patch("hologram.core.filters._FILTER_CHUNK_SIZE", 6):
            result = filter_photos(photos, f, max_workers=4)

        assert result == expected


class TestMatches:
    """Tests for matches() function."""

    def test_no_constraints(self, photo_factory):
        assert matches(photo_factory("/p/x.jpg"), PhotoFilter())

    def test_range_boundaries(self, photo_factory):
        photo = photo_factory("/p/x.jpg", iso=800)
        assert matches(photo, PhotoFilter(iso_range=(800, 800)))
        assert not matches(photo, PhotoFilter(iso_range=(801, 1600)))
