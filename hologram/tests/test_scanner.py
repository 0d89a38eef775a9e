"""Tests for hologram.core.scanner module."""

import os
import sys

import pytest

from hologram.core.errors import FolderNotFoundError, NotAFolderError
from hologram.core.scanner import FileScanner, _fast_walk, check_folder


class TestCheckFolder:
    """Tests for check_folder() function."""

    def test_existing_folder_ok(self, temp_dir):
        check_folder(temp_dir)

    def test_missing_folder_raises(self, temp_dir):
        missing = os.path.join(temp_dir, "nope")
        with pytest.raises(FolderNotFoundError) as exc_info:
            check_folder(missing)
        assert exc_info.value.path == missing
        assert isinstance(exc_info.value, FileNotFoundError)

    def test_file_raises_not_a_folder(self, temp_dir):
        path = os.path.join(temp_dir, "photo.jpg")
        with open(path, "wb") as f:
            f.write(b"x")
        with pytest.raises(NotAFolderError):
            check_folder(path)


class TestFileScanner:
    """Tests for FileScanner class."""

    def test_scan_finds_supported_files(self, sample_library):
        scanner = FileScanner(sample_library)
        files = scanner.scan()

        names = sorted(os.path.basename(f) for f in files)
        assert names == sorted([
            "IMG_0001.JPG", "IMG_0001.CR2", "IMG_0002.jpg",
            "sunset.png", "scan.tiff", "corrupt.jpg", "empty.nef",
        ])
        assert scanner.file_count == 7
        assert scanner.ignored_count == 1  # notes.txt
        assert scanner.is_scanned

    def test_scan_returns_full_paths(self, sample_library):
        files = FileScanner(sample_library).scan()
        assert all(os.path.isabs(f) or f.startswith(sample_library) for f in files)
        assert all(os.path.exists(f) for f in files)

    def test_empty_folder(self, temp_dir):
        scanner = FileScanner(temp_dir)
        assert scanner.scan() == []
        assert scanner.is_scanned

    def test_missing_folder_raises(self, temp_dir):
        with pytest.raises(FolderNotFoundError):
            FileScanner(os.path.join(temp_dir, "missing")).scan()

    def test_not_scanned_initially(self, temp_dir):
        assert not FileScanner(temp_dir).is_scanned

    def test_rescan_resets_results(self, sample_library):
        scanner = FileScanner(sample_library)
        scanner.scan()
        scanner.scan()
        assert scanner.file_count == 7

    def test_progress_callback(self, sample_library):
        calls = []
        FileScanner(sample_library).scan(on_progress=lambda found, msg: calls.append((found, msg)))

        assert calls
        assert calls[-1] == (7, "Discovery complete")

    def test_deeply_nested(self, temp_dir, image_writer):
        deep = os.path.join(temp_dir, "a", "b", "c", "d")
        image_writer(os.path.join(deep, "deep.jpg"), fmt="JPEG")
        files = FileScanner(temp_dir).scan()
        assert files == [os.path.join(deep, "deep.jpg")]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_follows_directory_symlinks(self, temp_dir, image_writer):
        target = os.path.join(temp_dir, "target")
        image_writer(os.path.join(target, "linked.jpg"), fmt="JPEG")
        root = os.path.join(temp_dir, "root")
        os.makedirs(root)
        os.symlink(target, os.path.join(root, "link"))

        files = FileScanner(root).scan()
        assert [os.path.basename(f) for f in files] == ["linked.jpg"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_follows_file_symlinks(self, temp_dir, image_writer):
        real = image_writer(os.path.join(temp_dir, "store", "real.jpg"), fmt="JPEG")
        root = os.path.join(temp_dir, "root")
        os.makedirs(root)
        os.symlink(real, os.path.join(root, "alias.jpg"))

        files = FileScanner(root).scan()
        assert [os.path.basename(f) for f in files] == ["alias.jpg"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlink_loop_terminates(self, temp_dir, image_writer):
        image_writer(os.path.join(temp_dir, "sub", "photo.jpg"), fmt="JPEG")
        os.symlink(temp_dir, os.path.join(temp_dir, "sub", "loop"))

        files = FileScanner(temp_dir).scan()
        assert [os.path.basename(f) for f in files] == ["photo.jpg"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_second_link_to_same_directory_walked_once(self, temp_dir, image_writer):
        target = os.path.join(temp_dir, "target")
        image_writer(os.path.join(target, "shared.jpg"), fmt="JPEG")
        root = os.path.join(temp_dir, "root")
        os.makedirs(root)
        os.symlink(target, os.path.join(root, "first"))
        os.symlink(target, os.path.join(root, "second"))

        files = FileScanner(root).scan()
        assert [os.path.basename(f) for f in files] == ["shared.jpg"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_broken_symlink_skipped(self, temp_dir, image_writer):
        image_writer(os.path.join(temp_dir, "ok.jpg"), fmt="JPEG")
        os.symlink(os.path.join(temp_dir, "gone.jpg"), os.path.join(temp_dir, "dangling.jpg"))

        files = FileScanner(temp_dir).scan()
        assert [os.path.basename(f) for f in files] == ["ok.jpg"]


class TestFastWalk:
    """Tests for _fast_walk() helper."""

    def test_unreadable_root_yields_nothing(self, temp_dir):
        assert list(_fast_walk(os.path.join(temp_dir, "missing"))) == []

    def test_yields_walk_tuples(self, sample_library):
        entries = {os.path.relpath(d, sample_library): (sorted(ds), sorted(fs))
                   for d, ds, fs in _fast_walk(sample_library)}
        assert entries["."][0] == ["2024", "edits"]
        assert "notes.txt" in entries["."][1]
        assert entries["edits"][1] == ["scan.tiff", "sunset.png"]
