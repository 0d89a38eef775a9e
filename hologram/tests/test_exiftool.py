"""Tests for hologram.core.exiftool module."""

import os
import sys
from unittest.mock import MagicMock, patch

import pytest

from hologram.core.exiftool import (
    EXIFTOOL_DIR,
    EXIFTOOL_EXE,
    EXIFTOOL_TAGS,
    ExifToolReader,
    get_exiftool_path,
    is_exiftool_available,
)


class TestExiftoolConstants:
    """Tests for module constants."""

    def test_exiftool_dir_uses_os_path_join(self):
        assert EXIFTOOL_DIR == os.path.join("tools", "exiftool")

    def test_exiftool_exe_platform_appropriate(self):
        if sys.platform == "win32":
            assert EXIFTOOL_EXE == "exiftool.exe"
        else:
            assert EXIFTOOL_EXE == "exiftool"

    def test_tags_are_grouped(self):
        assert all(tag.startswith("EXIF:") for tag in EXIFTOOL_TAGS)


class TestGetExiftoolPath:
    """Tests for get_exiftool_path() function."""

    def test_finds_in_path(self):
        with patch("shutil.which", return_value="/usr/bin/exiftool"):
            assert get_exiftool_path() == "exiftool"

    def test_finds_in_local_tools(self, temp_dir):
        tools = os.path.join(temp_dir, EXIFTOOL_DIR)
        os.makedirs(tools)
        local = os.path.join(tools, EXIFTOOL_EXE)
        with open(local, "w") as f:
            f.write("#!/bin/sh\n")

        with patch("shutil.which", return_value=None):
            assert get_exiftool_path(temp_dir) == local

    def test_returns_none_when_not_found(self, temp_dir):
        with patch("shutil.which", return_value=None):
            assert get_exiftool_path(temp_dir) is None


class TestIsExiftoolAvailable:
    """Tests for is_exiftool_available() function."""

    def test_true_when_in_path(self):
        with patch("shutil.which", return_value="/usr/bin/exiftool"):
            assert is_exiftool_available() is True

    def test_false_when_not_found(self, temp_dir):
        with patch("shutil.which", return_value=None):
            assert is_exiftool_available(temp_dir) is False


class TestExifToolReader:
    """Tests for ExifToolReader without a running process."""

    def test_initial_state(self):
        reader = ExifToolReader()
        assert reader.is_running is False
        assert reader.exiftool_path is None

    def test_start_without_exiftool_installed(self, temp_dir):
        with patch("shutil.which", return_value=None):
            reader = ExifToolReader(base_dir=temp_dir)
            assert reader.start() is False
        assert reader.is_running is False

    def test_read_tags_returns_empty_when_not_running(self):
        assert ExifToolReader().read_tags("/path/file.cr3") == {}

    def test_stop_handles_no_helper(self):
        reader = ExifToolReader()
        reader.stop()
        assert reader.is_running is False


class TestExifToolReaderWithMockedExiftool:
    """Tests for ExifToolReader with a mocked PyExifTool helper."""

    @pytest.fixture
    def mock_helper(self):
        helper = MagicMock()
        with patch("hologram.core.exiftool.get_exiftool_path", return_value="/usr/bin/exiftool"), \
                patch("hologram.core.exiftool.exiftool.ExifToolHelper", return_value=helper) as helper_cls:
            helper.helper_cls = helper_cls
            yield helper

    def test_start_success(self, mock_helper):
        reader = ExifToolReader()

        assert reader.start() is True
        assert reader.is_running is True
        assert reader.exiftool_path == "/usr/bin/exiftool"
        mock_helper.run.assert_called_once()
        kwargs = mock_helper.helper_cls.call_args.kwargs
        assert kwargs["executable"] == "/usr/bin/exiftool"
        assert kwargs["common_args"] == ["-G"]

    def test_start_failure_returns_false(self, mock_helper):
        mock_helper.run.side_effect = OSError("cannot execute")
        reader = ExifToolReader()

        assert reader.start() is False
        assert reader.is_running is False

    def test_read_tags_success(self, mock_helper):
        mock_helper.get_tags.return_value = [{"EXIF:Make": "Canon", "EXIF:ISO": 800}]
        reader = ExifToolReader()
        reader.start()

        result = reader.read_tags("/photos/IMG_0001.CR3")

        assert result == {"EXIF:Make": "Canon", "EXIF:ISO": 800}
        mock_helper.get_tags.assert_called_once_with("/photos/IMG_0001.CR3", EXIFTOOL_TAGS)

    def test_read_tags_explicit_tags(self, mock_helper):
        mock_helper.get_tags.return_value = [{"EXIF:Make": "Sony"}]
        reader = ExifToolReader()
        reader.start()

        reader.read_tags("/photos/a.arw", ["EXIF:Make"])

        mock_helper.get_tags.assert_called_once_with("/photos/a.arw", ["EXIF:Make"])

    def test_read_tags_empty_result(self, mock_helper):
        mock_helper.get_tags.return_value = []
        reader = ExifToolReader()
        reader.start()

        assert reader.read_tags("/photos/missing.cr3") == {}

    def test_read_tags_error_returns_empty(self, mock_helper):
        mock_helper.get_tags.side_effect = RuntimeError("exiftool died")
        reader = ExifToolReader()
        reader.start()

        assert reader.read_tags("/photos/a.cr3") == {}

    def test_stop_terminates(self, mock_helper):
        reader = ExifToolReader()
        reader.start()
        reader.stop()

        mock_helper.terminate.assert_called_once()
        assert reader.is_running is False

    def test_stop_handles_exception(self, mock_helper):
        mock_helper.terminate.side_effect = Exception("Error")
        reader = ExifToolReader()
        reader.start()

        reader.stop()
        assert reader.is_running is False

    def test_context_manager(self, mock_helper):
        with ExifToolReader() as reader:
            assert reader.is_running
        mock_helper.terminate.assert_called_once()
