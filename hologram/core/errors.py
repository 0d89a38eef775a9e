"""Exceptions raised to callers of Hologram.

Per-file problems during a scan are never raised; they are logged and the
file (or the affected field) is left out. Only caller-input problems end up
here.
"""


class HologramError(Exception):
    """Base class for all Hologram errors."""


class FolderNotFoundError(HologramError, FileNotFoundError):
    """The folder passed to a scan does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Folder does not exist: {path}")
        self.path = path


class NotAFolderError(HologramError, NotADirectoryError):
    """The path passed to a scan exists but is not a directory."""

    def __init__(self, path: str):
        super().__init__(f"Not a folder: {path}")
        self.path = path


class ImageNotFoundError(HologramError, FileNotFoundError):
    """The file requested from the full-resolution loader does not exist."""

    def __init__(self, path: str):
        super().__init__(f"File does not exist: {path}")
        self.path = path


class UnsupportedFormatError(HologramError, ValueError):
    """The file extension is not one Hologram knows how to handle."""

    def __init__(self, path: str):
        super().__init__(f"Unsupported file format: {path}")
        self.path = path


class CatalogError(HologramError):
    """A saved photo catalog could not be read."""
