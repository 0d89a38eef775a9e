"""Directory scanning for Hologram."""

import logging
import os
from typing import Iterator, List, Optional, Set, Tuple

from hologram.core.errors import FolderNotFoundError, NotAFolderError
from hologram.core.formats import is_supported
from hologram.core.models import DiscoveryCallback

logger = logging.getLogger(__name__)


def _fast_walk(
    path: str,
    _visited: Optional[Set[Tuple[int, int]]] = None
) -> Iterator[Tuple[str, List[str], List[str]]]:
    """Directory walker built on os.scandir that follows symlinks.

    Symlinked directories are descended into. A directory already visited
    on the current walk (a symlink cycle, or two links to the same place)
    is not entered again.

    Args:
        path: Root directory to walk.

    Yields:
        Tuples of (dirpath, dirnames, filenames) like os.walk().
    """
    if _visited is None:
        _visited = set()

    try:
        st = os.stat(path)
        key = (st.st_dev, st.st_ino)
        if key in _visited:
            logger.debug(f"Skipping already visited directory {path}")
            return
        _visited.add(key)

        with os.scandir(path) as entries:
            dirs = []
            files = []
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=True):
                        dirs.append(entry.name)
                    elif entry.is_file(follow_symlinks=True):
                        files.append(entry.name)
                except OSError as e:
                    # Log and skip entries we can't access
                    logger.debug(f"Cannot access entry {entry.path}: {e}")
                    continue
    except OSError as e:
        # Log and skip directories we can't access
        logger.debug(f"Cannot access directory {path}: {e}")
        return

    yield path, dirs, files
    for d in dirs:
        yield from _fast_walk(os.path.join(path, d), _visited)


def check_folder(path: str) -> None:
    """Verify that a scan root exists and is a directory.

    Raises:
        FolderNotFoundError: If nothing exists at path.
        NotAFolderError: If path exists but is not a directory.
    """
    if not os.path.exists(path):
        raise FolderNotFoundError(path)
    if not os.path.isdir(path):
        raise NotAFolderError(path)


class FileScanner:
    """Finds supported photo files under a directory tree.

    Usage:
        scanner = FileScanner("/path/to/photos")
        scanner.scan(on_progress=lambda found, msg: print(msg))

        for path in scanner.files:
            ...
    """

    def __init__(self, path: str):
        """Initialize scanner.

        Args:
            path: Root directory to scan.
        """
        self.path = path
        self.files: List[str] = []
        self.ignored_count = 0
        self._scanned = False

    def scan(self, on_progress: Optional[DiscoveryCallback] = None) -> List[str]:
        """Walk the tree and collect supported files in traversal order.

        The root is checked first; directories below it that cannot be read
        are skipped.

        Args:
            on_progress: Optional callback, called with (files_found, message)
                as the walk proceeds.

        Returns:
            Paths of supported files.

        Raises:
            FolderNotFoundError: If the root does not exist.
            NotAFolderError: If the root is not a directory.
        """
        check_folder(self.path)

        self.files = []
        self.ignored_count = 0
        progress_interval = 100
        last_dir = ""

        for dirpath, dirnames, filenames in _fast_walk(self.path):
            # Show directory change for immediate feedback
            if on_progress and dirpath != last_dir and self.files:
                on_progress(len(self.files), f"Scanning: {os.path.basename(dirpath)}...")
            last_dir = dirpath

            for filename in filenames:
                if not is_supported(filename):
                    self.ignored_count += 1
                    continue

                self.files.append(os.path.join(dirpath, filename))

                if on_progress and len(self.files) % progress_interval == 0:
                    on_progress(len(self.files), f"Found {len(self.files)} photos...")
                    if len(self.files) >= 1000 and progress_interval < 500:
                        progress_interval = 500

        self._scanned = True
        logger.debug(
            f"Found {len(self.files)} supported files under {self.path} "
            f"({self.ignored_count} ignored)"
        )

        if on_progress:
            on_progress(len(self.files), "Discovery complete")

        return self.files

    @property
    def file_count(self) -> int:
        """Number of supported files found."""
        return len(self.files)

    @property
    def is_scanned(self) -> bool:
        """Whether scan() has been called."""
        return self._scanned
