"""Utility functions for file and path operations."""

import os
import unicodedata
from functools import lru_cache


def normalize_filename(filename: str) -> str:
    """Normalize a filename to NFC form for consistent matching.

    macOS filesystems use NFD (decomposed) Unicode normalization, while
    Windows, Linux, and most cloud services use NFC (composed). The same
    visible name can therefore arrive as two different strings.

    Example:
        "Café.jpg" in NFC: C a f é . j p g  (é as single codepoint U+00E9)
        "Café.jpg" in NFD: C a f e ́ . j p g  (e + combining accent U+0301)

    Args:
        filename: Original filename (may be NFC or NFD).

    Returns:
        NFC-normalized filename.
    """
    return unicodedata.normalize("NFC", filename)


@lru_cache(maxsize=10000)
def get_stem(filepath: str) -> str:
    """Get the filename of a path with its extension removed.

    The directory part is dropped. Results are cached since pairing asks
    for the same paths repeatedly.

    Example:
        >>> get_stem("/photos/2024/IMG_0001.CR2")
        'IMG_0001'
    """
    return os.path.splitext(os.path.basename(filepath))[0]


def normalize_path(path: str) -> str:
    """Normalize a path for consistent handling.

    Handles:
    - Trailing slashes
    - Mixed forward/backward slashes
    - User home directory (~)
    - Leading/trailing whitespace

    Args:
        path: Path to normalize.

    Returns:
        Normalized path.
    """
    return os.path.normpath(os.path.expanduser(path.strip()))
