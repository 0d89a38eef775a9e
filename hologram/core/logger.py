"""Logging utilities for Hologram."""

import logging
import os
import sys
import threading
import time
from typing import Any, Optional, TextIO, Union


def configure_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> None:
    """Send log records to stderr for command-line runs.

    Library modules only create loggers; handlers are installed here.

    Args:
        verbose: Log DEBUG records (per-file skips) instead of INFO and up.
        stream: Output stream (default: sys.stderr).
    """
    root = logging.getLogger()
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # exifread reports every file it cannot parse
    logging.getLogger("exifread").setLevel(logging.ERROR)


class BufferedLogger:
    """Buffered file logger with context manager support.

    Safe to call from worker threads: writes are serialized.

    Usage:
        with BufferedLogger("/path/to/logs") as logger:
            logger.log("Scan started")
            logger.log("Skipped: broken.jpg")
        # File is automatically closed
    """

    def __init__(self, output_dir: str, filename: str = "scan_log.txt"):
        """Initialize logger.

        Args:
            output_dir: Directory to write log file.
            filename: Name of log file (default: scan_log.txt).
        """
        self.output_dir = output_dir
        self.filename = filename
        self.filepath = os.path.join(output_dir, filename)
        self._handle: Optional[TextIO] = None
        self._lock = threading.Lock()

    def _open(self) -> None:
        """Open the log file for writing (lazy initialization)."""
        if self._handle is None:
            os.makedirs(self.output_dir, exist_ok=True)
            self._handle = open(self.filepath, "a", encoding="utf-8")

    def log(self, message: str) -> None:
        """Write a timestamped message to the log.

        Args:
            message: Message to log.
        """
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        with self._lock:
            self._open()  # Lazy open on first log
            self._handle.write(f"{timestamp} - {message}\n")

    def flush(self) -> None:
        """Flush the log buffer to disk."""
        with self._lock:
            if self._handle:
                self._handle.flush()

    def close(self) -> None:
        """Close the log file."""
        with self._lock:
            if self._handle:
                self._handle.close()
                self._handle = None

    def __enter__(self) -> "BufferedLogger":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - ensures file is closed."""
        self.close()

    @property
    def is_open(self) -> bool:
        """Check if logger is open."""
        return self._handle is not None


class NullLogger:
    """A logger that does nothing - useful for testing or when logging is disabled."""

    def log(self, message: str) -> None:
        """No-op log method."""
        pass

    def flush(self) -> None:
        """No-op flush method."""
        pass

    def close(self) -> None:
        """No-op close method."""
        pass

    def __enter__(self) -> "NullLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    @property
    def is_open(self) -> bool:
        return True


ScanLog = Union[BufferedLogger, NullLogger]


def create_logger(output_dir: Optional[str], enabled: bool = True) -> ScanLog:
    """Create a scan log instance.

    Args:
        output_dir: Directory for log file, or None for no file.
        enabled: If False, returns a NullLogger that does nothing.

    Returns:
        Configured logger instance.
    """
    if enabled and output_dir:
        return BufferedLogger(output_dir)
    return NullLogger()


def format_duration(elapsed_time: float) -> str:
    """Format seconds as ``"1m 5s"`` or ``"3.2s"``."""
    if elapsed_time >= 60:
        minutes = int(elapsed_time // 60)
        seconds = int(elapsed_time % 60)
        return f"{minutes}m {seconds}s"
    return f"{elapsed_time:.1f}s"


def write_summary(
    output_dir: str,
    result: Any,  # ScanResult
    filename: str = "scan_summary.txt"
) -> str:
    """Write a concise summary of a scan next to its log.

    Args:
        output_dir: Directory to write into (created if missing).
        result: ScanResult of the finished (or cancelled) scan.
        filename: Summary file name.

    Returns:
        Path to summary file.
    """
    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, filename)

    with open(filepath, "w", encoding="utf-8") as f:
        f.write("Hologram - Scan Summary\n")
        f.write("=" * 40 + "\n\n")
        f.write(f"Folder:    {result.folder_path}\n")
        f.write(f"Finished:  {time.strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"Duration:  {format_duration(result.elapsed_time)}\n\n")

        f.write(f"Files found:     {result.total_files:,}\n")
        f.write(f"Photos indexed:  {result.photo_count:,}\n")
        if result.skipped_count > 0:
            f.write(f"Files skipped:   {result.skipped_count:,}  (see scan_log.txt)\n")
        f.write(f"RAW/JPEG pairs:  {result.pair_count:,}\n")

        if result.cancelled:
            f.write("\nScan was cancelled before all files were processed.\n")

    return filepath
