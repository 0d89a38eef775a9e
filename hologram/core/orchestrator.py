"""High-level scan orchestration for Hologram.

Coordinates directory discovery, concurrent per-file processing and
pairing. Used by the boundary API and the CLI.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from hologram.core.config import Settings
from hologram.core.exiftool import ExifToolReader
from hologram.core.logger import ScanLog, create_logger, write_summary
from hologram.core.metadata import MetadataExtractor
from hologram.core.models import (
    DiscoveryCallback,
    Photo,
    ProgressSink,
    ScanProgress,
    ScanResult,
)
from hologram.core.pairing import PairingPolicy, pair_photos
from hologram.core.processor import FileProcessor
from hologram.core.scanner import FileScanner

logger = logging.getLogger(__name__)


def _emit(on_progress: Optional[ProgressSink], progress: ScanProgress) -> None:
    """Deliver one progress event; a failing sink never stops the scan."""
    if on_progress is None:
        return
    try:
        on_progress(progress)
    except Exception as e:
        logger.warning(f"Failed to deliver scan progress: {e}")


class ScanOrchestrator:
    """Scans a folder into a paired collection of Photo records.

    Files are processed in fixed-size batches. All files of a batch run
    concurrently on a thread pool; the next batch is only submitted once
    the current one has finished. Only the calling thread touches the
    result and the progress counter.

    Usage:
        orchestrator = ScanOrchestrator(Settings(batch_size=50))
        result = orchestrator.scan(
            "/path/to/photos",
            on_progress=lambda p: print(f"{p.percentage:.0f}%"),
        )
        print(f"Indexed {result.photo_count} photos, {result.pair_count} pairs")
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize orchestrator.

        Args:
            settings: Scan settings (default: built-in defaults, no file).

        Raises:
            ValueError: If the settings are invalid.
        """
        self.settings = settings or Settings(config_path=None)
        self.settings.validate()

    def _start_exiftool(self) -> Optional[ExifToolReader]:
        if not self.settings.use_exiftool:
            return None
        reader = ExifToolReader()
        if reader.start():
            logger.debug(f"Using ExifTool fallback: {reader.exiftool_path}")
            return reader
        logger.warning("ExifTool fallback requested but unavailable; continuing without it")
        return None

    def _build_processor(
        self,
        exiftool_reader: Optional[ExifToolReader],
        scan_log: ScanLog
    ) -> FileProcessor:
        return FileProcessor(
            extractor=MetadataExtractor(exiftool_reader),
            generate_thumbnails=self.settings.generate_thumbnails,
            thumbnail_size=self.settings.thumbnail_size,
            thumbnail_quality=self.settings.thumbnail_quality,
            scan_log=scan_log,
        )

    def scan(
        self,
        folder_path: str,
        on_progress: Optional[ProgressSink] = None,
        cancel_event: Optional[threading.Event] = None,
        on_discovery: Optional[DiscoveryCallback] = None
    ) -> ScanResult:
        """Scan a folder tree and return its paired photo collection.

        Args:
            folder_path: Root folder to scan.
            on_progress: Optional sink receiving a ScanProgress after every
                processed file and a final 100% event with no file name.
            cancel_event: Optional threading.Event for cooperative cancellation.
                When set, no further files are started; the photos finished
                so far are paired and returned with ``cancelled=True``.
            on_discovery: Optional callback for the directory walk.

        Returns:
            ScanResult with photos in traversal order.

        Raises:
            FolderNotFoundError: If folder_path does not exist.
            NotAFolderError: If folder_path is not a directory.
        """
        start_time = time.time()

        scanner = FileScanner(folder_path)
        files = scanner.scan(on_progress=on_discovery)

        result = ScanResult(folder_path=folder_path, total_files=len(files))
        scan_log = create_logger(self.settings.log_dir)
        exiftool_reader = self._start_exiftool()

        try:
            with scan_log:
                scan_log.log(f"Started scan: {folder_path} ({len(files)} files)")
                processor = self._build_processor(exiftool_reader, scan_log)
                result.photos = self._process_batches(
                    processor, files, result, on_progress, cancel_event
                )
                if result.cancelled:
                    scan_log.log("Scan cancelled")
        finally:
            if exiftool_reader:
                exiftool_reader.stop()

        policy = PairingPolicy.from_name(self.settings.pairing_policy)
        result.pair_count = pair_photos(result.photos, policy)
        result.elapsed_time = round(time.time() - start_time, 3)

        if self.settings.log_dir:
            write_summary(self.settings.log_dir, result)

        if not result.cancelled:
            _emit(on_progress, ScanProgress(
                current=len(files),
                total=len(files),
                percentage=100.0,
                current_file=None,
            ))

        logger.info(
            f"Scanned {folder_path}: {result.photo_count} photos, "
            f"{result.skipped_count} skipped, {result.pair_count} pairs"
            + (" (cancelled)" if result.cancelled else "")
        )
        return result

    def _process_batches(
        self,
        processor: FileProcessor,
        files: List[str],
        result: ScanResult,
        on_progress: Optional[ProgressSink],
        cancel_event: Optional[threading.Event]
    ) -> List[Photo]:
        """Run the processor over all files, one batch at a time.

        Results within a batch are put back into traversal order, so the
        collection order does not depend on thread timing.
        """
        photos: List[Photo] = []
        total = len(files)
        batch_size = self.settings.batch_size
        completed = 0

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            for batch_start in range(0, total, batch_size):
                if cancel_event and cancel_event.is_set():
                    result.cancelled = True
                    break

                batch = files[batch_start:batch_start + batch_size]
                batch_photos: List[Optional[Photo]] = [None] * len(batch)

                future_to_index = {
                    executor.submit(processor.process_file, path): i
                    for i, path in enumerate(batch)
                }

                # Thread safety note: counters, the result and progress
                # delivery are only touched here, in the calling thread.
                try:
                    for future in as_completed(future_to_index):
                        i = future_to_index[future]
                        path = batch[i]
                        try:
                            batch_photos[i] = future.result()
                        except Exception as e:
                            logger.warning(f"Unexpected error processing {path}: {e}")

                        if batch_photos[i] is None:
                            result.skipped_count += 1

                        completed += 1
                        _emit(on_progress, ScanProgress(
                            current=completed,
                            total=total,
                            percentage=completed / total * 100.0,
                            current_file=os.path.basename(path),
                        ))

                        if cancel_event and cancel_event.is_set():
                            executor.shutdown(wait=False, cancel_futures=True)
                            result.cancelled = True
                            break
                except BaseException:
                    # Ctrl+C: drop queued files and let running ones finish
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise

                photos.extend(p for p in batch_photos if p is not None)
                if result.cancelled:
                    break

        return photos
