"""Command-line interface for Hologram."""

import argparse
import shutil
import sys
from typing import List, Optional

import orjson
from tqdm import tqdm

from hologram import __version__
from hologram.core.catalog import load_catalog, save_catalog
from hologram.core.config import PAIRING_POLICIES, Settings
from hologram.core.errors import CatalogError, FolderNotFoundError, NotAFolderError
from hologram.core.filters import filter_photos
from hologram.core.logger import configure_logging, format_duration
from hologram.core.models import PhotoFilter, ScanProgress
from hologram.core.orchestrator import ScanOrchestrator
from hologram.core.stats import compute_stats
from hologram.core.utils import normalize_path
from hologram.cli.wizard import run_wizard


# Program description
DESCRIPTION = """Hologram

Scans a folder of photos (JPEG, PNG, TIFF and camera RAW files) and builds a
catalog with capture metadata, preview thumbnails and RAW/JPEG pairs.

Save the catalog with `scan -o catalog.json`, then narrow it down with
`filter` or summarize it with `stats`.
"""


def create_progress_callback(desc: str = "Scanning"):
    """Create a tqdm-based progress sink.

    Args:
        desc: Description for progress bar.

    Returns:
        Tuple of (sink function taking a ScanProgress, tqdm instance).
    """
    pbar = tqdm(total=100, desc=desc, unit="file")

    # Calculate safe message width based on terminal size
    terminal_width = shutil.get_terminal_size().columns
    # Leave room for progress bar elements (percentage, bar, counts)
    max_desc_width = max(20, min(80, terminal_width - 40))

    def callback(progress: ScanProgress):
        pbar.total = progress.total
        pbar.n = progress.current
        message = progress.current_file or "Scan complete"
        # Truncate message to fit terminal
        if len(message) > max_desc_width:
            message = message[:max_desc_width - 3] + "..."
        pbar.set_description(message)
        pbar.refresh()

    return callback, pbar


def build_settings(parsed: argparse.Namespace) -> Settings:
    """Combine the settings file with scan options given on the command line."""
    return Settings(
        batch_size=parsed.batch_size,
        max_workers=parsed.workers,
        thumbnail_size=parsed.thumbnail_size,
        generate_thumbnails=False if parsed.no_thumbnails else None,
        pairing_policy=parsed.pairing,
        use_exiftool=True if parsed.exiftool else None,
        log_dir=normalize_path(parsed.log_dir) if parsed.log_dir else None,
    )


def run_scan(path: str, settings: Settings, output: Optional[str] = None) -> int:
    """Scan a folder and print a summary.

    Args:
        path: Folder to scan.
        settings: Scan settings.
        output: Optional catalog file to write.

    Returns:
        Exit code (0 for success).
    """
    try:
        orchestrator = ScanOrchestrator(settings)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(f"\nScanning: {path}")

    callback, pbar = create_progress_callback("Scanning")
    interrupted = False

    try:
        result = orchestrator.scan(path, on_progress=callback)
    except (FolderNotFoundError, NotAFolderError) as e:
        pbar.close()
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        # Handle Ctrl+C gracefully
        interrupted = True
        pbar.close()
        print("\n\nInterrupted! Scan cancelled.")
        return 130  # Standard exit code for SIGINT
    finally:
        if not interrupted:
            pbar.close()

    print("\nFinished!")
    print(f"Files found: {result.total_files}")
    print(f"Photos indexed: {result.photo_count}")
    if result.skipped_count:
        print(f"  Skipped (unreadable): {result.skipped_count}")
    print(f"RAW/JPEG pairs: {result.pair_count}")
    print(f"Time used: {format_duration(result.elapsed_time)}")

    if output:
        save_catalog(output, result.photos)
        print(f"\nCatalog written to:\n  {output}")
    if settings.log_dir:
        print(f"Logs:\n  {settings.log_dir}")

    return 0


def build_filter(parsed: argparse.Namespace) -> PhotoFilter:
    """Build a PhotoFilter from filter options.

    Raises:
        ValueError: If a --date bound cannot be parsed.
    """
    return PhotoFilter(
        camera_make=parsed.make,
        camera_model=parsed.model,
        lens_model=parsed.lens,
        focal_length_range=tuple(parsed.focal) if parsed.focal else None,
        aperture_range=tuple(parsed.aperture) if parsed.aperture else None,
        iso_range=tuple(parsed.iso) if parsed.iso else None,
        date_range=tuple(parsed.date) if parsed.date else None,
        file_type=parsed.type,
    )


def run_filter(catalog: str, photo_filter: PhotoFilter, output: Optional[str] = None) -> int:
    """Filter a saved catalog.

    Matching paths are printed, or written as a new catalog when output is given.

    Returns:
        Exit code (0 for success).
    """
    try:
        photos = load_catalog(catalog)
    except CatalogError as e:
        print(f"Error: {e}")
        return 1

    matched = filter_photos(photos, photo_filter)

    if output:
        save_catalog(output, matched)
        print(f"Matched {len(matched)} of {len(photos)} photos, written to {output}")
    else:
        for photo in matched:
            print(photo.file_path)
        print(f"\nMatched {len(matched)} of {len(photos)} photos")

    return 0


def run_stats(catalog: str, as_json: bool = False) -> int:
    """Print statistics for a saved catalog.

    Returns:
        Exit code (0 for success).
    """
    try:
        photos = load_catalog(catalog)
    except CatalogError as e:
        print(f"Error: {e}")
        return 1

    stats = compute_stats(photos)

    if as_json:
        print(orjson.dumps(stats.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8"))
        return 0

    print(f"Total photos: {stats.total_photos}")
    print(f"  RAW: {stats.raw_count}")
    print(f"  JPEG/other: {stats.jpeg_count}")
    print(f"  Paired: {stats.paired_count}")

    for title, counts in (("Cameras", stats.cameras), ("Lenses", stats.lenses)):
        if counts:
            print(f"\n{title}:")
            for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
                print(f"  {count:>6}  {name}")

    return 0


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (default: sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        help="Log per-file details (skipped files, ambiguous pairs)",
        action="store_true"
    )

    parser = argparse.ArgumentParser(
        prog="hologram",
        description=DESCRIPTION,
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command")

    # scan
    scan = subparsers.add_parser("scan", parents=[common], help="Scan a folder of photos")
    scan.add_argument(
        "path",
        nargs="?",
        help="The folder to scan (prompted for when omitted)",
        default=None
    )
    scan.add_argument("-o", "--output", help="Write the catalog to this JSON file", default=None)
    scan.add_argument("--batch-size", help="Files processed concurrently per batch", type=int, default=None)
    scan.add_argument("--workers", help="Worker threads (default: automatic)", type=int, default=None)
    scan.add_argument("--thumbnail-size", help="Longest thumbnail side in pixels", type=int, default=None)
    scan.add_argument("--no-thumbnails", help="Skip thumbnail generation (faster)", action="store_true")
    scan.add_argument(
        "--pairing",
        help="How to pair RAW/JPEG groups with several candidates",
        choices=PAIRING_POLICIES,
        default=None
    )
    scan.add_argument(
        "--exiftool",
        help="Read metadata with ExifTool when the built-in reader finds none",
        action="store_true"
    )
    scan.add_argument("--log-dir", help="Write a scan log and summary to this directory", default=None)

    # filter
    flt = subparsers.add_parser("filter", parents=[common], help="Filter a saved catalog")
    flt.add_argument("catalog", help="Catalog JSON written by `scan -o`")
    flt.add_argument("--make", help="Camera make contains this text", default=None)
    flt.add_argument("--model", help="Camera model contains this text", default=None)
    flt.add_argument("--lens", help="Lens model contains this text", default=None)
    flt.add_argument("--focal", help="Focal length range in mm", nargs=2, type=float, metavar=("MIN", "MAX"))
    flt.add_argument("--aperture", help="Aperture (f-number) range", nargs=2, type=float, metavar=("MIN", "MAX"))
    flt.add_argument("--iso", help="ISO range", nargs=2, type=int, metavar=("MIN", "MAX"))
    flt.add_argument("--date", help="Capture date range (ISO-8601)", nargs=2, metavar=("FROM", "TO"))
    flt.add_argument("--type", help="Exact file type, e.g. JPG or CR2", default=None)
    flt.add_argument("-o", "--output", help="Write matches to this catalog file", default=None)

    # stats
    st = subparsers.add_parser("stats", parents=[common], help="Summarize a saved catalog")
    st.add_argument("catalog", help="Catalog JSON written by `scan -o`")
    st.add_argument("--json", help="Print the statistics as JSON", action="store_true")

    parsed = parser.parse_args(args)
    if parsed.command is None:
        # Bare `hologram` behaves like `hologram scan` and runs the wizard
        parsed = parser.parse_args(["scan"])
    return parsed


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parsed = parse_args(args)
    configure_logging(verbose=parsed.verbose)

    if parsed.command == "filter":
        try:
            photo_filter = build_filter(parsed)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        return run_filter(normalize_path(parsed.catalog), photo_filter, parsed.output)

    if parsed.command == "stats":
        return run_stats(normalize_path(parsed.catalog), as_json=parsed.json)

    # Get path (from args or wizard)
    path = parsed.path
    if not path:
        path = run_wizard()
        if not path:
            return 1

    output = normalize_path(parsed.output) if parsed.output else None
    return run_scan(normalize_path(path), build_settings(parsed), output)


if __name__ == "__main__":
    sys.exit(main())
