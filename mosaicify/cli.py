"""
Command-line interface for Mosaicify.

Provides CLI access to batch mosaicking with argparse.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from . import __version__
from .config import MosaicifyConfig
from .errors import MosaicifyError
from .logger import setup_root_logger, get_logger
from .pipeline import BatchObserver, BatchPipeline, BatchReport


class ProgressBarObserver(BatchObserver):
    """Renders batch progress with tqdm."""

    def __init__(self, disable: bool = False):
        self.disable = disable
        self.bar: Optional[tqdm] = None

    def on_start(self, total: int) -> None:
        self.bar = tqdm(total=total, unit="img", disable=self.disable)

    def on_file_done(self, path: Path, completed: int) -> None:
        if self.bar is not None:
            self.bar.update(1)

    def on_finish(self, report: BatchReport) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="mosaicify",
        description="Pixelate fixed regions of every image in a directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process images with the regions in config.toml
  mosaicify --config config.toml

  # Process in parallel on 4 threads
  mosaicify -c config.toml --parallel --workers 4

  # List the files that would be processed
  mosaicify -c config.toml --dry-run
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default="config.toml",
        help="Path to TOML or JSON configuration file (default: config.toml)"
    )

    parser.add_argument(
        "--parallel", "-p",
        action="store_true",
        help="Process files in parallel"
    )

    parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of worker threads in parallel mode (default: executor default)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show per-region details (same as --log-level DEBUG)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="Path to log file (default: console only)"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be processed without actually processing"
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Mosaicify {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    log_level = "DEBUG" if args.verbose else args.log_level
    log_file = Path(args.log_file) if args.log_file else None
    setup_root_logger(log_level, log_file)
    logger = get_logger(__name__)

    try:
        logger.info(f"Loading configuration: {args.config}")
        config = MosaicifyConfig.from_file(args.config)
        config.validate()

        pipeline = BatchPipeline(
            config,
            parallel=args.parallel,
            max_workers=args.workers,
            observer=ProgressBarObserver(disable=args.no_progress)
        )

        if args.dry_run:
            files = pipeline.discover()
            logger.info(f"DRY RUN - {len(files)} files would be processed:")
            for file_path in files:
                logger.info(f"  {file_path}")
            return 0

        report = pipeline.run()

    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        return 1
    except (MosaicifyError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    logger.info(f"""
Processing complete!
  Total files: {report.attempted}
  Successful: {report.succeeded}
  Failed: {report.error_count}
  Time: {report.elapsed_seconds:.2f}s
  Output directory: {config.paths.output_dir}
        """)

    if report.failed:
        logger.warning(f"{report.error_count} files failed to process")
        for failure in report.failed:
            logger.warning(f"  {failure.path}: {failure.message}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
