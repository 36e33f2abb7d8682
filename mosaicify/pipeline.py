"""
Batch pipeline: runs the image processor over every discovered file.

A failure in one file is logged, reported to the observer and recorded in
the batch report; the remaining files are still processed. Only creating
the output directory and listing the input directory are fatal.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Any, Optional

from .config import MosaicifyConfig
from .errors import PipelineError
from .logger import get_logger
from .processor import ImageProcessor

logger = get_logger(__name__)


@dataclass
class FileError:
    """A file that failed to process."""
    path: Path
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"file": str(self.path), "error": self.message}


@dataclass
class BatchReport:
    """
    Outcome of a batch run.

    Attributes:
        attempted: Number of files the pipeline tried to process
        succeeded: Number of files written successfully
        failed: Files that failed, with their error messages
        outputs: Paths of the written images
        elapsed_seconds: Wall-clock duration of the run
    """
    attempted: int = 0
    succeeded: int = 0
    failed: List[FileError] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def error_count(self) -> int:
        return len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": [f.to_dict() for f in self.failed],
            "outputs": [str(p) for p in self.outputs],
            "elapsed_seconds": self.elapsed_seconds
        }


class ProgressCounter:
    """Thread-safe count of completed files."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        """Add one and return the new count."""
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class BatchObserver:
    """
    Receives progress and error notifications from a batch run.

    Methods may be called from worker threads in parallel mode. The default
    implementation ignores everything.
    """

    def on_start(self, total: int) -> None:
        pass

    def on_file_done(self, path: Path, completed: int) -> None:
        pass

    def on_file_error(self, path: Path, error: Exception) -> None:
        pass

    def on_finish(self, report: BatchReport) -> None:
        pass


class BatchPipeline:
    """
    Processes every supported image in the input directory.
    """

    def __init__(
        self,
        config: MosaicifyConfig,
        parallel: bool = False,
        max_workers: Optional[int] = None,
        observer: Optional[BatchObserver] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Validated configuration
            parallel: Process files concurrently on a thread pool
            max_workers: Pool size for parallel mode (executor default if None)
            observer: Receives progress and per-file errors
        """
        self.config = config
        self.parallel = parallel
        self.max_workers = max_workers
        self.observer = observer or BatchObserver()
        self.processor = ImageProcessor(config)
        self.progress = ProgressCounter()
        self._report_lock = threading.Lock()

    def discover(self) -> List[Path]:
        """List the files a run would process."""
        return self.processor.get_image_files()

    def run(self) -> BatchReport:
        """
        Run the batch.

        Returns:
            Report whose ``attempted`` count is the number of files discovered

        Raises:
            PipelineError: If the output directory cannot be created
            DiscoveryError: If the input directory cannot be read
        """
        start_time = time.time()
        output_dir = self.config.paths.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PipelineError(f"Cannot create output directory {output_dir}: {e}") from e

        files = self.discover()
        report = BatchReport(attempted=len(files))
        self.progress = ProgressCounter()

        if not files:
            logger.info(f"No supported image files found in {self.config.paths.input_dir}")
            report.elapsed_seconds = time.time() - start_time
            self.observer.on_finish(report)
            return report

        logger.info(
            f"Found {len(files)} image files, processing {'in parallel' if self.parallel else 'sequentially'}"
        )
        self.observer.on_start(len(files))

        if self.parallel:
            self._process_parallel(files, report)
        else:
            self._process_sequential(files, report)

        report.elapsed_seconds = time.time() - start_time
        self.observer.on_finish(report)
        return report

    def _process_sequential(self, files: List[Path], report: BatchReport) -> None:
        """Process files one after another in list order."""
        for path in files:
            self._process_one(path, report)

    def _process_parallel(self, files: List[Path], report: BatchReport) -> None:
        """Process files on a thread pool, one task per file."""
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self._process_one, path, report) for path in files]
            for future in as_completed(futures):
                # _process_one handles per-file errors; anything here is a bug
                future.result()

    def _process_one(self, path: Path, report: BatchReport) -> None:
        try:
            output_path = self.processor.process_image(path)
        except Exception as e:
            logger.error(f"Failed to process {path}: {e}")
            with self._report_lock:
                report.failed.append(FileError(path=path, message=str(e)))
            self.observer.on_file_error(path, e)
        else:
            with self._report_lock:
                report.succeeded += 1
                report.outputs.append(output_path)

        completed = self.progress.increment()
        self.observer.on_file_done(path, completed)
