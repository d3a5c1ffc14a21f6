"""
Sequential batch ingestion of payroll extract files.

Files are loaded and committed one at a time. The first failure stops the
batch; files committed before it stay in the dataset.
"""

import glob
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Union
from dataclasses import dataclass, field

from ..config.settings import Settings
from ..data.loader import PayrollFileError, PayrollFileLoader
from ..monitor import PayrollMonitor

logger = logging.getLogger(__name__)


class BatchInProgressError(RuntimeError):
    """A batch was submitted while another batch was still being processed."""


class BatchIngestionError(Exception):
    """A batch stopped because one of its files could not be ingested."""

    def __init__(self, file_path: str, cause: Exception, committed: Optional[List[str]] = None):
        self.file_path = file_path
        self.cause = cause
        self.committed = list(committed or [])
        super().__init__(f"Error processing {Path(file_path).name}: {cause}")


@dataclass
class ProcessingResult:
    """Result of ingesting a single file."""
    file_path: str
    period: str
    employee_count: int
    processing_time: float
    replaced_existing: bool = False


@dataclass
class BatchResult:
    """Outcome of a completed batch."""
    results: List[ProcessingResult] = field(default_factory=list)
    total_processing_time: float = 0.0

    @property
    def periods(self) -> List[str]:
        return [result.period for result in self.results]

    @property
    def file_count(self) -> int:
        return len(self.results)


class BatchProcessor:
    """Feeds extract files into a PayrollMonitor, one file at a time."""

    def __init__(self, settings: Settings, monitor: PayrollMonitor,
                 loader: Optional[PayrollFileLoader] = None,
                 progress_callback: Optional[Callable[[int, int, str], None]] = None):
        self.settings = settings
        self.monitor = monitor
        self.loader = loader or PayrollFileLoader(settings)
        self.progress_callback = progress_callback
        self.logger = logging.getLogger(__name__)
        self._processing = False

    @property
    def is_processing(self) -> bool:
        return self._processing

    def process_directory(self, input_directory: Union[str, Path], pattern: str = "*.xlsx") -> BatchResult:
        """
        Ingest all matching files in a directory, in file name order.

        Args:
            input_directory: Directory containing extract files
            pattern: Glob pattern for extract files

        Returns:
            BatchResult for the ingested files
        """
        input_path = Path(input_directory)
        if not input_path.is_dir():
            raise ValueError(f"Input directory does not exist: {input_directory}")

        files = sorted(glob.glob(str(input_path / pattern)))
        if not files:
            self.logger.warning(f"No files found matching pattern '{pattern}' in {input_directory}")
            return BatchResult()

        self.logger.info(f"Found {len(files)} files to process in {input_directory}")
        return self.process_files(files)

    def process_files(self, file_paths: List[Union[str, Path]]) -> BatchResult:
        """
        Ingest files strictly in the given order.

        Args:
            file_paths: Extract files to ingest

        Returns:
            BatchResult for the ingested files

        Raises:
            BatchInProgressError: If another batch is still running
            BatchIngestionError: On the first file that cannot be ingested
        """
        if self._processing:
            raise BatchInProgressError("A batch is already being processed")

        self._processing = True
        start_time = time.time()
        batch = BatchResult()
        total = len(file_paths)

        try:
            for index, file_path in enumerate(file_paths, start=1):
                try:
                    result = self._process_single_file(str(file_path))
                except PayrollFileError as e:
                    self.logger.error(f"[{index}/{total}] Failed to process {Path(file_path).name}: {e.reason}")
                    raise BatchIngestionError(str(file_path), e, batch.periods) from e
                except Exception as e:
                    self.logger.error(f"[{index}/{total}] Unexpected error processing {Path(file_path).name}: {e}")
                    raise BatchIngestionError(str(file_path), e, batch.periods) from e

                batch.results.append(result)
                self.logger.info(f"[{index}/{total}] {Path(file_path).name} -> {result.period} "
                                 f"({result.employee_count} employees)")

                if self.progress_callback:
                    self.progress_callback(index, total, Path(file_path).name)
        finally:
            self._processing = False
            batch.total_processing_time = time.time() - start_time

        self.logger.info(f"Batch completed in {batch.total_processing_time:.2f}s: {batch.file_count} files, "
                         f"{len(self.monitor.alerts)} alerts")
        return batch

    def _process_single_file(self, file_path: str) -> ProcessingResult:
        """Load one file and commit it to the monitor."""
        start_time = time.time()

        extract = self.loader.load(file_path)
        replaced = extract.period in self.monitor.store
        self.monitor.add_extract(extract)

        return ProcessingResult(
            file_path=file_path,
            period=extract.period,
            employee_count=extract.employee_count,
            processing_time=time.time() - start_time,
            replaced_existing=replaced,
        )
