"""
Batch ingestion of multiple payroll extract files.
"""

from .batch_processor import BatchProcessor, BatchIngestionError, BatchInProgressError

__all__ = ['BatchProcessor', 'BatchIngestionError', 'BatchInProgressError']
