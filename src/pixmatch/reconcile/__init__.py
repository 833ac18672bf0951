"""Match misnamed copies in one directory against correctly named originals."""

from .model import (
    ComparisonFailure,
    ReconcileReport,
    Replacement,
    reconcile_directories,
    write_processed_log,
)
from .compare import compare_files, compare_images
from .scan import DirectoryScanError, file_timestamp, list_images, within_time_window

__all__ = [
    "ComparisonFailure",
    "ReconcileReport",
    "Replacement",
    "reconcile_directories",
    "write_processed_log",
    "compare_files",
    "compare_images",
    "DirectoryScanError",
    "file_timestamp",
    "list_images",
    "within_time_window",
]
