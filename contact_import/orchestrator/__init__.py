"""Batch orchestration for importing contacts into a store."""

from .batching import DEFAULT_BATCH_SIZE, make_batches
from .progress import ProgressRecorder, ProgressReporter
from .service import CancellationToken, ImportOrchestrator, ImportRun

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "CancellationToken",
    "ImportOrchestrator",
    "ImportRun",
    "ProgressRecorder",
    "ProgressReporter",
    "make_batches",
]
