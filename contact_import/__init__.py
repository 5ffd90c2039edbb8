"""Bulk contact import pipeline for store audiences."""

from . import models  # noqa: F401
from .errors import (
    BatchImportError,
    ContactImportError,
    ContactStoreError,
    ImportCancelledError,
    ImportInputError,
)
from .models import (
    Batch,
    BatchOutcome,
    ContactRecord,
    ImportProgress,
    ImportResult,
    ImportState,
    ImportStatus,
    RowError,
)
from .orchestrator import CancellationToken, ImportOrchestrator
from .stores import ContactStore, InMemoryContactStore, JsonFileContactStore

__all__ = [
    "Batch",
    "BatchImportError",
    "BatchOutcome",
    "CancellationToken",
    "ContactImportError",
    "ContactRecord",
    "ContactStore",
    "ContactStoreError",
    "ImportCancelledError",
    "ImportInputError",
    "ImportOrchestrator",
    "ImportProgress",
    "ImportResult",
    "ImportState",
    "ImportStatus",
    "InMemoryContactStore",
    "JsonFileContactStore",
    "RowError",
    "ingestion",
    "orchestrator",
    "stores",
]
