"""Exception hierarchy for the contact import pipeline."""
from __future__ import annotations

from typing import Optional

from .models import ImportResult


class ContactImportError(Exception):
    """Base class for every error raised by the import pipeline."""


class ImportInputError(ContactImportError):
    """Raised when the input cannot be imported at all (empty file, unusable header)."""


class ContactStoreError(ContactImportError):
    """Raised by a contact store when a whole batch cannot be processed."""


class InvalidBatchOutcomeError(ContactStoreError):
    """Raised when a store reports more outcomes than the batch contained."""

    def __init__(self, batch_index: int, batch_size: int, accounted: int) -> None:
        super().__init__(
            f"Store reported {accounted} imported/updated/skipped records for batch {batch_index} "
            f"which only held {batch_size}"
        )
        self.batch_index = batch_index
        self.batch_size = batch_size
        self.accounted = accounted


class BatchImportError(ContactImportError):
    """A batch upsert failed; remaining batches were not attempted."""

    def __init__(self, batch_index: int, partial_result: ImportResult, message: Optional[str] = None) -> None:
        super().__init__(message or f"Batch {batch_index} failed; {partial_result.summary()} before the failure")
        self.batch_index = batch_index
        self.partial_result = partial_result


class ImportCancelledError(ContactImportError):
    """The import was cancelled between batches."""

    def __init__(self, next_batch_index: int, partial_result: ImportResult) -> None:
        super().__init__(
            f"Import cancelled before batch {next_batch_index}; {partial_result.summary()} so far"
        )
        self.next_batch_index = next_batch_index
        self.partial_result = partial_result


__all__ = [
    "BatchImportError",
    "ContactImportError",
    "ContactStoreError",
    "ImportCancelledError",
    "ImportInputError",
    "InvalidBatchOutcomeError",
]
