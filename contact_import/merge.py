"""Accumulation of per-batch store outcomes into a single import result."""
from __future__ import annotations

from typing import Iterable, List

from .models import BatchOutcome, CoercionWarning, ImportResult, ImportStatus, RejectedRow, RowError


class ResultAggregator:
    """Running totals for one import invocation, merged in batch order."""

    def __init__(self) -> None:
        self.total_imported = 0
        self.total_updated = 0
        self.total_skipped = 0
        self.batches_completed = 0
        self._errors: List[RowError] = []

    @property
    def errors(self) -> List[RowError]:
        return list(self._errors)

    def add(self, outcome: BatchOutcome) -> None:
        self.total_imported += outcome.imported
        self.total_updated += outcome.updated
        self.total_skipped += outcome.skipped
        self._errors.extend(outcome.errors)
        self.batches_completed += 1

    def build(
        self,
        *,
        rows_processed: int,
        rows_total: int,
        status: ImportStatus = ImportStatus.COMPLETED,
        rejected: Iterable[RejectedRow] = (),
        warnings: Iterable[CoercionWarning] = (),
    ) -> ImportResult:
        """Freeze the current totals into an :class:`ImportResult`."""

        return ImportResult(
            total_imported=self.total_imported,
            total_updated=self.total_updated,
            total_skipped=self.total_skipped,
            row_errors=tuple(self._errors),
            rows_processed=rows_processed,
            rows_total=rows_total,
            batches_completed=self.batches_completed,
            status=status,
            rejected=tuple(rejected),
            warnings=tuple(warnings),
        )


def merge_outcomes(outcomes: Iterable[BatchOutcome]) -> ResultAggregator:
    """Fold outcomes, in the order given, into a fresh aggregator."""

    aggregator = ResultAggregator()
    for outcome in outcomes:
        aggregator.add(outcome)
    return aggregator


__all__ = ["ResultAggregator", "merge_outcomes"]
