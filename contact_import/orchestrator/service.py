"""Import orchestrator that drives CSV text through parsing, validation and batched upserts."""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Sequence

from ..errors import BatchImportError, ImportCancelledError, ImportInputError
from ..ingestion.parser import CSV_MODES, parse_contacts
from ..ingestion.validation import MISSING_EMAIL, filter_records, has_email
from ..merge import ResultAggregator
from ..models import (
    Batch,
    CoercionWarning,
    ContactRecord,
    ImportResult,
    ImportState,
    ImportStatus,
    ParsedImport,
    RejectedRow,
)
from ..stores.base import ContactStore, UpsertClient
from .batching import DEFAULT_BATCH_SIZE, make_batches
from .progress import ProgressCallback, ProgressReporter

LOGGER = logging.getLogger(__name__)

StateListener = Callable[[ImportState], None]


class CancellationToken:
    """Cooperative cancellation flag checked between batches."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ImportRun:
    """State and running totals for exactly one import invocation."""

    def __init__(
        self,
        client: UpsertClient,
        *,
        batch_size: int,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
        state_listener: Optional[StateListener] = None,
    ) -> None:
        self._client = client
        self._batch_size = batch_size
        self._progress_callback = progress_callback
        self._cancel_token = cancel_token
        self._state_listener = state_listener
        self._aggregator = ResultAggregator()
        self.state = ImportState.IDLE

    def _transition(self, state: ImportState) -> None:
        LOGGER.debug("Import state %s -> %s", self.state.value, state.value)
        self.state = state
        if self._state_listener is not None:
            self._state_listener(state)

    def preview(self, text: str, *, csv_mode: str) -> ParsedImport:
        self._transition(ImportState.PARSING)
        try:
            parsed = parse_contacts(text, csv_mode=csv_mode)
        except ImportInputError:
            self._transition(ImportState.FAILED)
            raise
        self._transition(ImportState.VALIDATING)
        validation = filter_records(parsed.rows)
        return ParsedImport(
            header_map=parsed.header_map,
            records=tuple(validation.valid),
            rejected=tuple(validation.rejected),
            warnings=tuple(parsed.warnings),
        )

    def execute(
        self,
        records: Sequence[ContactRecord],
        *,
        rejected: Sequence[RejectedRow] = (),
        warnings: Sequence[CoercionWarning] = (),
    ) -> ImportResult:
        total = len(records)
        if not records:
            LOGGER.info("No importable contacts; skipping store calls")
            self._transition(ImportState.COMPLETED)
            return self._aggregator.build(rows_processed=0, rows_total=0, rejected=rejected, warnings=warnings)

        batches: List[Batch] = make_batches(records, self._batch_size)
        reporter = ProgressReporter(total, self._batch_size, self._progress_callback)
        self._transition(ImportState.IMPORTING)
        LOGGER.info(
            "Importing %s contacts into store %s in %s batches of up to %s",
            total,
            self._client.store_id,
            len(batches),
            self._batch_size,
        )

        for batch in batches:
            if self._cancel_token is not None and self._cancel_token.cancelled:
                self._transition(ImportState.CANCELLED)
                partial = self._aggregator.build(
                    rows_processed=reporter.current,
                    rows_total=total,
                    status=ImportStatus.CANCELLED,
                    rejected=rejected,
                    warnings=warnings,
                )
                LOGGER.info("Import cancelled before batch %s: %s", batch.index, partial.summary())
                raise ImportCancelledError(batch.index, partial)

            try:
                outcome = self._client.send(batch)
            except Exception as exc:
                LOGGER.exception("Batch %s of %s failed", batch.index + 1, len(batches))
                reporter.report(batch.index)
                self._transition(ImportState.FAILED)
                partial = self._aggregator.build(
                    rows_processed=reporter.current,
                    rows_total=total,
                    status=ImportStatus.FAILED,
                    rejected=rejected,
                    warnings=warnings,
                )
                raise BatchImportError(batch.index, partial) from exc

            self._aggregator.add(outcome)
            reporter.report(batch.index)

        self._transition(ImportState.COMPLETED)
        result = self._aggregator.build(
            rows_processed=reporter.current,
            rows_total=total,
            rejected=rejected,
            warnings=warnings,
        )
        LOGGER.info("Import into store %s finished: %s", self._client.store_id, result.summary())
        return result


class ImportOrchestrator:
    """Runs CSV imports against a contact store, one batch at a time."""

    def __init__(
        self,
        store: ContactStore,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        csv_mode: str = "quoted",
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be a positive integer, got {batch_size}")
        if csv_mode not in CSV_MODES:
            raise ValueError(f"Unsupported csv_mode '{csv_mode}'. Expected one of {CSV_MODES}")
        self._store = store
        self._batch_size = batch_size
        self._csv_mode = csv_mode

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def csv_mode(self) -> str:
        return self._csv_mode

    def preview(self, text: str) -> ParsedImport:
        """Parse and validate ``text`` without contacting the store."""

        run = ImportRun(_NullClient(), batch_size=self._batch_size)
        return run.preview(text, csv_mode=self._csv_mode)

    def import_text(
        self,
        text: str,
        *,
        store_id: str,
        admin_user_id: str,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
        state_listener: Optional[StateListener] = None,
    ) -> ImportResult:
        """Import raw CSV text into ``store_id``'s audience.

        Raises :class:`ImportInputError` before any store call when the text
        cannot be imported, :class:`BatchImportError` when a batch call fails
        and :class:`ImportCancelledError` when ``cancel_token`` is set between
        batches. The last two carry the totals gathered so far.
        """

        client = UpsertClient(self._store, store_id=store_id, admin_user_id=admin_user_id)
        run = ImportRun(
            client,
            batch_size=self._batch_size,
            progress_callback=progress_callback,
            cancel_token=cancel_token,
            state_listener=state_listener,
        )
        parsed = run.preview(text, csv_mode=self._csv_mode)
        return run.execute(parsed.records, rejected=parsed.rejected, warnings=parsed.warnings)

    def import_records(
        self,
        records: Sequence[ContactRecord],
        *,
        store_id: str,
        admin_user_id: str,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ImportResult:
        """Import already-built records; records without an email are rejected."""

        client = UpsertClient(self._store, store_id=store_id, admin_user_id=admin_user_id)
        run = ImportRun(
            client,
            batch_size=self._batch_size,
            progress_callback=progress_callback,
            cancel_token=cancel_token,
        )
        valid = [record for record in records if has_email(record)]
        rejected = [
            RejectedRow(line_number=position, reason=MISSING_EMAIL, record=record)
            for position, record in enumerate(records, start=1)
            if not has_email(record)
        ]
        return run.execute(valid, rejected=rejected)

    def add_contact(self, record: ContactRecord, *, store_id: str, admin_user_id: str) -> ImportResult:
        """Upsert a single manually entered contact."""

        if not has_email(record):
            raise ImportInputError("A contact needs an email address")
        return self.import_records([record], store_id=store_id, admin_user_id=admin_user_id)


class _NullClient:
    store_id = "(preview)"

    def send(self, batch: Batch):  # pragma: no cover - previews never send
        raise RuntimeError("Previews do not contact the store")


__all__ = ["CancellationToken", "ImportOrchestrator", "ImportRun", "StateListener"]
