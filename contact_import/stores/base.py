"""Contract between the import pipeline and the external contact store."""
from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ..errors import InvalidBatchOutcomeError
from ..models import Batch, BatchOutcome, ContactRecord

LOGGER = logging.getLogger(__name__)


class ContactStore(Protocol):
    """Idempotent insert-or-update of contacts keyed by email within a store.

    Per-record failures are reported in :attr:`BatchOutcome.errors`. Raising
    means the whole batch failed.
    """

    def upsert_contacts(
        self,
        store_id: str,
        admin_user_id: str,
        contacts: Sequence[ContactRecord],
    ) -> BatchOutcome:  # pragma: no cover - runtime protocol
        """Insert or update ``contacts`` for ``store_id`` on behalf of ``admin_user_id``."""


class UpsertClient:
    """Sends one batch per call to a :class:`ContactStore` for a fixed store and admin."""

    def __init__(self, store: ContactStore, *, store_id: str, admin_user_id: str) -> None:
        if not store_id:
            raise ValueError("store_id is required")
        if not admin_user_id:
            raise ValueError("admin_user_id is required")
        self._store = store
        self.store_id = store_id
        self.admin_user_id = admin_user_id

    def send(self, batch: Batch) -> BatchOutcome:
        LOGGER.debug("Upserting batch %s (%s contacts) into store %s", batch.index, len(batch), self.store_id)
        outcome = self._store.upsert_contacts(self.store_id, self.admin_user_id, batch.records)
        if outcome.accounted > len(batch):
            raise InvalidBatchOutcomeError(batch.index, len(batch), outcome.accounted)
        return outcome


__all__ = ["ContactStore", "UpsertClient"]
