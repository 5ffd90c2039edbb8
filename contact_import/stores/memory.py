"""Reference contact store that keeps contacts in memory."""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Sequence, Tuple

from ..models import BatchOutcome, ContactRecord, RowError

LOGGER = logging.getLogger(__name__)

INVALID_EMAIL = "Invalid email format"

ContactKey = Tuple[str, str]


class InMemoryContactStore:
    """Idempotent upsert-by-email store.

    A new ``(store_id, email)`` pair is counted as imported. An existing one
    has its fields merged and is counted as updated, or skipped when
    ``skip_existing`` is set.
    """

    name = "memory"

    def __init__(self, skip_existing: bool = False) -> None:
        self._skip_existing = skip_existing
        self._contacts: Dict[ContactKey, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(store_id: str, email: str) -> ContactKey:
        return store_id, email.strip().lower()

    def upsert_contacts(
        self,
        store_id: str,
        admin_user_id: str,
        contacts: Sequence[ContactRecord],
    ) -> BatchOutcome:
        outcome = BatchOutcome()
        with self._lock:
            previous: Dict[ContactKey, Optional[Dict[str, Any]]] = {}
            for contact in contacts:
                email = (contact.email or "").strip()
                if "@" not in email:
                    outcome.errors.append(RowError(email=email, error=INVALID_EMAIL))
                    continue

                key = self._key(store_id, email)
                payload = contact.as_payload()
                payload["email"] = key[1]
                existing = self._contacts.get(key)
                if key not in previous:
                    previous[key] = dict(existing) if existing is not None else None
                if existing is None:
                    payload["storeId"] = store_id
                    payload["adminUserId"] = admin_user_id
                    self._contacts[key] = payload
                    outcome.imported += 1
                elif self._skip_existing:
                    outcome.skipped += 1
                else:
                    existing.update(payload)
                    outcome.updated += 1
            try:
                self._after_upsert()
            except Exception:
                self._restore(previous)
                raise

        LOGGER.debug(
            "Store %s: %s imported, %s updated, %s skipped, %s errors",
            store_id,
            outcome.imported,
            outcome.updated,
            outcome.skipped,
            len(outcome.errors),
        )
        return outcome

    def _after_upsert(self) -> None:
        """Hook for subclasses that persist after each batch.

        When it raises, the batch is rolled back so a retry sees the same state.
        """

    def _restore(self, previous: Dict[ContactKey, Optional[Dict[str, Any]]]) -> None:
        for key, contact in previous.items():
            if contact is None:
                self._contacts.pop(key, None)
            else:
                self._contacts[key] = contact

    def get(self, store_id: str, email: str) -> Optional[Dict[str, Any]]:
        contact = self._contacts.get(self._key(store_id, email))
        return dict(contact) if contact is not None else None

    def count(self, store_id: Optional[str] = None) -> int:
        if store_id is None:
            return len(self._contacts)
        return sum(1 for owner, _ in self._contacts if owner == store_id)


__all__ = ["INVALID_EMAIL", "InMemoryContactStore"]
