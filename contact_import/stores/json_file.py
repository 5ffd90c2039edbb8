"""Contact store persisted to a local JSON document."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from ..errors import ContactStoreError
from .memory import InMemoryContactStore

LOGGER = logging.getLogger(__name__)


class JsonFileContactStore(InMemoryContactStore):
    """:class:`InMemoryContactStore` that rewrites ``path`` after every batch."""

    name = "json_file"

    def __init__(self, path: str | Path, skip_existing: bool = False) -> None:
        super().__init__(skip_existing=skip_existing)
        self._path = Path(path)
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            document = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise ContactStoreError(f"Contact file '{self._path}' is not valid JSON: {exc}") from exc

        for store_id, contacts in document.get("stores", {}).items():
            for contact in contacts:
                self._contacts[self._key(store_id, contact["email"])] = dict(contact)
        LOGGER.debug("Loaded %s contacts from %s", len(self._contacts), self._path)

    def _after_upsert(self) -> None:
        stores: Dict[str, List[Dict[str, Any]]] = {}
        for (store_id, _), contact in self._contacts.items():
            stores.setdefault(store_id, []).append(contact)

        document = json.dumps({"stores": stores}, indent=2, ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Readers only ever see a complete document.
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self._path.parent, prefix=f".{self._path.name}.", delete=False
            ) as handle:
                handle.write(document)
            try:
                os.replace(handle.name, self._path)
            except OSError:
                os.unlink(handle.name)
                raise
        except OSError as exc:
            raise ContactStoreError(f"Could not write contacts to '{self._path}': {exc}") from exc


__all__ = ["JsonFileContactStore"]
