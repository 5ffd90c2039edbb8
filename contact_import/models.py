"""Data models shared by the contact import pipeline, stores, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

CUSTOMER_TYPES: Tuple[str, ...] = ("lead", "paying", "subscription")
DEFAULT_CUSTOMER_TYPE = "lead"
DEFAULT_SOURCE = "CSV Import"

# Python attribute -> field name expected by the external contact store.
WIRE_NAMES: Dict[str, str] = {
    "email": "email",
    "name": "name",
    "first_name": "firstName",
    "last_name": "lastName",
    "phone": "phone",
    "tags": "tags",
    "score": "score",
    "daw": "daw",
    "type_of_music": "typeOfMusic",
    "goals": "goals",
    "music_alias": "musicAlias",
    "student_level": "studentLevel",
    "how_long_producing": "howLongProducing",
    "why_signed_up": "whySignedUp",
    "genre_specialty": "genreSpecialty",
    "city": "city",
    "state": "state",
    "state_code": "stateCode",
    "zip_code": "zipCode",
    "country": "country",
    "country_code": "countryCode",
    "opens_email": "opensEmail",
    "clicks_links": "clicksLinks",
    "last_open_date": "lastOpenDate",
    "active_campaign_id": "activeCampaignId",
    "customer_type": "type",
    "source": "source",
}


# --- Core Record Models ---

@dataclass(frozen=True, slots=True)
class ContactRecord:
    """Canonical contact produced from one CSV row."""

    email: Optional[str] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    tags: Tuple[str, ...] = ()
    score: Optional[int] = None
    daw: Optional[str] = None
    type_of_music: Optional[str] = None
    goals: Optional[str] = None
    music_alias: Optional[str] = None
    student_level: Optional[str] = None
    how_long_producing: Optional[str] = None
    why_signed_up: Optional[str] = None
    genre_specialty: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    opens_email: Optional[bool] = None
    clicks_links: Optional[bool] = None
    last_open_date: Optional[int] = None
    active_campaign_id: Optional[str] = None
    customer_type: str = DEFAULT_CUSTOMER_TYPE
    source: str = DEFAULT_SOURCE

    def as_payload(self) -> Dict[str, Any]:
        """Return the record keyed by store field names, omitting unset values."""

        payload: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None or value == ():
                continue
            payload[WIRE_NAMES[item.name]] = list(value) if isinstance(value, tuple) else value
        return payload


@dataclass(frozen=True, slots=True)
class ParsedRow:
    """A record together with the source line it came from."""

    line_number: int
    record: ContactRecord


@dataclass(frozen=True, slots=True)
class CoercionWarning:
    """A value that could not be converted and fell back to a default."""

    row: int
    field: Optional[str]
    raw_value: Optional[str]
    message: str


@dataclass(frozen=True, slots=True)
class RejectedRow:
    """A row dropped before the store was contacted."""

    line_number: int
    reason: str
    record: ContactRecord


# --- Batching & Outcome Models ---

@dataclass(frozen=True, slots=True)
class Batch:
    """Ordered slice of records sent to the store in a single call."""

    index: int
    records: Tuple[ContactRecord, ...]

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True, slots=True)
class RowError:
    """A per-record rejection reported by the store."""

    email: str
    error: str

    def display(self) -> str:
        return f"{self.email}: {self.error}"


@dataclass(slots=True)
class BatchOutcome:
    """Counts and row errors returned by the store for one batch."""

    imported: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[RowError] = field(default_factory=list)

    @property
    def accounted(self) -> int:
        return self.imported + self.updated + self.skipped


@dataclass(frozen=True, slots=True)
class ImportProgress:
    """Cumulative progress emitted after each attempted batch."""

    current: int
    total: int


class ImportStatus(str, Enum):
    """Terminal status attached to an :class:`ImportResult`."""

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ImportState(str, Enum):
    """Lifecycle states of a single import invocation."""

    IDLE = "idle"
    PARSING = "parsing"
    VALIDATING = "validating"
    IMPORTING = "importing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Pipeline-level totals for one import invocation."""

    total_imported: int = 0
    total_updated: int = 0
    total_skipped: int = 0
    row_errors: Tuple[RowError, ...] = ()
    rows_processed: int = 0
    rows_total: int = 0
    batches_completed: int = 0
    status: ImportStatus = ImportStatus.COMPLETED
    rejected: Tuple[RejectedRow, ...] = ()
    warnings: Tuple[CoercionWarning, ...] = ()

    @property
    def errors(self) -> List[str]:
        """Row errors formatted as ``"{email}: {error}"`` in batch order."""
        return [error.display() for error in self.row_errors]

    @property
    def total_processed(self) -> int:
        return self.total_imported + self.total_updated

    @property
    def failure_count(self) -> int:
        return len(self.row_errors)

    def summary(self) -> str:
        return (
            f"{self.total_imported} imported, {self.total_updated} updated, "
            f"{self.total_skipped} skipped, {self.failure_count} failed"
        )


@dataclass(frozen=True, slots=True)
class HeaderMap:
    """Positional mapping from CSV columns to canonical field names."""

    columns: Dict[int, str]
    raw_headers: Tuple[str, ...] = ()
    unmapped: Tuple[str, ...] = ()

    def fields(self) -> List[str]:
        return [self.columns[index] for index in sorted(self.columns)]

    def has_field(self, name: str) -> bool:
        return name in self.columns.values()


@dataclass(frozen=True, slots=True)
class ParsedImport:
    """Output of the parsing and validation stages."""

    header_map: HeaderMap
    records: Tuple[ContactRecord, ...] = ()
    rejected: Tuple[RejectedRow, ...] = ()
    warnings: Tuple[CoercionWarning, ...] = ()

    @property
    def rows_total(self) -> int:
        return len(self.records)


__all__ = [
    "CUSTOMER_TYPES",
    "DEFAULT_CUSTOMER_TYPE",
    "DEFAULT_SOURCE",
    "WIRE_NAMES",
    "Batch",
    "BatchOutcome",
    "CoercionWarning",
    "ContactRecord",
    "HeaderMap",
    "ImportProgress",
    "ImportResult",
    "ImportState",
    "ImportStatus",
    "ParsedImport",
    "ParsedRow",
    "RejectedRow",
    "RowError",
]
