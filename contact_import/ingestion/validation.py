"""Acceptance filter applied to parsed rows before they reach the store."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from ..models import ContactRecord, ParsedRow, RejectedRow

LOGGER = logging.getLogger(__name__)

MISSING_EMAIL = "missing email"


@dataclass(slots=True)
class ValidationResult:
    valid: List[ContactRecord] = field(default_factory=list)
    rejected: List[RejectedRow] = field(default_factory=list)


def has_email(record: ContactRecord) -> bool:
    return bool(record.email and record.email.strip())


def filter_records(rows: Iterable[ParsedRow]) -> ValidationResult:
    """Split parsed rows into importable records and rejected rows.

    Only a missing or empty email rejects a row. Malformed emails are passed
    through so the store can make the final call on them.
    """

    result = ValidationResult()
    for row in rows:
        if has_email(row.record):
            result.valid.append(row.record)
        else:
            result.rejected.append(RejectedRow(line_number=row.line_number, reason=MISSING_EMAIL, record=row.record))

    if result.rejected:
        LOGGER.info("Rejected %s rows without an email address", len(result.rejected))
    return result


__all__ = ["MISSING_EMAIL", "ValidationResult", "filter_records", "has_email"]
