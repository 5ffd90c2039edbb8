"""Conversion of raw CSV text into typed :class:`ContactRecord` objects."""
from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from ..errors import ImportInputError
from ..models import (
    CUSTOMER_TYPES,
    DEFAULT_CUSTOMER_TYPE,
    CoercionWarning,
    ContactRecord,
    HeaderMap,
    ParsedRow,
)
from .headers import build_header_map

LOGGER = logging.getLogger(__name__)

CSV_MODES = ("quoted", "legacy")

_LEADING_INTEGER = re.compile(r"^[+-]?\d+")
_TRUE_VALUES = {"true", "1"}
_KNOWN_BOOLEAN_VALUES = {"true", "1", "false", "0", "yes", "no"}
# Relative tokens pandas resolves against the clock at parse time.
_RELATIVE_DATE_TOKENS = {"now", "today", "yesterday", "tomorrow"}

Coercer = Callable[[str, int, str, List[CoercionWarning]], Any]


@dataclass(slots=True)
class ParseOutcome:
    """Records parsed from one CSV document plus any coercion warnings."""

    header_map: HeaderMap
    rows: List[ParsedRow] = field(default_factory=list)
    warnings: List[CoercionWarning] = field(default_factory=list)


# --- Value coercion ---

def parse_score(value: str) -> Optional[int]:
    """Parse the leading integer of ``value``; ``None`` when there is none."""

    match = _LEADING_INTEGER.match(value.strip())
    if match is None:
        return None
    return int(match.group(0))


def parse_flag(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def parse_tags(value: str) -> Tuple[str, ...]:
    return tuple(tag.strip() for tag in value.split(";") if tag.strip())


def parse_timestamp(value: str) -> Optional[int]:
    """Parse a free-form date string into epoch milliseconds (UTC)."""

    value = value.strip()
    if value.lower() in _RELATIVE_DATE_TOKENS:
        return None
    try:
        timestamp = pd.to_datetime(value, errors="coerce", utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(timestamp):
        return None
    return int(timestamp.value // 1_000_000)


def _coerce_text(value: str, row: int, name: str, warnings: List[CoercionWarning]) -> str:
    return value


def _coerce_score(value: str, row: int, name: str, warnings: List[CoercionWarning]) -> int:
    parsed = parse_score(value)
    if parsed is None:
        warnings.append(CoercionWarning(row, name, value, "not a number; defaulted to 0"))
        return 0
    return parsed


def _coerce_flag(value: str, row: int, name: str, warnings: List[CoercionWarning]) -> bool:
    if value.strip().lower() not in _KNOWN_BOOLEAN_VALUES:
        warnings.append(CoercionWarning(row, name, value, "not a boolean; treated as false"))
    return parse_flag(value)


def _coerce_tags(value: str, row: int, name: str, warnings: List[CoercionWarning]) -> Tuple[str, ...]:
    return parse_tags(value)


def _coerce_timestamp(value: str, row: int, name: str, warnings: List[CoercionWarning]) -> Optional[int]:
    parsed = parse_timestamp(value)
    if parsed is None:
        warnings.append(CoercionWarning(row, name, value, "not a recognisable date; omitted"))
    return parsed


def _coerce_customer_type(value: str, row: int, name: str, warnings: List[CoercionWarning]) -> str:
    normalized = value.strip().lower()
    if normalized in CUSTOMER_TYPES:
        return normalized
    warnings.append(
        CoercionWarning(
            row,
            name,
            value,
            f"invalid customer type (must be: {', '.join(CUSTOMER_TYPES)}); defaulted to {DEFAULT_CUSTOMER_TYPE}",
        )
    )
    return DEFAULT_CUSTOMER_TYPE


_COERCERS: Dict[str, Coercer] = {
    "score": _coerce_score,
    "opens_email": _coerce_flag,
    "clicks_links": _coerce_flag,
    "tags": _coerce_tags,
    "last_open_date": _coerce_timestamp,
    "customer_type": _coerce_customer_type,
}


# --- Row splitting ---

def _is_blank(cells: Sequence[str]) -> bool:
    return not any(cell.strip() for cell in cells)


def _iter_legacy_rows(text: str) -> Iterator[Tuple[int, List[str]]]:
    # Only "\n" ends a line; other Unicode line breaks stay inside the cell.
    for line_number, line in enumerate(text.split("\n"), start=1):
        line = line[:-1] if line.endswith("\r") else line
        yield line_number, [cell.strip() for cell in line.split(",")]


def _iter_quoted_rows(text: str) -> Iterator[Tuple[int, List[str]]]:
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        for row in reader:
            yield reader.line_num, [cell.strip() for cell in row]
    except csv.Error as exc:
        raise ImportInputError(f"Malformed CSV near line {reader.line_num}: {exc}") from exc


def iter_rows(text: str, *, csv_mode: str = "quoted") -> Iterator[Tuple[int, List[str]]]:
    """Yield ``(line_number, cells)`` for every non-blank line of ``text``.

    ``quoted`` honours RFC 4180 quoting so ``"Doe, Jr."`` stays in one cell.
    ``legacy`` splits on every comma, matching imports made before quoting
    was supported.
    """

    if csv_mode not in CSV_MODES:
        raise ValueError(f"Unsupported csv_mode '{csv_mode}'. Expected one of {CSV_MODES}")
    rows = _iter_legacy_rows(text) if csv_mode == "legacy" else _iter_quoted_rows(text)
    for line_number, cells in rows:
        if _is_blank(cells):
            continue
        yield line_number, cells


# --- Record construction ---

def parse_row(
    cells: Sequence[str],
    header_map: HeaderMap,
    *,
    line_number: int,
    warnings: List[CoercionWarning],
) -> ContactRecord:
    """Convert one row of cells into a :class:`ContactRecord`."""

    values: Dict[str, Any] = {}
    for index, name in sorted(header_map.columns.items()):
        if index >= len(cells):
            continue
        raw = cells[index].strip()
        if not raw:
            continue
        coercer = _COERCERS.get(name, _coerce_text)
        coerced = coercer(raw, line_number, name, warnings)
        if coerced is None:
            continue
        values[name] = coerced
    return ContactRecord(**values)


def _header_warnings(header_map: HeaderMap, line_number: int) -> List[CoercionWarning]:
    warnings = [
        CoercionWarning(line_number, None, header, "column is not recognised and was ignored")
        for header in header_map.unmapped
    ]
    if not header_map.has_field("email"):
        LOGGER.warning("No column maps to 'email'; every row will be rejected (headers: %s)", list(header_map.raw_headers))
        warnings.append(
            CoercionWarning(line_number, "email", None, "no column maps to email; every row will be rejected")
        )
    return warnings


def parse_contacts(text: str, *, csv_mode: str = "quoted") -> ParseOutcome:
    """Parse a CSV document whose first non-blank line holds the headers."""

    if text is None or not text.strip():
        raise ImportInputError("The import file is empty")

    rows = iter_rows(text.lstrip("\ufeff"), csv_mode=csv_mode)
    try:
        header_line, header_cells = next(rows)
    except StopIteration as exc:  # pragma: no cover - guarded by the emptiness check
        raise ImportInputError("The import file is empty") from exc

    header_map = build_header_map(header_cells)
    outcome = ParseOutcome(header_map=header_map, warnings=_header_warnings(header_map, header_line))

    for line_number, cells in rows:
        record = parse_row(cells, header_map, line_number=line_number, warnings=outcome.warnings)
        outcome.rows.append(ParsedRow(line_number=line_number, record=record))

    LOGGER.debug(
        "Parsed %s rows (%s mode) with %s warnings", len(outcome.rows), csv_mode, len(outcome.warnings)
    )
    return outcome


__all__ = [
    "CSV_MODES",
    "ParseOutcome",
    "iter_rows",
    "parse_contacts",
    "parse_flag",
    "parse_row",
    "parse_score",
    "parse_tags",
    "parse_timestamp",
]
