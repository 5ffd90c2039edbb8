"""Header mapping, row parsing, validation, and reporting for contact CSV files."""
from __future__ import annotations

from .exporters import export_import_report, report_to_dataframe
from .headers import alias_table, build_header_map, normalize_header
from .parser import CSV_MODES, ParseOutcome, parse_contacts, parse_row
from .validation import ValidationResult, filter_records

__all__ = [
    "CSV_MODES",
    "ParseOutcome",
    "ValidationResult",
    "alias_table",
    "build_header_map",
    "export_import_report",
    "filter_records",
    "normalize_header",
    "parse_contacts",
    "parse_row",
    "report_to_dataframe",
]
