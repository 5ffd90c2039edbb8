"""Export of import issues (rejections, store errors, warnings) to spreadsheets."""
from __future__ import annotations

from pathlib import Path
from typing import List, MutableMapping, Optional, Union

import pandas as pd

from ..models import ImportResult

PathLike = Union[str, Path]

REPORT_COLUMNS = ["kind", "row", "email", "field", "message"]
REPORT_SUFFIXES = (".csv", ".tsv", ".xlsx", ".xlsm")


def export_import_report(
    result: ImportResult,
    path: PathLike,
    *,
    include_warnings: bool = True,
    sheet_name: str = "Import Report",
    exporter_kwargs: Optional[MutableMapping[str, object]] = None,
) -> Path:
    """Write every issue recorded on ``result`` to a CSV, TSV or Excel file."""

    dataframe = report_to_dataframe(result, include_warnings=include_warnings)
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _write_dataframe(dataframe, output_path, sheet_name=sheet_name, exporter_kwargs=exporter_kwargs)
    return output_path


def report_to_dataframe(result: ImportResult, *, include_warnings: bool = True) -> pd.DataFrame:
    """Flatten the issues on ``result`` into a :class:`pandas.DataFrame`.

    Rows appear as rejected rows first, then store errors in batch order,
    then warnings.
    """

    records: List[MutableMapping[str, object]] = []
    for rejected in result.rejected:
        records.append(
            {
                "kind": "rejected",
                "row": rejected.line_number,
                "email": rejected.record.email or "",
                "field": "email",
                "message": rejected.reason,
            }
        )
    for error in result.row_errors:
        records.append({"kind": "store_error", "row": None, "email": error.email, "field": "", "message": error.error})
    if include_warnings:
        for warning in result.warnings:
            records.append(
                {
                    "kind": "warning",
                    "row": warning.row,
                    "email": "",
                    "field": warning.field or "",
                    "message": _format_warning(warning.raw_value, warning.message),
                }
            )

    dataframe = pd.DataFrame(records, columns=REPORT_COLUMNS)
    dataframe["row"] = dataframe["row"].astype("Int64")
    return dataframe


def _format_warning(raw_value: Optional[str], message: str) -> str:
    if raw_value is None:
        return message
    return f"{message} (value: {raw_value!r})"


def _write_dataframe(
    dataframe: pd.DataFrame,
    path: Path,
    *,
    sheet_name: str,
    exporter_kwargs: Optional[MutableMapping[str, object]],
) -> None:
    exporter_kwargs = dict(exporter_kwargs or {})
    suffix = path.suffix.lower()

    if suffix not in REPORT_SUFFIXES:
        raise ValueError(f"Unsupported export file extension: {suffix or '(none)'}")

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            exporter_kwargs.setdefault("sep", "\t")
        dataframe.to_csv(path, index=False, **exporter_kwargs)
        return

    engine = exporter_kwargs.pop("engine", None) or "openpyxl"
    dataframe.to_excel(path, index=False, sheet_name=sheet_name, engine=engine, **exporter_kwargs)


__all__ = ["REPORT_COLUMNS", "REPORT_SUFFIXES", "export_import_report", "report_to_dataframe"]
