"""Reading import files from disk as CSV text."""
from __future__ import annotations

from pathlib import Path

import pandas as pd

_CSV_SUFFIXES = {".csv", ".txt"}
_EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xltx", ".xltm"}


def read_import_text(path: str | Path) -> str:
    """Return the contents of ``path`` as CSV text.

    Workbooks are converted from their first sheet with every cell read as
    text, so they go through the same parser as CSV uploads.
    """

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(file_path)

    suffix = file_path.suffix.lower()
    if suffix in _CSV_SUFFIXES:
        return file_path.read_text(encoding="utf-8-sig")
    if suffix in _EXCEL_SUFFIXES:
        return _excel_to_csv_text(file_path)
    raise ValueError(f"Unsupported input format '{file_path.suffix}'. Use CSV or Excel spreadsheet")


def _excel_to_csv_text(path: Path) -> str:
    frame = pd.read_excel(path, sheet_name=0, dtype=str, keep_default_na=False, engine="openpyxl")
    return frame.to_csv(index=False)


__all__ = ["read_import_text"]
