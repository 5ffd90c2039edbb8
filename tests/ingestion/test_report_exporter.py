import pandas as pd
import pytest

from contact_import.ingestion.exporters import export_import_report, report_to_dataframe
from contact_import.models import CoercionWarning, ContactRecord, ImportResult, RejectedRow, RowError


def _build_result() -> ImportResult:
    return ImportResult(
        total_imported=3,
        row_errors=(RowError("bad-1", "Invalid email format"), RowError("bad-2", "Invalid email format")),
        rejected=(RejectedRow(4, "missing email", ContactRecord(first_name="Ann")),),
        warnings=(CoercionWarning(5, "score", "lots", "not a number; defaulted to 0"),),
    )


def test_report_rows_are_ordered_by_kind():
    dataframe = report_to_dataframe(_build_result())

    assert list(dataframe["kind"]) == ["rejected", "store_error", "store_error", "warning"]
    assert list(dataframe["email"])[1:3] == ["bad-1", "bad-2"]
    assert "lots" in dataframe.iloc[3]["message"]


def test_report_can_exclude_warnings():
    dataframe = report_to_dataframe(_build_result(), include_warnings=False)

    assert "warning" not in set(dataframe["kind"])


def test_export_import_report_to_csv_and_excel(tmp_path):
    csv_path = export_import_report(_build_result(), tmp_path / "report.csv")
    excel_path = export_import_report(_build_result(), tmp_path / "report.xlsx")

    csv_frame = pd.read_csv(csv_path)
    excel_frame = pd.read_excel(excel_path)

    assert list(csv_frame.columns) == ["kind", "row", "email", "field", "message"]
    assert csv_frame.loc[0, "row"] == 4
    assert excel_frame.loc[1, "message"] == "Invalid email format"


def test_empty_report_still_has_columns(tmp_path):
    path = export_import_report(ImportResult(), tmp_path / "empty.csv")

    assert pd.read_csv(path).columns.tolist() == ["kind", "row", "email", "field", "message"]


def test_export_rejects_unknown_extensions(tmp_path):
    with pytest.raises(ValueError, match=".json"):
        export_import_report(_build_result(), tmp_path / "report.json")

    assert not (tmp_path / "report.json").exists()
