import pandas as pd
import pytest

from contact_import.ingestion.parser import parse_contacts
from contact_import.io import read_import_text


def test_csv_text_is_read_without_byte_order_mark(tmp_path):
    path = tmp_path / "fans.csv"
    path.write_text("\ufeffEmail\na@x.com\n", encoding="utf-8")

    assert read_import_text(path) == "Email\na@x.com\n"


def test_workbook_is_converted_to_quoted_csv(tmp_path):
    path = tmp_path / "fans.xlsx"
    pd.DataFrame([{"Email": "a@x.com", "Name": "Doe, Jr.", "Score": "7"}]).to_excel(path, index=False)

    text = read_import_text(path)
    record = parse_contacts(text).rows[0].record

    assert record.email == "a@x.com"
    assert record.name == "Doe, Jr."
    assert record.score == 7


def test_unsupported_or_missing_files(tmp_path):
    bad_path = tmp_path / "fans.json"
    bad_path.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError):
        read_import_text(bad_path)
    with pytest.raises(FileNotFoundError):
        read_import_text(tmp_path / "absent.csv")
