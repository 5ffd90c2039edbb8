import pytest

from contact_import.errors import ImportInputError
from contact_import.ingestion.parser import (
    iter_rows,
    parse_contacts,
    parse_flag,
    parse_score,
    parse_tags,
    parse_timestamp,
)
from contact_import.models import ContactRecord


def _records(outcome):
    return [row.record for row in outcome.rows]


def test_single_row_with_tags():
    outcome = parse_contacts("Email,First Name,Tags\na@x.com,Ann,student;pro-tools\n")

    assert _records(outcome) == [
        ContactRecord(email="a@x.com", first_name="Ann", tags=("student", "pro-tools"))
    ]
    assert outcome.rows[0].line_number == 2
    assert outcome.warnings == []


def test_blank_lines_are_skipped():
    outcome = parse_contacts("Email\na@x.com\n\n   \n")

    assert [record.email for record in _records(outcome)] == ["a@x.com"]


def test_quoted_mode_keeps_commas_inside_quotes():
    text = 'Email,Name,City\na@x.com,"Doe, Jr.",Austin\n'

    record = _records(parse_contacts(text))[0]

    assert record.name == "Doe, Jr."
    assert record.city == "Austin"


def test_legacy_mode_splits_on_every_comma():
    text = 'Email,Name,City\na@x.com,"Doe, Jr.",Austin\n'

    record = _records(parse_contacts(text, csv_mode="legacy"))[0]

    assert record.name == '"Doe'
    assert record.city == 'Jr."'


def test_legacy_mode_only_breaks_lines_on_newline():
    text = "Email,Goals,City\r\na@x.com,make\u2028beats,Austin\r\n"

    records = _records(parse_contacts(text, csv_mode="legacy"))

    assert len(records) == 1
    assert records[0].goals == "make\u2028beats"
    assert records[0].city == "Austin"


def test_unterminated_quote_is_a_structural_error():
    text = 'Email,Name\na@x.com,"Ann\nb@x.com,Bo\n'

    with pytest.raises(ImportInputError, match="line"):
        parse_contacts(text)


def test_oversized_cell_is_a_structural_error():
    with pytest.raises(ImportInputError):
        parse_contacts("Email,Goals\na@x.com," + "x" * 200_000 + "\n")


def test_typed_fields_are_coerced():
    text = (
        "Email,*Score 7,Opens Email,Clicks Links,Last Open Date,Type,id\n"
        "a@x.com,12abc,TRUE,0,2024-01-15,Paying,ac-991\n"
    )

    outcome = parse_contacts(text)
    record = _records(outcome)[0]

    assert record.score == 12
    assert record.opens_email is True
    assert record.clicks_links is False
    assert record.last_open_date == 1705276800000
    assert record.customer_type == "paying"
    assert record.active_campaign_id == "ac-991"
    assert record.source == "CSV Import"
    assert outcome.warnings == []


def test_unparseable_values_degrade_with_warnings():
    text = "Email,Score,Opens Email,Last Open Date,Type\na@x.com,lots,maybe,not a date,vip\n"

    outcome = parse_contacts(text)
    record = _records(outcome)[0]

    assert record.score == 0
    assert record.opens_email is False
    assert record.last_open_date is None
    assert record.customer_type == "lead"
    assert [(warning.row, warning.field, warning.raw_value) for warning in outcome.warnings] == [
        (2, "score", "lots"),
        (2, "opens_email", "maybe"),
        (2, "last_open_date", "not a date"),
        (2, "customer_type", "vip"),
    ]


def test_short_rows_leave_missing_columns_unset():
    record = _records(parse_contacts("Email,First Name,Last Name\na@x.com,Ann\n"))[0]

    assert record.first_name == "Ann"
    assert record.last_name is None


def test_missing_email_column_produces_header_warning():
    outcome = parse_contacts("Emial,First Name\na@x.com,Ann\n")

    assert _records(outcome)[0].email is None
    messages = {(warning.field, warning.raw_value) for warning in outcome.warnings}
    assert ("email", None) in messages
    assert (None, "Emial") in messages


@pytest.mark.parametrize("text", ["", "   \n\n"])
def test_empty_input_is_a_structural_error(text):
    with pytest.raises(ImportInputError):
        parse_contacts(text)


def test_unknown_csv_mode_is_rejected():
    with pytest.raises(ValueError):
        list(iter_rows("Email\n", csv_mode="excel"))


def test_value_helpers():
    assert parse_score(" 42 ") == 42
    assert parse_score("-3") == -3
    assert parse_score("n/a") is None
    assert parse_flag("True") and parse_flag("1")
    assert not parse_flag("yes")
    assert parse_tags(" a ; ;b;") == ("a", "b")
    assert parse_timestamp("2024-01-15T00:00:00Z") == 1705276800000
    assert parse_timestamp("garbage") is None


@pytest.mark.parametrize("value", ["today", "Now", " tomorrow "])
def test_relative_date_words_are_not_dates(value):
    assert parse_timestamp(value) is None

    outcome = parse_contacts(f"Email,Last Open Date\na@x.com,{value}\n")

    assert _records(outcome)[0].last_open_date is None
    assert [warning.field for warning in outcome.warnings] == ["last_open_date"]
