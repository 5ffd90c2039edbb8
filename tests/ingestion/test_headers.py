import pytest

from contact_import.errors import ImportInputError
from contact_import.ingestion.headers import alias_table, build_header_map, normalize_header


def test_normalize_header_strips_marker_case_and_whitespace():
    assert normalize_header("  *Score 7 ") == "score 7"
    assert normalize_header("\ufeffEmail") == "email"
    assert normalize_header("Phone Number") == "phone number"


def test_build_header_map_resolves_aliases_positionally():
    header_map = build_header_map(["Email", "*Score 7", "Phone Number", "Favourite Colour", "id"])

    assert header_map.columns == {0: "email", 1: "score", 2: "phone", 4: "active_campaign_id"}
    assert header_map.unmapped == ("Favourite Colour",)
    assert header_map.fields() == ["email", "score", "phone", "active_campaign_id"]
    assert header_map.has_field("email")


def test_score_and_phone_aliases_share_a_canonical_field():
    table = alias_table()

    assert table["score"] == table["score 7"] == "score"
    assert table["phone"] == table["phone number"] == "phone"


def test_header_without_email_column_is_not_an_error():
    header_map = build_header_map(["Emial", "First Name"])

    assert header_map.columns == {1: "first_name"}
    assert not header_map.has_field("email")
    assert header_map.unmapped == ("Emial",)


@pytest.mark.parametrize("headers", [["", "  "], ["Favourite Colour", "Shoe Size"]])
def test_header_without_recognised_columns_is_rejected(headers):
    with pytest.raises(ImportInputError):
        build_header_map(headers)
