import json

import pytest

from contact_import.config import ConfigurationError, ImportSettings, load_configuration
from contact_import.factory import build_contact_store
from contact_import.models import ContactRecord
from contact_import.rate_limit import RateLimitedContactStore
from contact_import.stores import InMemoryContactStore, JsonFileContactStore


def test_load_json_and_yaml_configuration(tmp_path):
    json_path = tmp_path / "config.json"
    json_path.write_text(json.dumps({"import": {"batch_size": 50}}), encoding="utf-8")
    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text("import:\n  batch_size: 25\n  csv_mode: legacy\n", encoding="utf-8")

    assert load_configuration(json_path) == {"import": {"batch_size": 50}}
    assert ImportSettings.from_config(load_configuration(yaml_path)) == ImportSettings(batch_size=25, csv_mode="legacy")


def test_missing_or_unsupported_configuration(tmp_path):
    with pytest.raises(ConfigurationError):
        load_configuration(tmp_path / "absent.json")

    ini_path = tmp_path / "config.ini"
    ini_path.write_text("[import]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_configuration(ini_path)


def test_malformed_yaml_is_a_configuration_error(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("import: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_configuration(path)


def test_import_settings_defaults_and_overrides():
    settings = ImportSettings.from_config({})

    assert settings == ImportSettings(batch_size=500, csv_mode="quoted")
    assert settings.override(batch_size=10) == ImportSettings(batch_size=10, csv_mode="quoted")
    assert settings.override(csv_mode="legacy").csv_mode == "legacy"


@pytest.mark.parametrize(
    "section",
    [{"batch_size": 0}, {"batch_size": "500"}, {"batch_size": True}, {"csv_mode": "excel"}],
)
def test_invalid_import_settings(section):
    with pytest.raises(ConfigurationError):
        ImportSettings.from_config({"import": section})


def test_default_store_is_in_memory():
    store = build_contact_store({})

    assert isinstance(store, RateLimitedContactStore)
    assert isinstance(store.wrapped, InMemoryContactStore)


def test_store_built_from_class_path_and_options(tmp_path):
    path = tmp_path / "contacts.json"
    store = build_contact_store(
        {
            "store": {
                "name": "Local Audience",
                "class": "contact_import.stores.json_file.JsonFileContactStore",
                "options": {"path": str(path)},
                "rate_limit_per_minute": 6000,
            }
        }
    )

    outcome = store.upsert_contacts("store-1", "admin", [ContactRecord(email="a@x.com")])

    assert store.name == "Local Audience"
    assert isinstance(store.wrapped, JsonFileContactStore)
    assert outcome.imported == 1
    assert path.exists()


@pytest.mark.parametrize(
    "store_section",
    [
        {"class": "NoModulePath"},
        {"class": "contact_import.stores.memory.DoesNotExist"},
        {"class": "contact_import.stores.memory.InMemoryContactStore", "options": {"unknown": 1}},
        {"class": "collections.OrderedDict"},
        {"options": {}},
    ],
)
def test_invalid_store_configuration(store_section):
    with pytest.raises(ConfigurationError):
        build_contact_store({"store": store_section})
