import json

import pytest

from pdsync.errors import ConfigurationError
from pdsync.mapping import (
    MappingRule,
    build_payload,
    find_rule,
    load_input_document,
    load_mapping_rules,
    resolve_path,
)


def _rule(dest, src):
    return MappingRule(pipedriveKey=dest, inputKey=src)


def test_resolve_path_nested_value(document):
    res = resolve_path(document, "contact.fullName")
    assert res.present
    assert res.value == "Jane Doe"


def test_resolve_path_missing_intermediate_key(document):
    res = resolve_path(document, "contact.address.city")
    assert not res.present


def test_resolve_path_through_non_mapping_is_absent(document):
    # contact.fullName is a string, so descending further must not raise
    assert not resolve_path(document, "contact.fullName.first").present
    assert not resolve_path(document, "contact.emails.primary").present


def test_resolve_path_indexes_lists(document):
    res = resolve_path(document, "contact.emails.0.value")
    assert res.present
    assert res.value == "jane@example.com"
    assert resolve_path(document, "contact.emails.0").value == {"value": "jane@example.com", "primary": True}


@pytest.mark.parametrize("path", ["contact.emails.1", "contact.emails.5.value", "contact.emails.-1"])
def test_resolve_path_list_index_out_of_range_is_absent(document, path):
    assert not resolve_path(document, path).present


def test_resolve_path_present_but_none_is_not_absent(document):
    res = resolve_path(document, "contact.nickname")
    assert res.present
    assert res.value is None


def test_build_payload_keeps_resolved_and_omits_absent(document):
    rules = [
        _rule("name", "contact.fullName"),
        _rule("email", "contact.emails"),
        _rule("phone", "contact.phones"),
        _rule("org_name", "company.name"),
    ]
    payload = build_payload(rules, document)
    assert payload == {
        "name": "Jane Doe",
        "email": [{"value": "jane@example.com", "primary": True}],
        "org_name": "Example Corp",
    }
    assert "phone" not in payload


def test_find_rule():
    rules = [_rule("email", "a.b"), _rule("name", "c")]
    assert find_rule(rules, "name").input_key == "c"
    assert find_rule(rules, "phone") is None


def test_find_rule_rejects_duplicate_targets():
    rules = [_rule("name", "a"), _rule("email", "e"), _rule("name", "b")]
    with pytest.raises(ConfigurationError, match="More than one mapping targets 'name'"):
        find_rule(rules, "name")


def test_load_mapping_rules_reads_original_key_names(tmp_path):
    p = tmp_path / "mappings.json"
    p.write_text(json.dumps([{"pipedriveKey": "name", "inputKey": "contact.fullName"}]), encoding="utf-8")
    rules = load_mapping_rules(p)
    assert rules == [MappingRule(pipedrive_key="name", input_key="contact.fullName")]


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"pipedriveKey": "name"}),
        json.dumps([{"pipedriveKey": "name"}]),
        json.dumps([{"pipedriveKey": "", "inputKey": "x"}]),
    ],
)
def test_load_mapping_rules_rejects_bad_files(tmp_path, content):
    p = tmp_path / "mappings.json"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_mapping_rules(p)


def test_load_input_document_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="File not found"):
        load_input_document(tmp_path / "nope.json")


def test_load_input_document_requires_object(tmp_path):
    p = tmp_path / "input.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_input_document(p)
