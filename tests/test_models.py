"""Tests for onepass.models."""

import pytest

from onepass.errors import MalformedRecordError
from onepass.models import (
    Resource,
    ResourceField,
    bootstrap_plaintext,
    format_record,
    format_records,
    parse_records,
)


def test_resource_defaults():
    r = Resource(name="github")
    assert r.name == "github"
    assert r.user == ""
    assert r.password == ""


def test_resource_field_values():
    assert [f.value for f in ResourceField] == ["name", "user", "password"]
    assert ResourceField("user") is ResourceField.USER


def test_format_record_is_four_lines():
    text = format_record(Resource(name="twitter", user="u@x.com", password="p"))
    assert text == "resource\ntwitter\nu@x.com\np\n"


def test_bootstrap_plaintext_is_empty():
    assert bootstrap_plaintext() == ""
    assert parse_records(bootstrap_plaintext()) == []


def test_parse_preserves_order():
    resources = [Resource(name=f"name{i}", user=f"user{i}", password=f"pw{i}") for i in range(5)]
    parsed = parse_records(format_records(resources))
    assert [r.name for r in parsed] == ["name0", "name1", "name2", "name3", "name4"]
    assert parsed == resources


def test_parse_keeps_empty_fields():
    resources = [Resource(name="a"), Resource(name="b", user="bob")]
    assert parse_records(format_records(resources)) == resources


def test_user_or_password_equal_to_marker_survive():
    r = Resource(name="odd", user="resource", password="resource")
    assert parse_records(format_record(r) + format_record(Resource(name="next"))) == [
        r,
        Resource(name="next"),
    ]


def test_truncated_record_raises():
    with pytest.raises(MalformedRecordError, match="Truncated record"):
        parse_records("resource\ntwitter\nu@x.com\n")


def test_marker_in_last_lines_raises():
    text = format_record(Resource(name="a", user="u", password="p")) + "resource\nb\n"
    with pytest.raises(MalformedRecordError):
        parse_records(text)


def test_stray_line_raises():
    with pytest.raises(MalformedRecordError, match="Expected a record marker"):
        parse_records("garbage\n" + format_record(Resource(name="a")))


def test_legacy_delimiter_bootstrap_is_rejected():
    # Only the empty string represents an empty vault.
    with pytest.raises(MalformedRecordError):
        parse_records("delimiter\n")
