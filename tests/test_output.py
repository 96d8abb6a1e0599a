"""Tests for denv.output rendering."""

import json

import pytest

from denv.exceptions import ArgumentError, KeyNotFoundError
from denv.output import OutputFormat, lookup, render_keys, render_list, sorted_keys

ENV = {"FOO": "bar", "BAZ": "qux", "EMPTY": "", "URL": "a=b=c", "GREETING": "héllo \"world\"\n"}


class TestLookup:
    def test_returns_value(self):
        assert lookup(ENV, "FOO") == "bar"

    def test_empty_value(self):
        assert lookup(ENV, "EMPTY") == ""

    def test_missing_key(self):
        with pytest.raises(KeyNotFoundError) as exc_info:
            lookup(ENV, "MISSING_KEY")
        assert exc_info.value.message == "key 'MISSING_KEY' not found"

    def test_empty_key(self):
        with pytest.raises(ArgumentError):
            lookup(ENV, "")


class TestOutputFormat:
    def test_parse(self):
        assert OutputFormat.parse("json") is OutputFormat.JSON
        assert OutputFormat.parse(OutputFormat.TEXT) is OutputFormat.TEXT

    def test_parse_unknown(self):
        with pytest.raises(ArgumentError, match="unknown output format 'yaml'"):
            OutputFormat.parse("yaml")


class TestRenderKeys:
    def test_sorted_keys(self):
        assert sorted_keys(ENV) == ["BAZ", "EMPTY", "FOO", "GREETING", "URL"]

    def test_text(self):
        assert render_keys(ENV) == "BAZ\nEMPTY\nFOO\nGREETING\nURL"

    def test_json(self):
        assert json.loads(render_keys(ENV, "json")) == ["BAZ", "EMPTY", "FOO", "GREETING", "URL"]

    def test_empty_environment(self):
        assert render_keys({}) == ""
        assert render_keys({}, OutputFormat.JSON) == "[]"


class TestRenderList:
    def test_text_is_sorted_name_value_lines(self):
        env = {"FOO": "bar", "BAZ": "qux", "URL": "a=b=c"}
        assert render_list(env) == "BAZ=qux\nFOO=bar\nURL=a=b=c"

    def test_json_round_trip(self):
        assert json.loads(render_list(ENV, "json")) == ENV

    def test_json_keeps_unicode(self):
        assert "héllo" in render_list(ENV, "json")

    def test_json_accepts_read_only_mapping(self):
        from types import MappingProxyType

        assert json.loads(render_list(MappingProxyType({"A": "1"}), "json")) == {"A": "1"}

    def test_empty_environment(self):
        assert render_list({}) == ""
        assert render_list({}, "json") == "{}"
