"""
Unit tests for the schema registry (ston_log_transform.schema_registry).

Tests the built-in ston_v1.0 schema, Schema validation, registry lookup
and immutability, and loading schemas from YAML files.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ston_log_transform.exceptions import FormatNotRecognizedError, SchemaRegistryError
from ston_log_transform.schema_registry import (
    Schema,
    SchemaRegistry,
    default_registry,
    load_registry,
    load_schema,
    schema_key,
)

MINI_SCHEMA_YAML = """\
format_name: mini
version: "2.1"
description: test schema
fields:
  - host
  - status
"""


class TestBuiltinSchema:
    """Tests for the shipped ston_v1.0 schema."""

    def test_ston_is_registered(self):
        assert "ston_v1.0" in default_registry()

    def test_ston_field_order(self, ston_schema):
        assert ston_schema.field_names[:4] == ("sDate", "sTime", "sIp", "csMethod")
        assert ston_schema.field_names[-2:] == ("xTransactionStatus", "xVhostlink")
        assert ston_schema.field_count == 23

    def test_default_registry_is_cached(self):
        assert default_registry() is default_registry()

    def test_only_one_builtin_schema(self):
        assert default_registry().keys() == ["ston_v1.0"]


class TestSchema:
    """Tests for Schema model validation."""

    def test_key(self):
        schema = Schema(format_name="ston", version="1.0", field_names=("a",))
        assert schema.key == "ston_v1.0"
        assert schema_key("ston", "1.0") == "ston_v1.0"

    def test_empty_fields_rejected(self):
        with pytest.raises(ValidationError, match="at least one field"):
            Schema(format_name="x", version="1", field_names=())

    def test_duplicate_fields_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            Schema(format_name="x", version="1", field_names=("a", "b", "a"))

    def test_blank_field_name_rejected(self):
        with pytest.raises(ValidationError):
            Schema(format_name="x", version="1", field_names=("a", ""))

    def test_frozen(self):
        schema = Schema(format_name="x", version="1", field_names=("a",))
        with pytest.raises(ValidationError):
            schema.format_name = "y"


class TestSchemaRegistry:
    """Tests for SchemaRegistry."""

    def _registry(self) -> SchemaRegistry:
        return SchemaRegistry([
            Schema(format_name="a", version="1", field_names=("x",)),
            Schema(format_name="a", version="2", field_names=("x", "y")),
        ])

    def test_lookup(self):
        schema = self._registry().lookup("a", "2")
        assert schema.field_names == ("x", "y")

    def test_lookup_unknown_raises(self):
        with pytest.raises(FormatNotRecognizedError, match="a_v3"):
            self._registry().lookup("a", "3")

    def test_get_unknown_returns_none(self):
        assert self._registry().get("b_v1") is None

    def test_len_and_iter(self):
        registry = self._registry()
        assert len(registry) == 2
        assert sorted(registry) == ["a_v1", "a_v2"]

    def test_duplicate_key_rejected(self):
        schema = Schema(format_name="a", version="1", field_names=("x",))
        with pytest.raises(SchemaRegistryError, match="more than once"):
            SchemaRegistry([schema, schema])

    def test_registry_cannot_be_mutated(self):
        registry = self._registry()
        with pytest.raises(TypeError):
            registry._schemas["b_v1"] = None  # type: ignore[index]

    def test_empty_registry(self):
        with pytest.raises(FormatNotRecognizedError):
            SchemaRegistry().lookup("ston", "1.0")


class TestLoadSchema:
    """Tests for load_schema() / load_registry()."""

    def test_load_schema(self, tmp_path):
        f = tmp_path / "mini.yaml"
        f.write_text(MINI_SCHEMA_YAML, encoding="utf-8")
        schema = load_schema(f)
        assert schema.key == "mini_v2.1"
        assert schema.field_names == ("host", "status")
        assert schema.description == "test schema"

    def test_unquoted_version_is_string(self, tmp_path):
        f = tmp_path / "mini.yaml"
        f.write_text(MINI_SCHEMA_YAML.replace('"2.1"', "2.1"), encoding="utf-8")
        assert load_schema(f).version == "2.1"

    def test_empty_file_raises(self, tmp_path):
        f = tmp_path / "empty.yaml"
        f.write_text("", encoding="utf-8")
        with pytest.raises(SchemaRegistryError, match="empty"):
            load_schema(f)

    def test_missing_key_raises(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("format_name: x\nfields: [a]\n", encoding="utf-8")
        with pytest.raises(SchemaRegistryError, match="Invalid schema"):
            load_schema(f)

    def test_missing_fields_raises(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("format_name: x\nversion: '1'\n", encoding="utf-8")
        with pytest.raises(SchemaRegistryError):
            load_schema(f)

    def test_load_registry_from_directory(self, tmp_path):
        (tmp_path / "mini.yaml").write_text(MINI_SCHEMA_YAML, encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
        registry = load_registry(tmp_path)
        assert registry.keys() == ["mini_v2.1"]

    def test_load_registry_duplicate_across_files(self, tmp_path):
        (tmp_path / "a.yaml").write_text(MINI_SCHEMA_YAML, encoding="utf-8")
        (tmp_path / "b.yaml").write_text(MINI_SCHEMA_YAML, encoding="utf-8")
        with pytest.raises(SchemaRegistryError):
            load_registry(tmp_path)
