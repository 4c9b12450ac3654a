"""
Tests for YAML mapping definitions (hydrator_config).

Covers:
- Loader (parse_mapping_definition / load_mapping_definitions)
- Checksums
- Bridge into HydratorService
"""

from __future__ import annotations

import textwrap
from datetime import datetime
from pathlib import Path

import pytest
import yaml

from hydrator_config import (
    MappingDefinition,
    compute_checksum,
    hydrate_with_definition,
    load_mapping_definitions,
    parse_mapping_definition,
    parse_mapping_document,
)
from hydrator_kernel.domain.types import MappingEntry, TargetType
from hydrator_kernel.exceptions import InvalidMappingError, MappingDefinitionError

DOCUMENT = textwrap.dedent(
    """
    mappings:
      - name: user_row
        entity: User
        description: Row from the users table
        fields:
          user_id: {name: id, type: int}
          user_name: name
          created_at: {name: created, type: timestamp}
      - name: legacy_row
        entity: tests.entities.LegacyRecord
        fields:
          CODE: code
    """
)


@pytest.fixture
def mapping_file(tmp_path: Path) -> Path:
    path = tmp_path / "mappings.yaml"
    path.write_text(DOCUMENT)
    return path


class TestLoadMappingDefinitions:
    def test_loads_all_definitions(self, mapping_file):
        definitions = load_mapping_definitions(mapping_file)
        assert list(definitions) == ["user_row", "legacy_row"]
        user_row = definitions["user_row"]
        assert user_row.entity_type == "User"
        assert user_row.description == "Row from the users table"
        assert user_row.entries() == (
            MappingEntry("user_id", "id", TargetType.INT),
            MappingEntry("user_name", "name", TargetType.STRING),
            MappingEntry("created_at", "created", TargetType.TIMESTAMP),
        )

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_mapping_definitions(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("mappings: [\n")
        with pytest.raises(yaml.YAMLError):
            load_mapping_definitions(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_mapping_definitions(path) == {}


class TestParseErrors:
    @pytest.mark.parametrize(
        "data",
        [
            {"entity": "User", "fields": {}},
            {"name": "x", "fields": {}},
            {"name": "x", "entity": "User"},
            {"name": "x", "entity": "User", "fields": ["a", "b"]},
            "not a mapping",
        ],
    )
    def test_malformed_definition(self, data):
        with pytest.raises(MappingDefinitionError) as exc_info:
            parse_mapping_definition(data)
        assert exc_info.value.code == "INVALID_MAPPING_DEFINITION"

    def test_field_without_name_fails_at_load(self):
        with pytest.raises(InvalidMappingError):
            parse_mapping_definition({"name": "x", "entity": "User", "fields": {"a": {"type": "int"}}})

    def test_duplicate_names(self):
        item = {"name": "x", "entity": "User", "fields": {}}
        with pytest.raises(MappingDefinitionError, match="duplicate"):
            parse_mapping_document({"mappings": [item, item]})

    def test_mappings_must_be_list(self):
        with pytest.raises(MappingDefinitionError):
            parse_mapping_document({"mappings": {"name": "x"}})


class TestChecksum:
    def test_order_independent(self, mapping_file):
        definitions = list(load_mapping_definitions(mapping_file).values())
        assert compute_checksum(definitions) == compute_checksum(reversed(definitions))

    def test_changes_with_content(self):
        a = MappingDefinition("m", "User", {"a": "name"})
        b = MappingDefinition("m", "User", {"a": {"name": "id", "type": "int"}})
        assert compute_checksum([a]) != compute_checksum([b])
        assert len(compute_checksum([a])) == 64


class TestBridge:
    def test_hydrate_with_definition(self, mapping_file, hydrator):
        definitions = load_mapping_definitions(mapping_file)
        row = {"user_id": "5", "user_name": "Ann", "created_at": "2023-05-01 10:00:00"}
        user = hydrate_with_definition(hydrator, definitions["user_row"], row)
        assert (user.id, user.name, user.created) == (5, "Ann", datetime(2023, 5, 1, 10))

    def test_import_path_entity(self, mapping_file, hydrator):
        definitions = load_mapping_definitions(mapping_file)
        record = hydrate_with_definition(hydrator, definitions["legacy_row"], {"CODE": 7})
        assert record.code == "7"
