"""
Mapping Definition Loader (``hydrator_config.loader``).

Responsibility
--------------
Loads YAML mapping documents and parses them into
``hydrator_config.schema.MappingDefinition`` instances. Document shape::

    mappings:
      - name: user_row
        entity: app.models.User
        description: Row from the users table
        fields:
          user_id: {name: id, type: int}
          user_name: name
          created_at: {name: created, type: timestamp}

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys, wrong shapes, duplicate names  -> ``MappingDefinitionError``.
* Field entries without ``name`` -> ``InvalidMappingError`` (from the kernel).
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from hydrator_config.schema import MappingDefinition
from hydrator_kernel.exceptions import MappingDefinitionError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_mapping_definition(data: Any, source: str = "<mapping>") -> MappingDefinition:
    """
    Parse one ``mappings`` item.

    Field entries are validated eagerly so a bad document fails at load
    time rather than at the first hydration.
    """
    if not isinstance(data, dict):
        raise MappingDefinitionError(source, "mapping entry must be a mapping")
    for key in ("name", "entity", "fields"):
        if key not in data:
            raise MappingDefinitionError(source, f"missing required key {key!r}")
    fields = data["fields"]
    if not isinstance(fields, dict):
        raise MappingDefinitionError(
            f"{source}:{data['name']}", "'fields' must be a mapping"
        )

    definition = MappingDefinition(
        name=str(data["name"]),
        entity_type=str(data["entity"]),
        fields={str(k): v for k, v in fields.items()},
        description=str(data.get("description", "")),
    )
    definition.entries()
    return definition


def parse_mapping_document(data: dict[str, Any], source: str = "<mapping>") -> dict[str, MappingDefinition]:
    """Parse a whole document into ``{name: MappingDefinition}``."""
    items = data.get("mappings", [])
    if not isinstance(items, list):
        raise MappingDefinitionError(source, "'mappings' must be a list")

    definitions: dict[str, MappingDefinition] = {}
    for item in items:
        definition = parse_mapping_definition(item, source)
        if definition.name in definitions:
            raise MappingDefinitionError(
                source, f"duplicate mapping name {definition.name!r}"
            )
        definitions[definition.name] = definition
    return definitions


def load_mapping_definitions(path: Path) -> dict[str, MappingDefinition]:
    """Load every mapping definition in a YAML file."""
    path = Path(path)
    return parse_mapping_document(load_yaml_file(path), str(path))


def compute_checksum(definitions: Iterable[MappingDefinition]) -> str:
    """
    Deterministic SHA-256 over the definitions, independent of order.

    Used to detect that a deployed mapping file changed.
    """
    canonical = [
        {
            "name": d.name,
            "entity": d.entity_type,
            "fields": d.fields,
        }
        for d in sorted(definitions, key=lambda d: d.name)
    ]
    blob = json.dumps(canonical, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()
