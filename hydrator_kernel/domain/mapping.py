"""
Mapping resolution: raw caller mappings -> MappingEntry.

A raw mapping is keyed by source key; each value is either a bare target
field name (shorthand for a STRING field) or a dict with ``name`` and an
optional ``type`` tag::

    {
        "user_name": "name",
        "user_id": {"name": "id", "type": "int"},
        "created_at": {"name": "created", "type": "timestamp"},
    }

Resolution is per entry so the hydration loop can fail at the first
malformed entry, after earlier entries have already been processed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from hydrator_kernel.domain.types import MappingEntry, TargetType
from hydrator_kernel.exceptions import InvalidMappingError

RawMapping = Mapping[str, "str | Mapping[str, Any]"]


def resolve_entry(source_key: str, spec: Any, entity_type: str) -> MappingEntry:
    """Expand one raw mapping value into a MappingEntry."""
    if isinstance(spec, MappingEntry):
        return spec
    if isinstance(spec, str):
        return MappingEntry(source_key, spec, TargetType.STRING)
    # an empty name is accepted and later reported as a missing field
    if not isinstance(spec, Mapping) or spec.get("name") is None:
        raise InvalidMappingError(entity_type, source_key)
    return MappingEntry(
        source_key=source_key,
        target_field=str(spec["name"]),
        target_type=TargetType.from_tag(spec.get("type")),
    )


def iter_entries(
    mapping: RawMapping | Iterable[MappingEntry],
    entity_type: str,
) -> Iterator[MappingEntry]:
    """Lazily yield MappingEntry objects in mapping order."""
    if isinstance(mapping, Mapping):
        for source_key, spec in mapping.items():
            yield resolve_entry(source_key, spec, entity_type)
        return
    for entry in mapping:
        if not isinstance(entry, MappingEntry):
            raise InvalidMappingError(entity_type, repr(entry))
        if entry.target_field is None:
            raise InvalidMappingError(entity_type, entry.source_key)
        yield entry


def resolve_mapping(
    mapping: RawMapping | Iterable[MappingEntry],
    entity_type: str,
) -> tuple[MappingEntry, ...]:
    """Eagerly resolve a whole mapping (used by the config layer)."""
    return tuple(iter_entries(mapping, entity_type))
