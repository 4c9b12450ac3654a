"""
Mapping definition schema.

Human-authored mapping documents (YAML) are parsed into these frozen types
by the loader. The kernel never imports this module; see ``bridges``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hydrator_kernel.domain.mapping import resolve_mapping
from hydrator_kernel.domain.types import MappingEntry


@dataclass(frozen=True)
class MappingDefinition:
    """Named mapping from source keys to fields of one entity type."""

    name: str
    entity_type: str  # Registered alias or import path
    fields: dict[str, Any] = field(default_factory=dict)  # Raw mapping form
    description: str = ""

    def entries(self) -> tuple[MappingEntry, ...]:
        """Resolve ``fields`` into MappingEntry objects (raises InvalidMappingError)."""
        return resolve_mapping(self.fields, self.entity_type)
