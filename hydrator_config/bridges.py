"""
Config -> Kernel Bridges.

Live in hydrator_config (the producer) because the kernel must NEVER import
hydrator_config.

Usage:
    from hydrator_config import load_mapping_definitions
    from hydrator_config.bridges import hydrate_with_definition

    definitions = load_mapping_definitions(Path("mappings.yaml"))
    user = hydrate_with_definition(hydrator, definitions["user_row"], row)
"""

from __future__ import annotations

from typing import Any

from hydrator_config.schema import MappingDefinition
from hydrator_kernel.services.hydrator_service import HydratorService


def hydrate_with_definition(
    hydrator: HydratorService,
    definition: MappingDefinition,
    source: Any,
) -> Any:
    """Hydrate ``definition.entity_type`` from ``source`` with the definition's fields."""
    return hydrator.hydrate_into(definition.entity_type, source, definition.fields)
