"""
hydrator_config -- YAML mapping definitions for the hydrator.

Architecture position:
    Configuration layer above ``hydrator_kernel``. The kernel MUST NEVER
    import from ``hydrator_config``; ``bridges`` hands definitions to the
    kernel's HydratorService.
"""

from hydrator_config.bridges import hydrate_with_definition
from hydrator_config.loader import (
    compute_checksum,
    load_mapping_definitions,
    load_yaml_file,
    parse_mapping_definition,
    parse_mapping_document,
)
from hydrator_config.schema import MappingDefinition

__all__ = [
    "MappingDefinition",
    "compute_checksum",
    "hydrate_with_definition",
    "load_mapping_definitions",
    "load_yaml_file",
    "parse_mapping_definition",
    "parse_mapping_document",
]
