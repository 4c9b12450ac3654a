"""
Hydrator Kernel

Materializes typed entity instances from loosely-typed data:
- Declarative per-field mappings (source key -> entity field + type)
- Mapping inference for flat records
- Closed coercion set: string, int, timestamp
- Per-service reflection cache of entity fields
"""

from hydrator_kernel.domain.metadata import EntityRegistry, register_entity
from hydrator_kernel.domain.types import MappingEntry, TargetType
from hydrator_kernel.services.hydrator_service import HydratorService

__version__ = "0.1.0"

__all__ = [
    "EntityRegistry",
    "HydratorService",
    "MappingEntry",
    "TargetType",
    "register_entity",
]
