"""Pure domain layer: types, coercion, inference, normalization, reflection."""

from hydrator_kernel.domain.coercion import TIMESTAMP_FORMAT, coerce_value
from hydrator_kernel.domain.inference import infer_mapping
from hydrator_kernel.domain.mapping import iter_entries, resolve_entry, resolve_mapping
from hydrator_kernel.domain.metadata import (
    EntityRegistry,
    MetadataCache,
    default_registry,
    register_entity,
)
from hydrator_kernel.domain.normalizer import normalize_source
from hydrator_kernel.domain.types import FieldDescriptor, MappingEntry, TargetType

__all__ = [
    "EntityRegistry",
    "FieldDescriptor",
    "MappingEntry",
    "MetadataCache",
    "TIMESTAMP_FORMAT",
    "TargetType",
    "coerce_value",
    "default_registry",
    "infer_mapping",
    "iter_entries",
    "normalize_source",
    "register_entity",
    "resolve_entry",
    "resolve_mapping",
]
