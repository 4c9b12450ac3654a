"""
hydrator_kernel.domain.types -- Pure frozen dataclasses for the hydrator.

ZERO I/O. Shared by the coercer, the inferencer and the hydration service.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


# =============================================================================
# Target types
# =============================================================================


class TargetType(str, Enum):
    """Closed set of semantic types a mapped field can be coerced to."""

    STRING = "string"
    INT = "int"
    TIMESTAMP = "timestamp"

    @classmethod
    def from_tag(cls, tag: Any) -> TargetType:
        """
        Parse a mapping ``type`` tag.

        Accepts a TargetType, a string tag ("int", "integer", "timestamp",
        "datetime", "string"), or one of the Python types ``int``, ``str``,
        ``datetime``. Empty and unrecognized tags fall back to STRING.
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, type):
            return _PYTHON_TYPE_TAGS.get(tag, cls.STRING)
        if isinstance(tag, str):
            return _STRING_TAGS.get(tag.strip().lower(), cls.STRING)
        return cls.STRING


_STRING_TAGS: dict[str, TargetType] = {
    "string": TargetType.STRING,
    "str": TargetType.STRING,
    "int": TargetType.INT,
    "integer": TargetType.INT,
    "timestamp": TargetType.TIMESTAMP,
    "datetime": TargetType.TIMESTAMP,
}

_PYTHON_TYPE_TAGS: dict[type, TargetType] = {
    str: TargetType.STRING,
    int: TargetType.INT,
    datetime: TargetType.TIMESTAMP,
}


# =============================================================================
# Mapping entry
# =============================================================================


@dataclass(frozen=True)
class MappingEntry:
    """Single mapping: source key -> target entity field with coercion type."""

    source_key: str  # Key in the source record / public member of source object
    target_field: str  # Field name on the target entity
    target_type: TargetType = TargetType.STRING


# =============================================================================
# Field descriptor
# =============================================================================


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Handle for one assignable field of an entity type.

    ``assign`` goes through ``object.__setattr__`` so it works on frozen
    dataclasses and classes overriding ``__setattr__``, while still running
    data descriptors such as SQLAlchemy instrumented attributes.
    """

    entity_type: str
    name: str

    def assign(self, instance: Any, value: Any) -> None:
        object.__setattr__(instance, self.name, value)
