"""Mapping inference for flat records (used by ``simple_hydrate``)."""

from __future__ import annotations

import time
from collections.abc import Mapping
from datetime import date
from typing import Any

from hydrator_kernel.domain.coercion import describe_type
from hydrator_kernel.domain.types import MappingEntry, TargetType
from hydrator_kernel.exceptions import UnsupportedValueTypeError


def infer_target_type(value: Any) -> TargetType | None:
    """TargetType for a sample value, or None when it has no flat mapping."""
    # bool is an int subclass but is not an integer column value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return TargetType.INT
    if isinstance(value, str):
        return TargetType.STRING
    if isinstance(value, (date, time.struct_time)):
        return TargetType.TIMESTAMP
    return None


def infer_mapping(
    record: Mapping[str, Any],
    entity_type: str,
) -> tuple[MappingEntry, ...]:
    """
    Derive an identity mapping (source key == target field) from a record.

    One entry per key, in the record's iteration order. Nested objects,
    None, floats and other shapes raise UnsupportedValueTypeError: only
    flat int/str/date-time records can be hydrated without a mapping.
    """
    entries: list[MappingEntry] = []
    for key, value in record.items():
        target_type = infer_target_type(value)
        if target_type is None:
            raise UnsupportedValueTypeError(describe_type(value), key, entity_type)
        entries.append(MappingEntry(key, key, target_type))
    return tuple(entries)
