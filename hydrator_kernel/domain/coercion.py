"""
Type coercion: raw source value -> declared semantic type.

Pure functions, ZERO I/O. The coercion set is closed: adding a target type
means adding a TargetType member and a branch in ``coerce_value``.
"""

from __future__ import annotations

import time
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from hydrator_kernel.domain.types import TargetType
from hydrator_kernel.exceptions import TypeMismatchError

# Fixed wire format for textual timestamps coming out of the database.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Integer digit ceiling, matching CPython's default int <-> str conversion limit.
MAX_INT_DIGITS = 4300


def describe_type(value: Any) -> str:
    """Runtime type name used in error messages."""
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


# -----------------------------------------------------------------------------
# Per-type converters. Each returns the converted value or raises ValueError.
# -----------------------------------------------------------------------------


def to_int(value: Any) -> int:
    """
    Convert a numeric-looking value to int, truncating toward zero.

    Accepts int, finite float/Decimal, and numeric strings ("42", " 7 ",
    "-3.9", "1e3"). Booleans are not numbers here. Values whose integer
    part would exceed MAX_INT_DIGITS digits are rejected before conversion.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not numeric")
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        number = Decimal(value)
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"not numeric: {value!r}") from None
    else:
        raise ValueError(f"not numeric: {value!r}")
    if not number.is_finite():
        raise ValueError(f"not finite: {value!r}")
    if number.adjusted() >= MAX_INT_DIGITS:
        raise ValueError(f"more than {MAX_INT_DIGITS} digits: {value!r}")
    return int(number)


def to_timestamp(value: Any) -> datetime:
    """Convert text, date or struct_time to an (immutable) datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, time.struct_time):
        return datetime(*value[:6])
    raise ValueError(f"not a timestamp: {value!r}")


def coerce_value(
    value: Any,
    target_type: TargetType,
    *,
    target_field: str,
    entity_type: str,
    source_key: str,
) -> Any:
    """
    Coerce ``value`` to ``target_type``.

    STRING never fails. INT and TIMESTAMP raise TypeMismatchError naming the
    value's runtime type, the target field, the entity and the source key.
    """
    if target_type == TargetType.INT:
        converter = to_int
    elif target_type == TargetType.TIMESTAMP:
        converter = to_timestamp
    else:
        return str(value)

    try:
        return converter(value)
    except ValueError:
        raise TypeMismatchError(
            describe_type(value), target_field, entity_type, source_key
        ) from None
