"""Source normalization: records, result rows and objects -> key/value bag."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Row

from hydrator_kernel.domain.coercion import describe_type
from hydrator_kernel.domain.metadata import declared_fields
from hydrator_kernel.exceptions import UnsupportedSourceError

_SCALARS = (str, bytes, bytearray, int, float, complex, bool, list, tuple, set, frozenset)


def public_members(obj: Any) -> dict[str, Any]:
    """
    Public members of ``obj`` and their current values.

    Names come from the instance ``__dict__`` and from what the class
    declares (annotations, slots, plain class attributes, SQLAlchemy mapped
    columns), so class-level defaults and expired or deferred ORM columns
    are included. Values are read with ``getattr``, which lets SQLAlchemy
    refresh expired attributes. Declared names with no value are skipped.
    """
    members: dict[str, Any] = {}
    names = [*getattr(obj, "__dict__", {}), *declared_fields(type(obj))]
    for name in dict.fromkeys(names):
        if name.startswith("_"):
            continue
        try:
            members[name] = getattr(obj, name)
        except AttributeError:
            continue
    return members


def normalize_source(source: Any) -> Mapping[str, Any]:
    """
    Produce the value bag for a hydration call.

    Mappings (including SQLAlchemy ``RowMapping``) are returned unchanged;
    SQLAlchemy ``Row`` objects yield their ``_mapping``; named tuples their
    ``_asdict()``; any other object instance its public members. Scalars,
    sequences, classes and None are rejected.
    """
    if isinstance(source, Mapping):
        return source
    if isinstance(source, Row):
        return source._mapping
    if isinstance(source, tuple) and hasattr(source, "_asdict"):
        return source._asdict()
    if source is None or isinstance(source, (_SCALARS, type)):
        raise UnsupportedSourceError(describe_type(source))
    return public_members(source)
