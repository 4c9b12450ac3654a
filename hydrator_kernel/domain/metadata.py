"""
EntityRegistry and MetadataCache -- entity type reflection for hydration.

Responsibility:
    Resolve an entity type name to a class, default-construct instances of
    it, and discover (once) the set of assignable fields of the class.

Invariants enforced:
    - A cache entry, once published for a type, is never rebuilt or evicted.
      Entity class definitions are assumed static for the process lifetime.
    - Each MetadataCache belongs to one HydratorService; entries are not
      shared between caches.

Failure modes:
    - ReflectionError: unknown alias, unimportable path, non-class target,
      or a constructor that requires arguments.
"""

from __future__ import annotations

import dataclasses
import importlib
import inspect
import threading
import typing
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

import sqlalchemy
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Mapper

from hydrator_kernel.domain.types import FieldDescriptor
from hydrator_kernel.exceptions import ReflectionError
from hydrator_kernel.logging_config import get_logger

logger = get_logger("metadata")

EntityType = str | type

_IGNORED_SLOTS = frozenset({"__dict__", "__weakref__"})


class EntityRegistry:
    """Alias -> entity class registry, with import-path fallback."""

    def __init__(self) -> None:
        self._entities: dict[str, type] = {}

    def register(self, cls: type, name: str | None = None) -> type:
        alias = name or cls.__name__
        existing = self._entities.get(alias)
        if existing is not None and existing is not cls:
            raise ValueError(
                f"Entity alias {alias!r} already registered for "
                f"{self.canonical_name(existing)}"
            )
        self._entities[alias] = cls
        return cls

    def clear(self) -> None:
        """Remove all aliases. FOR TESTING ONLY."""
        self._entities.clear()

    def __contains__(self, alias: str) -> bool:
        return alias in self._entities

    @staticmethod
    def canonical_name(cls: type) -> str:
        return f"{cls.__module__}.{cls.__qualname__}"

    def resolve(self, entity_type: EntityType) -> type:
        """
        Resolve a class, a registered alias, or an import path.

        Import paths may be ``package.module.Class`` or
        ``package.module:Class``.
        """
        if isinstance(entity_type, type):
            return entity_type
        if not isinstance(entity_type, str) or not entity_type:
            raise ReflectionError(repr(entity_type), "not a type name")
        if entity_type in self._entities:
            return self._entities[entity_type]
        return self._import(entity_type)

    def _import(self, path: str) -> type:
        if ":" in path:
            module_name, _, attr_path = path.partition(":")
        else:
            module_name, _, attr_path = path.rpartition(".")
        if not module_name or not attr_path:
            raise ReflectionError(path, "not a registered entity or import path")
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError as exc:
            raise ReflectionError(path, f"cannot import {module_name}: {exc}") from exc
        for attr in attr_path.split("."):
            try:
                target = getattr(target, attr)
            except AttributeError:
                raise ReflectionError(path, f"{attr} not found in {module_name}") from None
        if not isinstance(target, type):
            raise ReflectionError(path, "not a class")
        return target


default_registry = EntityRegistry()


def register_entity(cls: type | None = None, *, name: str | None = None):
    """
    Class decorator registering an entity in ``default_registry``.

    Usable bare (``@register_entity``) or with an alias
    (``@register_entity(name="user")``).
    """
    def decorator(target: type) -> type:
        return default_registry.register(target, name)

    if cls is not None:
        return decorator(cls)
    return decorator


# =============================================================================
# Field discovery
# =============================================================================


def _is_classvar(annotation: Any) -> bool:
    if annotation is ClassVar or typing.get_origin(annotation) is ClassVar:
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


def _annotated_fields(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name, annotation in inspect.get_annotations(klass).items():
            if not _is_classvar(annotation):
                names.append(name)
    return names


def _class_attributes(cls: type) -> list[str]:
    """Plain data attributes assigned in a class body, e.g. ``id = 0``."""
    classvars = {
        name
        for klass in cls.__mro__
        for name, annotation in inspect.get_annotations(klass).items()
        if _is_classvar(annotation)
    }
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, value in vars(klass).items():
            # methods, properties, slot members and instrumented attributes
            if callable(value) or hasattr(type(value), "__get__"):
                continue
            if name not in classvars:
                names.append(name)
    return names


def _slot_fields(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(s for s in slots if s not in _IGNORED_SLOTS)
    return names


def _mapper_of(cls: type) -> Mapper | None:
    try:
        mapper = sqlalchemy.inspect(cls)
    except NoInspectionAvailable:
        return None
    return mapper if isinstance(mapper, Mapper) else None


def declared_fields(cls: type) -> list[str]:
    """
    Field names ``cls`` declares without constructing it, private included.

    Sources, in order: class annotations, dataclass fields, slots, then
    either the SQLAlchemy mapped columns (mapped classes) or the plain data
    attributes of the class body. The declarative base's ``registry`` and
    ``metadata`` are therefore never reported as fields.
    """
    names: list[str] = []
    names.extend(_annotated_fields(cls))
    if dataclasses.is_dataclass(cls):
        names.extend(f.name for f in dataclasses.fields(cls))
    names.extend(_slot_fields(cls))
    mapper = _mapper_of(cls)
    if mapper is not None:
        names.extend(attr.key for attr in mapper.column_attrs)
    else:
        names.extend(_class_attributes(cls))
    return [name for name in dict.fromkeys(names) if not _is_internal(name)]


def discover_fields(cls: type, sample: Any) -> list[str]:
    """
    Every field of ``cls``: its declared fields plus the attributes the
    default constructor assigned on ``sample``. Duplicates are dropped,
    first occurrence wins.
    """
    names = [*declared_fields(cls), *getattr(sample, "__dict__", {})]
    return [name for name in dict.fromkeys(names) if not _is_internal(name)]


def _is_internal(name: str) -> bool:
    # dunders, SQLAlchemy instrumentation state, ABC bookkeeping
    return (name.startswith("__") and name.endswith("__")) or name.startswith(("_sa_", "_abc_"))


# =============================================================================
# Cache
# =============================================================================


class MetadataCache:
    """
    Per-service cache of entity type -> {field name: FieldDescriptor}.

    Entries are built outside the lock and published with ``setdefault``,
    so concurrent first-time resolution of one type publishes exactly one
    entry (the loser's work is discarded).
    """

    def __init__(self, registry: EntityRegistry | None = None) -> None:
        self._registry = registry or default_registry
        self._entries: dict[str, Mapping[str, FieldDescriptor]] = {}
        self._lock = threading.Lock()

    @property
    def registry(self) -> EntityRegistry:
        return self._registry

    def type_name(self, entity_type: EntityType) -> str:
        """Cache key for ``entity_type``: the canonical name of its class."""
        return EntityRegistry.canonical_name(self._registry.resolve(entity_type))

    def construct(self, entity_type: EntityType) -> Any:
        """Default-construct an instance of ``entity_type``."""
        cls = self._registry.resolve(entity_type)
        try:
            return cls()
        except TypeError as exc:
            raise ReflectionError(
                EntityRegistry.canonical_name(cls),
                f"no default constructor: {exc}",
            ) from exc

    def resolve(self, entity_type: EntityType) -> Mapping[str, FieldDescriptor]:
        cls = self._registry.resolve(entity_type)
        key = EntityRegistry.canonical_name(cls)
        entry = self._entries.get(key)
        if entry is not None:
            return entry

        sample = self.construct(cls)
        built = MappingProxyType({
            name: FieldDescriptor(key, name) for name in discover_fields(cls, sample)
        })
        with self._lock:
            entry = self._entries.setdefault(key, built)
        if entry is built:
            logger.debug(
                "metadata_cached",
                extra={"cached_type": key, "field_count": len(built)},
            )
        return entry

    def cached_types(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._entries)

    def __contains__(self, entity_type: EntityType) -> bool:
        try:
            key = self.type_name(entity_type)
        except ReflectionError:
            return False
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
