"""
HydratorService -- populate typed entities from loosely-typed source data.

Responsibility:
    Entry point for data-access code that has raw query results (dicts,
    SQLAlchemy rows, plain objects) and wants domain entity instances.
    Resolves entity metadata, walks the mapping, coerces each value and
    assigns it into a freshly constructed entity.

Architecture position:
    Kernel > Services -- imperative shell over the pure domain functions
    in ``hydrator_kernel.domain``. Owns one MetadataCache.

Invariants enforced:
    - Presence mismatches are tolerated: a source key that is absent (or
      None) or a target field the entity lacks is logged at WARNING and
      skipped; the entity keeps its default for that field.
    - Shape mismatches are fatal: a malformed mapping entry or a value that
      cannot be coerced aborts the hydration; no partially hydrated entity
      is returned.
    - Entries are applied in mapping order; when two entries target the
      same field, the last one applied wins.

Failure modes:
    - ReflectionError, InvalidMappingError, TypeMismatchError,
      UnsupportedValueTypeError, UnsupportedSourceError (see exceptions.py).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from hydrator_kernel.domain.coercion import coerce_value
from hydrator_kernel.domain.inference import infer_mapping
from hydrator_kernel.domain.mapping import RawMapping, iter_entries
from hydrator_kernel.domain.metadata import (
    EntityRegistry,
    EntityType,
    MetadataCache,
)
from hydrator_kernel.domain.normalizer import normalize_source
from hydrator_kernel.domain.types import MappingEntry
from hydrator_kernel.logging_config import LogContext, get_logger

MISSING_SOURCE_TEMPLATE = (
    "object missing property %(source_key)s when hydrating %(entity_type)s"
)
MISSING_FIELD_TEMPLATE = (
    "entity missing property %(target_field)s for %(source_key)s "
    "when hydrating %(entity_type)s"
)


class HydratorService:
    """Hydrates entity instances from records, rows and objects."""

    def __init__(
        self,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        registry: EntityRegistry | None = None,
    ):
        self._logger = logger or get_logger("hydrator")
        self._metadata = MetadataCache(registry)

    @property
    def logger(self) -> logging.Logger | logging.LoggerAdapter:
        return self._logger

    @logger.setter
    def logger(self, logger: logging.Logger | logging.LoggerAdapter) -> None:
        self._logger = logger

    @property
    def metadata(self) -> MetadataCache:
        return self._metadata

    # -------------------------------------------------------------------------
    # Public entry points
    # -------------------------------------------------------------------------

    def hydrate_into(
        self,
        entity_type: EntityType,
        source: Any,
        mapping: RawMapping | Iterable[MappingEntry],
    ) -> Any:
        """
        Hydrate ``entity_type`` from ``source`` using an explicit mapping.

        Args:
            entity_type: Entity class, registered alias or import path.
            source: Mapping, SQLAlchemy Row, or object whose public
                attributes are read.
            mapping: ``{source_key: field_name | {"name": ..., "type": ...}}``
                or an iterable of MappingEntry.

        Returns:
            A new instance of the entity class.
        """
        bag = normalize_source(source)
        return self._hydrate_bag(entity_type, bag, mapping)

    def simple_hydrate(self, entity_type: EntityType, record: Mapping[str, Any]) -> Any:
        """Hydrate from a flat record, inferring the mapping from its values."""
        type_name = self._metadata.type_name(entity_type)
        mapping = infer_mapping(record, type_name)
        return self._hydrate_bag(entity_type, record, mapping)

    # -------------------------------------------------------------------------
    # Assignment routine
    # -------------------------------------------------------------------------

    def _hydrate_bag(
        self,
        entity_type: EntityType,
        bag: Mapping[str, Any],
        mapping: RawMapping | Iterable[MappingEntry],
    ) -> Any:
        fields = self._metadata.resolve(entity_type)
        type_name = self._metadata.type_name(entity_type)
        entity = self._metadata.construct(entity_type)
        assigned = skipped = 0

        with LogContext.bind(entity_type=type_name):
            for entry in iter_entries(mapping, type_name):
                context = {
                    "source_key": entry.source_key,
                    "target_field": entry.target_field,
                    "entity_type": type_name,
                }
                if bag.get(entry.source_key) is None:
                    self._logger.warning(MISSING_SOURCE_TEMPLATE, context, extra=context)
                    skipped += 1
                    continue
                descriptor = fields.get(entry.target_field)
                if descriptor is None:
                    self._logger.warning(MISSING_FIELD_TEMPLATE, context, extra=context)
                    skipped += 1
                    continue

                value = coerce_value(
                    bag[entry.source_key],
                    entry.target_type,
                    target_field=entry.target_field,
                    entity_type=type_name,
                    source_key=entry.source_key,
                )
                descriptor.assign(entity, value)
                assigned += 1

            self._logger.debug(
                "entity_hydrated",
                extra={"assigned_count": assigned, "skipped_count": skipped},
            )
        return entity
