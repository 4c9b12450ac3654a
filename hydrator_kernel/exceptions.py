"""
Typed Exception Hierarchy for the Hydrator Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the hydrator are data-access layers. They need to tell a broken
mapping (programmer bug) apart from a badly shaped row (data bug) without
parsing message strings, so:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, log-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        user = hydrator.hydrate_into("User", row, USER_MAPPING)
    except TypeMismatchError as e:
        log.error("bad column", extra={"column": e.source_key, "code": e.code})
        raise

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    HydrationError (base)
    |
    +-- ReflectionError            entity type cannot be resolved/constructed
    +-- InvalidMappingError        mapping entry has no target field name
    +-- TypeMismatchError          value cannot be coerced to declared type
    +-- UnsupportedValueTypeError  mapping inference met an unsupported value
    +-- UnsupportedSourceError     source is neither a record nor an object
    +-- MappingDefinitionError     YAML mapping definition is malformed

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                        | When Raised
----------------------------|-----------------------------------------------
REFLECTION_ERROR            | Unknown entity type, or no default constructor
INVALID_MAPPING             | Structured mapping entry missing ``name``
TYPE_MISMATCH               | int/timestamp coercion failed
UNSUPPORTED_VALUE_TYPE      | simple_hydrate() met a non int/str/date value
UNSUPPORTED_SOURCE          | hydrate_into() got e.g. a str or None as source
INVALID_MAPPING_DEFINITION  | YAML mapping document failed to parse

Missing source keys and missing entity fields are NOT errors: they are
logged at WARNING and the entry is skipped.
"""


class HydrationError(Exception):
    """
    Base exception for all hydrator errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "HYDRATION_ERROR"


class ReflectionError(HydrationError):
    """Entity type could not be resolved or default-constructed."""

    code: str = "REFLECTION_ERROR"

    def __init__(self, entity_type: str, reason: str):
        self.entity_type = entity_type
        self.reason = reason
        super().__init__(f"Cannot reflect entity {entity_type}: {reason}")


class InvalidMappingError(HydrationError):
    """
    Structured mapping entry has no target field name.

    This aborts the whole hydration: it is a caller bug, not data drift.
    """

    code: str = "INVALID_MAPPING"

    def __init__(self, entity_type: str, source_key: str):
        self.entity_type = entity_type
        self.source_key = source_key
        super().__init__(
            f"Missing `name` in hydrate mapping for entity {entity_type} "
            f"source key {source_key}"
        )


class TypeMismatchError(HydrationError):
    """Raw value cannot be coerced to the declared target type."""

    code: str = "TYPE_MISMATCH"

    def __init__(
        self,
        actual_type: str,
        target_field: str,
        entity_type: str,
        source_key: str,
    ):
        self.actual_type = actual_type
        self.target_field = target_field
        self.entity_type = entity_type
        self.source_key = source_key
        super().__init__(
            f"Unaccepted type {actual_type} for {target_field} in hydrate "
            f"mapping for entity {entity_type} source key {source_key}"
        )


class UnsupportedValueTypeError(HydrationError):
    """Mapping inference found a value that is not int, str or date/time."""

    code: str = "UNSUPPORTED_VALUE_TYPE"

    def __init__(self, actual_type: str, source_key: str, entity_type: str):
        self.actual_type = actual_type
        self.source_key = source_key
        self.entity_type = entity_type
        super().__init__(
            f"Unaccepted source value {actual_type} for {source_key} in "
            f"simple_hydrate for entity {entity_type}"
        )


class UnsupportedSourceError(HydrationError):
    """Hydration source is neither a key/value record nor an object instance."""

    code: str = "UNSUPPORTED_SOURCE"

    def __init__(self, actual_type: str):
        self.actual_type = actual_type
        super().__init__(
            f"Cannot hydrate from source of type {actual_type}: expected a "
            f"mapping, a result row or an object instance"
        )


class MappingDefinitionError(HydrationError):
    """A mapping definition document is malformed."""

    code: str = "INVALID_MAPPING_DEFINITION"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid mapping definition {source}: {reason}")
