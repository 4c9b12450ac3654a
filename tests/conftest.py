"""
Pytest fixtures for the hydrator test suite.

Provides:
- Structured logging configured at DEBUG for every test session
- ``captured_logs`` for asserting on JSON log records
- ``registry`` / ``hydrator`` wired with the entities in ``tests.entities``
"""

import json
import logging
from io import StringIO

import pytest

from hydrator_kernel.domain.metadata import EntityRegistry
from hydrator_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from hydrator_kernel.services.hydrator_service import HydratorService
from tests.entities import (
    Customer,
    FrozenUser,
    LegacyRecord,
    NeedsArguments,
    PlainDefaults,
    SlottedPoint,
    User,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture hydrator_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, hydrator):
            hydrator.hydrate_into(...)
            logs = captured_logs()
            assert any(r["level"] == "WARNING" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("hydrator_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


@pytest.fixture
def warnings_of():
    """Filter captured records down to WARNING messages."""

    def _filter(records: list[dict]) -> list[dict]:
        return [r for r in records if r["level"] == "WARNING"]

    return _filter


# =============================================================================
# Hydrator fixtures
# =============================================================================


@pytest.fixture
def registry() -> EntityRegistry:
    reg = EntityRegistry()
    for cls in (User, FrozenUser, SlottedPoint, LegacyRecord, PlainDefaults, NeedsArguments, Customer):
        reg.register(cls)
    return reg


@pytest.fixture
def hydrator(registry) -> HydratorService:
    return HydratorService(registry=registry)
