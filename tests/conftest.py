"""
Pytest fixtures for the materials kernel test suite.

Provides:
- Structured logging configured for the suite, plus log capture
- Store / processor / undo / service fixtures over a recording gateway
- A background notifier over a recording channel
- An in-memory SQLite engine for the SQL gateway tests

Factories and doubles live in ``tests/support.py``.
"""

import json
import logging
from io import StringIO

import pytest

from materials_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from materials_kernel.domain.clock import DeterministicClock
from materials_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from materials_kernel.services.inventory_store import InventoryStore
from materials_kernel.services.materials_service import MaterialsService
from materials_kernel.services.notifier import BackgroundNotifier
from materials_kernel.services.scan_processor import ScanProcessor
from materials_kernel.services.undo_engine import UndoEngine
from tests.support import FIXED_TIME, RecordingChannel, RecordingGateway


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow_locks: mark test as waiting on thread barriers"
    )


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
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
    Capture materials_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.process_scan("SN1", "receive")
            logs = captured_logs()
            assert any(r["message"] == "scan_applied" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("materials_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(FIXED_TIME)


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def store(gateway):
    store = InventoryStore(gateway)
    gateway.calls.clear()
    return store


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def notifier(channel):
    notifier = BackgroundNotifier(channel)
    yield notifier
    notifier.close()


@pytest.fixture
def seed(store, gateway):
    """Add materials to the store, then forget the resulting gateway calls."""

    def _seed(*materials):
        for material in materials:
            store.add(material)
        gateway.calls.clear()
        return materials[0] if len(materials) == 1 else materials

    return _seed


@pytest.fixture
def scan_processor(store, deterministic_clock):
    return ScanProcessor(store, clock=deterministic_clock)


@pytest.fixture
def undo_engine(store, deterministic_clock):
    return UndoEngine(store, clock=deterministic_clock)


@pytest.fixture
def service(gateway, deterministic_clock, notifier):
    return MaterialsService(gateway, clock=deterministic_clock, notifier=notifier)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def sql_session_factory():
    """Fresh in-memory SQLite schema per test."""
    init_engine_from_url("sqlite+pysqlite:///:memory:")
    create_tables()
    yield get_session_factory()
    drop_tables()
    reset_engine()
