"""
Pytest fixtures for the closing engine test suite.

Provides:
- In-memory SQLite sessions (no PostgreSQL or Oracle required)
- A deterministic clock pinned to 2024-12-22
- Factories for catalog, calendar and execution-log rows
- A recording fake for the stored-procedure invoker (tests.fakes)
- Structured-log capture
"""

import json
import logging
from datetime import date, datetime, timezone
from io import StringIO

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from closing_kernel.db.base import Base
from closing_kernel.domain.clock import DeterministicClock
from closing_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from closing_kernel.models import ClosingPeriod, ExecutionLogEntry, ProcessDefinition
from closing_kernel.selectors import (
    ClosingPeriodSelector,
    HistorySelector,
    ProcessSelector,
)
from closing_kernel.services.deadline_validator import DeadlineValidator

from tests.fakes import RecordingInvoker

RESERVED_CODES = frozenset({"70000008", "70000009"})

# 2024-12-22 12:00 local time in a UTC-3 business timezone
TODAY = date(2024, 12, 22)
NOW = datetime(2024, 12, 22, 15, 0, 0, tzinfo=timezone.utc)


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
    Capture closing_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, executor):
            executor.execute(request)
            logs = captured_logs()
            assert any(r["message"] == "closing_run_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("closing_kernel")
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
# Database fixtures
# =============================================================================


@pytest.fixture
def db_session():
    """In-memory SQLite session for fast unit tests."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def clock():
    return DeterministicClock(fixed_time=NOW)


@pytest.fixture
def make_process(db_session):
    """Factory for catalog rows; defaults to an active COM/P process."""

    def _make(
        code: str,
        *,
        category: str = "COM",
        data_type: str = "P",
        description: str | None = None,
        order: int = 0,
        grace_period_days: int = 0,
        active: bool = True,
    ) -> ProcessDefinition:
        model = ProcessDefinition(
            code=code,
            category=category,
            data_type=data_type,
            description=description or f"Process {code}",
            order=order,
            grace_period_days=grace_period_days,
            active=active,
        )
        db_session.add(model)
        db_session.flush()
        return model

    return _make


@pytest.fixture
def make_period(db_session):
    def _make(month: int, year: int, cutoff_date: date) -> ClosingPeriod:
        model = ClosingPeriod(month=month, year=year, cutoff_date=cutoff_date)
        db_session.add(model)
        db_session.flush()
        return model

    return _make


@pytest.fixture
def make_log_entry(db_session):
    def _make(
        process_code: str,
        month: int,
        year: int,
        executed_at: datetime,
        *,
        category: str = "COM",
        executed_by: str | None = None,
    ) -> ExecutionLogEntry:
        model = ExecutionLogEntry(
            category=category,
            process_code=process_code,
            month=month,
            year=year,
            executed_at=executed_at,
            executed_by=executed_by,
        )
        db_session.add(model)
        db_session.flush()
        return model

    return _make


@pytest.fixture
def process_selector(db_session):
    return ProcessSelector(db_session, RESERVED_CODES)


@pytest.fixture
def period_selector(db_session):
    return ClosingPeriodSelector(db_session)


@pytest.fixture
def history_selector(db_session):
    return HistorySelector(db_session)


@pytest.fixture
def validator(period_selector, process_selector, clock):
    return DeadlineValidator(period_selector, process_selector, clock)


@pytest.fixture
def invoker():
    return RecordingInvoker()
