"""
Property-based tests (hypothesis) for the closing engine's invariants.

- Historical periods are always allowed, whatever the grace period or
  override flag.
- Deadline gate: without override, a late process means zero invocations.
- Partial failure accounting: succeeded + failed == N, and every failing
  code appears exactly once in ``failed``.
"""

from datetime import date, datetime, timezone

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from closing_kernel.db.base import Base
from closing_kernel.domain.clock import DeterministicClock
from closing_kernel.exceptions import DeadlineViolationError
from closing_kernel.models import ClosingPeriod, ProcessDefinition
from closing_kernel.selectors import ClosingPeriodSelector, ProcessSelector
from closing_kernel.services.deadline_validator import DeadlineValidator

from closing_batch.domain.types import ExecutionRequest
from closing_batch.services.executor import BatchExecutor
from tests.fakes import RecordingInvoker

TODAY = datetime(2024, 12, 22, 15, 0, tzinfo=timezone.utc)
CUTOFF = date(2024, 12, 20)

historical_periods = st.tuples(
    st.integers(min_value=1, max_value=12),
    st.integers(min_value=2000, max_value=2100),
).filter(lambda p: p != (12, 2024))


def _session_with(processes: dict[str, int]):
    """Fresh in-memory database holding the given {code: grace_days} catalog."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    session.add(ClosingPeriod(month=12, year=2024, cutoff_date=CUTOFF))
    for order, (code, grace) in enumerate(processes.items()):
        session.add(
            ProcessDefinition(
                code=code,
                category="COM",
                data_type="P",
                description=f"Process {code}",
                order=order,
                grace_period_days=grace,
                active=True,
            )
        )
    session.flush()
    return engine, session


def _executor(session, invoker) -> BatchExecutor:
    processes = ProcessSelector(session, reserved_codes=())
    validator = DeadlineValidator(
        ClosingPeriodSelector(session), processes, DeterministicClock(TODAY),
    )
    return BatchExecutor(validator, processes, invoker)


process_codes = st.lists(
    st.text(alphabet="0123456789", min_size=8, max_size=8),
    min_size=1,
    max_size=8,
    unique=True,
)


class TestHistoricalPeriods:
    @given(
        period=historical_periods,
        grace=st.integers(min_value=0, max_value=60),
        override=st.booleans(),
    )
    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_always_allowed(self, period, grace, override):
        engine, session = _session_with({"10000001": grace})
        try:
            processes = ProcessSelector(session, reserved_codes=())
            validator = DeadlineValidator(
                ClosingPeriodSelector(session), processes, DeterministicClock(TODAY),
            )

            check = validator.validate("10000001", period[0], period[1], override)

            assert check.allowed
        finally:
            session.close()
            engine.dispose()


class TestDeadlineGate:
    @given(
        codes=process_codes,
        late_index=st.integers(min_value=0, max_value=7),
    )
    @settings(max_examples=30, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_late_code_means_no_invocation(self, codes, late_index):
        late = codes[late_index % len(codes)]
        # grace 0 -> deadline 12-20 (late); grace 10 -> 12-30 (on time)
        engine, session = _session_with({c: (0 if c == late else 10) for c in codes})
        invoker = RecordingInvoker()
        try:
            with pytest.raises(DeadlineViolationError) as exc_info:
                _executor(session, invoker).execute(
                    ExecutionRequest(
                        category="COM",
                        data_type="P",
                        month=12,
                        year=2024,
                        process_codes=tuple(codes),
                    )
                )

            assert exc_info.value.process_codes == (late,)
            assert invoker.calls == []
        finally:
            session.close()
            engine.dispose()

    @given(codes=process_codes)
    @settings(max_examples=30, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_override_never_blocks(self, codes):
        engine, session = _session_with({c: 0 for c in codes})
        invoker = RecordingInvoker()
        try:
            outcome = _executor(session, invoker).execute(
                ExecutionRequest(
                    category="COM",
                    data_type="P",
                    month=12,
                    year=2024,
                    process_codes=tuple(codes),
                    override_privilege=True,
                )
            )

            assert outcome.succeeded == tuple(codes)
        finally:
            session.close()
            engine.dispose()


class TestPartialFailure:
    @given(data=st.data(), codes=process_codes)
    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_every_code_accounted_once(self, data, codes):
        failing = data.draw(st.sets(st.sampled_from(codes)))
        unknown = data.draw(st.sets(st.sampled_from(codes)))
        catalog = {c: 10 for c in codes if c not in unknown}
        engine, session = _session_with(catalog)
        invoker = RecordingInvoker(failures={c: f"ORA-20000: {c} failed" for c in failing})
        try:
            outcome = _executor(session, invoker).execute(
                ExecutionRequest(
                    category="COM",
                    data_type="P",
                    month=12,
                    year=2024,
                    process_codes=tuple(codes),
                )
            )

            assert len(outcome.succeeded) + len(outcome.failed) == len(codes)
            failed_codes = [f.code for f in outcome.failed]
            assert len(failed_codes) == len(set(failed_codes))
            assert set(failed_codes) == (failing | unknown) & set(codes)
            assert list(outcome.succeeded) == [
                c for c in codes if c not in failing and c not in unknown
            ]
            assert invoker.invoked_codes == [c for c in codes if c not in unknown]
        finally:
            session.close()
            engine.dispose()
