"""
Tests for closing_kernel.services.deadline_validator.

Clock is pinned to 2024-12-22; the December 2024 cutoff is 2024-12-20.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from closing_kernel.domain.clock import DeterministicClock
from closing_kernel.exceptions import (
    InvalidGracePeriodError,
    PeriodNotFoundError,
    ProcessNotFoundError,
)
from closing_kernel.services.deadline_validator import DeadlineValidator

CUTOFF = date(2024, 12, 20)


@pytest.fixture
def december(make_period):
    return make_period(12, 2024, CUTOFF)


class TestValidate:
    def test_within_grace_period_allowed(self, validator, december, make_process):
        make_process("P1", grace_period_days=2)

        check = validator.validate("P1", 12, 2024)

        assert check.allowed
        assert check.reason is None
        assert check.deadline == date(2024, 12, 22)
        assert not check.overridden

    def test_past_deadline_blocked(self, validator, december, make_process):
        make_process("P2", description="Carrier fees", grace_period_days=1)

        check = validator.validate("P2", 12, 2024)

        assert not check.allowed
        assert check.deadline == date(2024, 12, 21)
        assert "Carrier fees" in check.reason
        assert "1 day(s)" in check.reason
        assert "21/12/2024" in check.reason

    def test_past_deadline_with_override_allowed(self, validator, december, make_process):
        make_process("P2", grace_period_days=1)

        check = validator.validate("P2", 12, 2024, override_privilege=True)

        assert check.allowed
        assert check.overridden
        assert check.reason is None

    def test_override_not_flagged_when_inside_window(self, validator, december, make_process):
        make_process("P1", grace_period_days=5)

        check = validator.validate("P1", 12, 2024, override_privilege=True)

        assert check.allowed
        assert not check.overridden

    def test_historical_period_skips_lookups(self, validator, make_process):
        # No period and no process exist for November; still allowed
        check = validator.validate("UNKNOWN", 11, 2024)

        assert check.allowed
        assert check.deadline is None

    def test_missing_current_period_raises(self, validator, make_process):
        make_process("P1")

        with pytest.raises(PeriodNotFoundError) as exc_info:
            validator.validate("P1", 12, 2024)

        assert exc_info.value.month == 12
        assert exc_info.value.year == 2024
        assert "12/2024" in str(exc_info.value)

    def test_unknown_process_raises(self, validator, december):
        with pytest.raises(ProcessNotFoundError) as exc_info:
            validator.validate("NOPE", 12, 2024)

        assert exc_info.value.process_code == "NOPE"

    def test_inactive_process_raises(self, validator, december, make_process):
        make_process("OLD", active=False, grace_period_days=30)

        with pytest.raises(ProcessNotFoundError):
            validator.validate("OLD", 12, 2024)

    def test_negative_grace_period_is_reference_data_error(self, validator, december, make_process):
        make_process("P9", grace_period_days=-1)

        with pytest.raises(InvalidGracePeriodError) as exc_info:
            validator.validate("P9", 12, 2024)

        assert exc_info.value.details() == {"process_code": "P9", "grace_period_days": -1}

    def test_negative_grace_ignored_for_historical_period(self, validator, make_process):
        make_process("P9", grace_period_days=-1)

        assert validator.validate("P9", 11, 2024).allowed

    def test_today_uses_business_timezone(
        self, period_selector, process_selector, december, make_process,
    ):
        make_process("P2", grace_period_days=1)
        # 2024-12-22 02:00 UTC is 2024-12-21 23:00 at UTC-3: still inside
        clock = DeterministicClock(datetime(2024, 12, 22, 2, 0, tzinfo=timezone.utc))
        validator = DeadlineValidator(
            period_selector, process_selector, clock, timezone(timedelta(hours=-3)),
        )

        assert validator.validate("P2", 12, 2024).allowed

    def test_deadline_exceeded_logged(self, validator, december, make_process, captured_logs):
        make_process("P2", grace_period_days=1)

        validator.validate("P2", 12, 2024)

        events = [r for r in captured_logs() if r["message"] == "deadline_exceeded"]
        assert len(events) == 1
        assert events[0]["process_code"] == "P2"
        assert events[0]["deadline"] == "2024-12-21"

    def test_override_logged_as_warning(self, validator, december, make_process, captured_logs):
        make_process("P2", grace_period_days=1)

        validator.validate("P2", 12, 2024, override_privilege=True)

        events = [r for r in captured_logs() if r["message"] == "deadline_overridden"]
        assert len(events) == 1
        assert events[0]["level"] == "WARNING"


class TestValidateMany:
    def test_partitions_every_code(self, validator, december, make_process):
        make_process("P1", grace_period_days=2)
        make_process("P2", grace_period_days=1)
        make_process("P3", grace_period_days=0)

        report = validator.validate_many(["P1", "P2", "P3"], 12, 2024)

        assert report.valid == ("P1",)
        assert [v.code for v in report.invalid] == ["P2", "P3"]
        assert not report.all_valid

    def test_override_makes_everything_valid(self, validator, december, make_process):
        make_process("P1", grace_period_days=2)
        make_process("P2", grace_period_days=1)

        report = validator.validate_many(["P1", "P2"], 12, 2024, override_privilege=True)

        assert report.valid == ("P1", "P2")
        assert report.all_valid

    def test_historical_period_all_valid(self, validator):
        report = validator.validate_many(["A", "B"], 1, 2020)

        assert report.valid == ("A", "B")
        assert report.invalid == ()

    def test_unknown_code_aborts(self, validator, december, make_process):
        make_process("P1", grace_period_days=2)

        with pytest.raises(ProcessNotFoundError):
            validator.validate_many(["P1", "GHOST"], 12, 2024)
